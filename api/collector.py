import concurrent.futures
import logging
from typing import Callable, Iterable, TypeVar

import requests

from api.http import RiotApiError
from api.tft_league import DIVISIONS, MASTER_PLUS_TIERS, get_league_entries, get_master_plus_entries
from api.tft_match import get_match, get_match_ids_by_puuid
from api.tft_summoner import get_summoner_by_id
from engine.slices import is_ranked, slices_from_match, within_age
from engine.state import MalformedSliceError, ParticipantSlice

logger = logging.getLogger(__name__)

MAX_LOGGED_FAILURES = 8

T = TypeVar("T")
R = TypeVar("R")


def _fan_out(fn: Callable[[T], R], args: Iterable[T], workers: int, label: str) -> list[R]:
    """Run fn over args on a thread pool; failed calls are counted, not raised."""
    results = []
    failures = 0
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futs = {ex.submit(fn, a): a for a in args}
        for f in concurrent.futures.as_completed(futs):
            try:
                res = f.result()
            except (RiotApiError, requests.RequestException) as e:
                failures += 1
                if failures <= MAX_LOGGED_FAILURES:
                    logger.warning(f"[{label}] {futs[f]} failed: {e}")
                continue
            if res is not None:
                results.append(res)

    if failures > MAX_LOGGED_FAILURES:
        logger.warning(f"[{label}] {failures} requests failed in total")
    return results


def seed_summoner_ids(platform: str, diamond_pages: int = 10) -> list[str]:
    ids = []
    for tier in MASTER_PLUS_TIERS:
        try:
            entries = get_master_plus_entries(platform, tier)
        except RiotApiError as e:
            logger.warning(f"[League] {platform} {tier} failed: {e}")
            continue
        logger.info(f"[League] {platform} {tier} entries={len(entries)}")
        ids.extend(e["summonerId"] for e in entries if e.get("summonerId"))

    for division in DIVISIONS:
        for page in range(1, diamond_pages + 1):
            try:
                rows = get_league_entries(platform, "DIAMOND", division, page)
            except RiotApiError as e:
                logger.warning(f"[League] {platform} DIAMOND {division} page={page} failed: {e}")
                break
            logger.debug(f"[League] {platform} DIAMOND {division} page={page} rows={len(rows)}")
            if not rows:
                break
            ids.extend(e["summonerId"] for e in rows if e.get("summonerId"))

    return list(dict.fromkeys(ids))


def resolve_puuids(platform: str, summoner_ids: list[str], cap: int, workers: int = 8) -> list[str]:
    def lookup(sid):
        return get_summoner_by_id(platform, sid).get("puuid")

    puuids = sorted(set(_fan_out(lookup, summoner_ids[:cap], workers, f"Summoner {platform}")))
    logger.info(f"[PUUID] {platform} unique={len(puuids)}")
    return puuids


def collect_match_ids(region: str, puuids: list[str], per: int, workers: int = 8) -> set[str]:
    def ids_for(puuid):
        return get_match_ids_by_puuid(region, puuid, per)

    match_ids = set()
    for batch in _fan_out(ids_for, puuids, workers, f"MatchIDs {region}"):
        match_ids.update(batch)
    logger.info(f"[MatchIDs] {region} total={len(match_ids)}")
    return match_ids


def fetch_matches(region: str, match_ids: Iterable[str], workers: int = 4) -> list[dict]:
    def one(mid):
        return get_match(region, mid)

    return _fan_out(one, match_ids, workers, f"Match {region}")


def slices_from_matches(
    matches: Iterable[dict],
    platform: str,
    region: str,
    max_age_days: int = 0,
) -> list[ParticipantSlice]:
    """Keep ranked, recent matches and normalize their participants."""
    out = []
    drops = {"queue": 0, "age": 0, "empty": 0, "malformed": 0}
    for m in matches:
        info = m.get("info") if isinstance(m, dict) else None
        if not isinstance(info, dict):
            drops["malformed"] += 1
            continue
        if not is_ranked(m):
            drops["queue"] += 1
            continue
        if not within_age(info, max_age_days):
            drops["age"] += 1
            continue
        if not info.get("participants"):
            drops["empty"] += 1
            continue
        try:
            match_slices = list(slices_from_match(m, platform=platform, region=region))
        except MalformedSliceError as e:
            drops["malformed"] += 1
            logger.debug(f"[Filters] {platform} dropped match: {e}")
            continue
        out.extend(match_slices)

    logger.info(
        f"[Filters] {platform} slices={len(out)} dropQueue={drops['queue']} dropAge={drops['age']} "
        f"dropEmpty={drops['empty']} dropMalformed={drops['malformed']}"
    )
    return out
