import logging
import os

import config
from api.collector import (
    collect_match_ids,
    fetch_matches,
    resolve_puuids,
    seed_summoner_ids,
    slices_from_matches,
)
from api.routing import region_for
from engine.merge import merge_into
from engine.meta_store import build_snapshot, load_prior_state, versioned_name, write_snapshot
from engine.staging import load_seen_ids, save_seen_ids
from engine.stats_engine import aggregate_slices

logger = logging.getLogger("collect_meta")

RANKS_INCLUDED = ["DIAMOND", "MASTER", "GRANDMASTER", "CHALLENGER"]


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(message)s")
    cfg = config.aggregation_config()
    logger.info(
        f"[Config] patch={cfg.patch} platforms={','.join(config.PLATFORMS)} "
        f"seed={config.SEED_SUMMONERS} per={config.MATCHES_PER}"
    )

    state = load_prior_state(os.path.join(config.DATA_DIR, versioned_name(cfg.patch)), cfg.patch)

    # matches already folded into the resumed state must not be counted twice
    seen_path = os.path.join(config.DATA_DIR, "state", f"pipeline_seen_{cfg.patch}.json")
    seen = {} if state.is_empty() else load_seen_ids(seen_path)

    for platform in config.PLATFORMS:
        region = region_for(platform)
        logger.info(f"[Platform] {platform} seeding ladder...")
        ids = seed_summoner_ids(platform)
        puuids = resolve_puuids(platform, ids, cap=config.SEED_SUMMONERS)
        if not puuids:
            logger.warning(f"[Platform] {platform} no PUUIDs resolved")
            continue

        match_ids = [mid for mid in collect_match_ids(region, puuids, per=config.MATCHES_PER) if mid not in seen]
        matches = fetch_matches(region, match_ids)
        logger.info(f"[Platform] {platform} new matches={len(matches)}")

        slices = slices_from_matches(matches, platform, region, max_age_days=config.MAX_AGE_DAYS)
        merge_into(state, aggregate_slices(slices, cfg.patch))
        seen.update(dict.fromkeys(s.match_id for s in slices if s.match_id and s.patch == cfg.patch))

    payload = build_snapshot(
        state,
        cfg,
        run_info={
            "platforms": config.PLATFORMS,
            "ranks_included": RANKS_INCLUDED,
            "seed_summoners_per_platform": config.SEED_SUMMONERS,
            "matches_per_puuid": config.MATCHES_PER,
        },
    )
    versioned, current = write_snapshot(payload, config.DATA_DIR, cfg.patch)
    save_seen_ids(seen_path, seen)
    print(
        f"Wrote {versioned} and {current}: "
        f"{len(payload['comps_top20'])} comps, {len(payload['unit_item_meta'])} units"
    )


if __name__ == "__main__":
    main()
