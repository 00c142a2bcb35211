import re
import time
from typing import Any, Iterator

from engine.state import (
    MISSING_PLACEMENT,
    UNKNOWN_PATCH,
    MalformedSliceError,
    ParticipantSlice,
    UnitSlot,
)

RANKED_QUEUE = 1100  # TFT ranked standard

_PATCH_RE = re.compile(r"(\d+)\.(\d+)")


def normalize_patch(version: Any) -> str:
    """Reduce a game version string to major.minor, e.g. "Version 15.4.702.1234" -> "15.4"."""
    if not isinstance(version, str):
        return UNKNOWN_PATCH
    m = _PATCH_RE.search(version)
    if not m:
        return UNKNOWN_PATCH
    return f"{m.group(1)}.{m.group(2)}"


def _unit_items(unit: dict) -> list:
    items = unit.get("items")
    if isinstance(items, list):
        return items
    names = unit.get("itemNames")
    if isinstance(names, list):
        return names
    return []


def _require_dict(entry: Any, what: str) -> dict:
    if not isinstance(entry, dict):
        raise MalformedSliceError(f"{what} is not an object: {entry!r}")
    return entry


def _unit_slot(unit: Any) -> UnitSlot:
    unit = _require_dict(unit, "unit")
    cid = unit.get("character_id")
    if cid is None or cid == "":
        raise MalformedSliceError(f"unit without character_id: {unit!r}")
    return UnitSlot(unit_id=str(cid), items=tuple(str(it) for it in _unit_items(unit)))


def normalize_participant(
    participant: dict,
    game_version: Any,
    match_id: str | None = None,
    platform: str | None = None,
    region: str | None = None,
) -> ParticipantSlice:
    participant = _require_dict(participant, "participant")
    placement = participant.get("placement")
    s = ParticipantSlice(
        patch=normalize_patch(game_version),
        placement=MISSING_PLACEMENT if placement is None else placement,
        units=tuple(_unit_slot(u) for u in participant.get("units") or []),
        match_id=match_id,
        platform=platform,
        region=region,
    )
    validate_slice(s)
    return s


def slice_from_record(record: dict) -> ParticipantSlice:
    """Rebuild a slice from a staged record (patch already normalized)."""
    record = _require_dict(record, "record")
    patch = record.get("patch")
    placement = record.get("placement")
    s = ParticipantSlice(
        patch=patch if isinstance(patch, str) and patch else UNKNOWN_PATCH,
        placement=MISSING_PLACEMENT if placement is None else placement,
        units=tuple(_unit_slot(u) for u in record.get("units") or []),
        match_id=record.get("match_id"),
        platform=record.get("platform"),
        region=record.get("region"),
    )
    validate_slice(s)
    return s


def slice_to_record(s: ParticipantSlice) -> dict:
    return {
        "match_id": s.match_id,
        "platform": s.platform,
        "region": s.region,
        "patch": s.patch,
        "placement": s.placement,
        "units": [{"character_id": u.unit_id, "items": list(u.items)} for u in s.units],
    }


def validate_slice(s: ParticipantSlice) -> None:
    if isinstance(s.placement, bool) or not isinstance(s.placement, int):
        raise MalformedSliceError(f"placement must be an int, got {s.placement!r}")
    if not 1 <= s.placement <= MISSING_PLACEMENT:
        raise MalformedSliceError(f"placement out of range: {s.placement}")
    if not s.patch:
        raise MalformedSliceError("empty patch")
    for u in s.units:
        if not isinstance(u.unit_id, str) or not u.unit_id:
            raise MalformedSliceError(f"bad unit id: {u.unit_id!r}")
        if any(not isinstance(it, str) for it in u.items):
            raise MalformedSliceError(f"non-string item on {u.unit_id}")


def is_ranked(match: dict) -> bool:
    info = match.get("info") or {}
    queue = info.get("queue_id", info.get("queueId"))
    try:
        return int(queue) == RANKED_QUEUE
    except (TypeError, ValueError):
        return False


def within_age(info: dict, max_age_days: int, now: float | None = None) -> bool:
    if not max_age_days:
        return True
    t = info.get("game_datetime", info.get("gameDateTime"))
    if not isinstance(t, (int, float)) or isinstance(t, bool):
        return True
    if t < 1e12:  # seconds, not milliseconds
        t *= 1000
    now_ms = (time.time() if now is None else now) * 1000
    return (now_ms - t) / 86_400_000 <= max_age_days


def slices_from_match(
    match: dict,
    platform: str | None = None,
    region: str | None = None,
) -> Iterator[ParticipantSlice]:
    info = match.get("info") or {}
    match_id = (match.get("metadata") or {}).get("match_id")
    version = info.get("game_version")
    for p in info.get("participants") or []:
        yield normalize_participant(p, version, match_id=match_id, platform=platform, region=region)
