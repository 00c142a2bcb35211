import json
import logging
import os
from typing import Iterable

from engine.slices import slice_from_record, slice_to_record
from engine.state import MalformedSliceError, ParticipantSlice

logger = logging.getLogger(__name__)

SEEN_IDS_KEEP = 500_000


def append_slices(path: str, slices: Iterable[ParticipantSlice]) -> int:
    lines = [json.dumps(slice_to_record(s)) for s in slices]
    if not lines:
        return 0

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return len(lines)


def read_staged_slices(directory: str, patch: str) -> list[ParticipantSlice]:
    """Load every staged slice of one patch from the *.ndjson files in directory."""
    if not os.path.isdir(directory):
        return []

    out = []
    bad = 0
    for name in sorted(os.listdir(directory)):
        if not name.endswith(".ndjson"):
            continue
        with open(os.path.join(directory, name), "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except ValueError:
                    bad += 1
                    continue
                if not isinstance(record, dict):
                    bad += 1
                    continue
                if record.get("patch") != patch:
                    continue
                try:
                    out.append(slice_from_record(record))
                except MalformedSliceError:
                    bad += 1

    if bad:
        logger.warning(f"[Staging] skipped {bad} unreadable lines in {directory}")
    return out


def load_seen_ids(path: str) -> dict[str, None]:
    """Seen match ids, oldest first, as an insertion-ordered dict."""
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return dict.fromkeys(str(x) for x in data)
    return {}


def save_seen_ids(path: str, ids: Iterable[str], keep: int = SEEN_IDS_KEEP) -> None:
    # ids arrive oldest first; past the cap the oldest are dropped
    kept = list(dict.fromkeys(ids))[-keep:] if keep else []
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(kept, f)
