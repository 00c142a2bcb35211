import datetime
import json
import logging
import os
from dataclasses import asdict
from typing import Any

from engine.comp_builder import composition_key_from_str, composition_key_to_str
from engine.ranking import finalize_comps, finalize_unit_combos
from engine.state import (
    AggregationConfig,
    AggregationState,
    CompositionBucket,
    UnitComboBucket,
)

logger = logging.getLogger(__name__)

CURRENT_NAME = "meta_current.json"


def versioned_name(patch: str) -> str:
    return f"meta_{patch}.json"


def state_to_dict(state: AggregationState) -> dict:
    comps = []
    for key in sorted(state.compositions):
        b = state.compositions[key]
        comps.append({
            "key": composition_key_to_str(key),
            "patch": b.patch,
            "picks": b.picks,
            "wins": b.wins,
            "sum_placement": b.sum_placement,
            "unit_set": list(b.unit_set),
            "units": [[u, sorted(b.units[u].items())] for u in sorted(b.units)],
        })

    by_unit: dict[str, list] = {}
    for unit_id, combo_key in sorted(state.combos):
        b = state.combos[(unit_id, combo_key)]
        by_unit.setdefault(unit_id, []).append(
            [combo_key, {"picks": b.picks, "wins": b.wins, "sum_placement": b.sum_placement}]
        )

    return {
        "patch": state.patch,
        "__comp": comps,
        "__unitCombos": [{"unit": u, "combos": combos} for u, combos in by_unit.items()],
    }


def state_from_dict(raw: dict) -> AggregationState:
    state = AggregationState(patch=raw["patch"])

    for row in raw.get("__comp", []):
        key = composition_key_from_str(row["key"])
        state.compositions[key] = CompositionBucket(
            patch=row.get("patch", key[0]),
            signature=key[1],
            unit_set=list(row.get("unit_set", [])),
            picks=int(row["picks"]),
            wins=int(row["wins"]),
            sum_placement=int(row["sum_placement"]),
            units={str(u): {str(it): int(n) for it, n in pairs} for u, pairs in row.get("units", [])},
        )

    for row in raw.get("__unitCombos", []):
        unit_id = str(row["unit"])
        for combo_key, counts in row.get("combos", []):
            state.combos[(unit_id, combo_key)] = UnitComboBucket(
                unit_id=unit_id,
                combo_key=combo_key,
                picks=int(counts["picks"]),
                wins=int(counts["wins"]),
                sum_placement=int(counts["sum_placement"]),
            )

    return state


def load_prior_state(path: str, patch: str) -> AggregationState:
    """Resume from a stored snapshot, or start cold.

    Counts from another patch are not comparable, so a stored state for a
    different patch is discarded rather than merged.
    """
    if not os.path.exists(path):
        return AggregationState(patch=patch)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        stored_patch = raw.get("patch")
        if stored_patch != patch:
            logger.info(f"[Reset] found previous patch {stored_patch}; starting fresh for {patch}")
            return AggregationState(patch=patch)
        state = state_from_dict(raw)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning(f"[Reset] could not read prior state {path}: {e}")
        return AggregationState(patch=patch)

    logger.info(
        f"[Resume] previous buckets found for patch {patch} "
        f"(comps={len(state.compositions)} combos={len(state.combos)})"
    )
    return state


def build_snapshot(
    state: AggregationState,
    config: AggregationConfig,
    generated_at: datetime.datetime | None = None,
    run_info: dict[str, Any] | None = None,
) -> dict:
    if generated_at is None:
        generated_at = datetime.datetime.now(datetime.timezone.utc)

    payload: dict[str, Any] = {
        "generated_at": generated_at.isoformat(),
        "patch": config.patch,
    }
    payload.update(run_info or {})
    payload["thresholds"] = {
        "min_picks_comp": config.min_picks_comp,
        "min_picks_item_combo": config.min_picks_item_combo,
    }
    payload["comps_top20"] = [asdict(r) for r in finalize_comps(state, config)]
    payload["unit_item_meta"] = [asdict(r) for r in finalize_unit_combos(state, config)]

    raw = state_to_dict(state)
    payload["__comp"] = raw["__comp"]
    payload["__unitCombos"] = raw["__unitCombos"]
    return payload


def write_snapshot(payload: dict, data_dir: str, patch: str) -> tuple[str, str]:
    os.makedirs(data_dir or ".", exist_ok=True)
    text = json.dumps(payload, indent=2)

    paths = (os.path.join(data_dir, versioned_name(patch)), os.path.join(data_dir, CURRENT_NAME))
    for path in paths:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    return paths
