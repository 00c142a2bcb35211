from typing import Iterable

from engine.slices import validate_slice
from engine.state import AggregationState, ParticipantSlice, UnitComboBucket

COMBO_SEP = "|"


def combos_of_three(items: Iterable[str]) -> list[str]:
    """Every unordered 3-item subset of the distinct items, as sorted "a|b|c" keys."""
    uniq = sorted(set(items))
    out = []
    for i in range(len(uniq)):
        for j in range(i + 1, len(uniq)):
            for k in range(j + 1, len(uniq)):
                out.append(COMBO_SEP.join((uniq[i], uniq[j], uniq[k])))
    return out


def split_combo(combo_key: str) -> list[str]:
    return combo_key.split(COMBO_SEP)


def add_unit_combos(state: AggregationState, s: ParticipantSlice) -> None:
    validate_slice(s)
    for unit in s.units:
        for combo in combos_of_three(unit.items):
            key = (unit.unit_id, combo)
            bucket = state.combos.get(key)
            if bucket is None:
                bucket = UnitComboBucket(unit_id=unit.unit_id, combo_key=combo)
                state.combos[key] = bucket
            bucket.picks += 1
            if s.placement == 1:
                bucket.wins += 1
            bucket.sum_placement += s.placement
