import copy

from engine.state import (
    AggregationState,
    CompositionBucket,
    PatchMismatchError,
    UnitComboBucket,
)


def _merge_item_counts(dest: dict[str, dict[str, int]], src: dict[str, dict[str, int]]) -> None:
    for unit_id, freq in src.items():
        d = dest.setdefault(unit_id, {})
        for item, n in freq.items():
            d[item] = d.get(item, 0) + n


def _merge_composition(dest: CompositionBucket, src: CompositionBucket) -> None:
    dest.picks += src.picks
    dest.wins += src.wins
    dest.sum_placement += src.sum_placement
    # same signature implies the same unit_set, nothing to reconcile
    _merge_item_counts(dest.units, src.units)


def _merge_combo(dest: UnitComboBucket, src: UnitComboBucket) -> None:
    dest.picks += src.picks
    dest.wins += src.wins
    dest.sum_placement += src.sum_placement


def merge_into(target: AggregationState, delta: AggregationState) -> AggregationState:
    """Fold delta into target in place and return target. delta is not modified."""
    if target.patch != delta.patch:
        raise PatchMismatchError(f"cannot merge patch {delta.patch} into {target.patch}")

    for key, bucket in delta.compositions.items():
        existing = target.compositions.get(key)
        if existing is None:
            target.compositions[key] = copy.deepcopy(bucket)
        else:
            _merge_composition(existing, bucket)

    for key, bucket in delta.combos.items():
        existing = target.combos.get(key)
        if existing is None:
            target.combos[key] = copy.copy(bucket)
        else:
            _merge_combo(existing, bucket)

    return target


def merge_states(a: AggregationState, b: AggregationState) -> AggregationState:
    return merge_into(copy.deepcopy(a), b)
