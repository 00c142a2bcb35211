import logging
from typing import Iterable

from engine.comp_builder import composition_signature, unit_set
from engine.item_combos import add_unit_combos
from engine.slices import validate_slice
from engine.state import AggregationState, CompositionBucket, ParticipantSlice

logger = logging.getLogger(__name__)


def add_composition(state: AggregationState, s: ParticipantSlice) -> None:
    validate_slice(s)
    key = (s.patch, composition_signature(s.units))
    bucket = state.compositions.get(key)
    if bucket is None:
        bucket = CompositionBucket(patch=s.patch, signature=key[1], unit_set=unit_set(s.units))
        state.compositions[key] = bucket

    bucket.picks += 1
    if s.placement == 1:
        bucket.wins += 1
    bucket.sum_placement += s.placement

    for unit in s.units:
        freq = bucket.units.setdefault(unit.unit_id, {})
        for item in unit.items:
            freq[item] = freq.get(item, 0) + 1


def add_slice(state: AggregationState, s: ParticipantSlice) -> None:
    add_composition(state, s)
    add_unit_combos(state, s)


def aggregate_slices(slices: Iterable[ParticipantSlice], patch: str) -> AggregationState:
    """Fold slices of one patch into a fresh state.

    Slices from any other patch (including "unknown") are skipped and counted,
    so a run never mixes patches.
    """
    state = AggregationState(patch=patch)
    used = skipped = 0
    for s in slices:
        if s.patch != patch:
            skipped += 1
            continue
        add_slice(state, s)
        used += 1

    if skipped:
        logger.info(f"[Aggregate] patch={patch} used={used} skipped_other_patch={skipped}")
    else:
        logger.debug(f"[Aggregate] patch={patch} used={used}")
    return state
