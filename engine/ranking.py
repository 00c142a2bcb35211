from dataclasses import dataclass, field

from engine.item_combos import split_combo
from engine.state import AggregationConfig, AggregationState, UnitComboBucket

TOP_ITEMS_PER_UNIT = 3


@dataclass(frozen=True)
class UnitItemSummary:
    character_id: str
    item_freq: list[tuple[str, float]]
    top_items: list[str]


@dataclass(frozen=True)
class CompRow:
    composition: str
    avg_placement: float
    picks: int
    winrate: float
    unit_set: list[str]
    units: list[UnitItemSummary] = field(default_factory=list)


@dataclass(frozen=True)
class ComboRow:
    combo: list[str]
    picks: int
    avg_placement: float
    winrate: float


@dataclass(frozen=True)
class UnitComboRow:
    unit: str
    combos: list[ComboRow]


def avg_placement(sum_placement: int, picks: int) -> float:
    return round(sum_placement / picks, 2)


def winrate(wins: int, picks: int) -> float:
    return round(wins / picks * 100, 1)


def _unit_summary(unit_id: str, freq: dict[str, int]) -> UnitItemSummary:
    total = sum(freq.values()) or 1
    # count desc, then item id so tied frequencies rank the same on every run
    ranked = sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))
    return UnitItemSummary(
        character_id=unit_id,
        item_freq=[(item, n / total) for item, n in ranked],
        top_items=[item for item, _n in ranked[:TOP_ITEMS_PER_UNIT]],
    )


def finalize_comps(state: AggregationState, config: AggregationConfig) -> list[CompRow]:
    rows = []
    for bucket in state.compositions.values():
        if bucket.picks < config.min_picks_comp:
            continue
        rows.append(
            CompRow(
                composition=bucket.signature,
                avg_placement=avg_placement(bucket.sum_placement, bucket.picks),
                picks=bucket.picks,
                winrate=winrate(bucket.wins, bucket.picks),
                unit_set=list(bucket.unit_set),
                units=[_unit_summary(u, bucket.units[u]) for u in sorted(bucket.units)],
            )
        )

    rows.sort(key=lambda r: (r.avg_placement, -r.picks, r.composition))
    return rows[: config.top_comps]


def finalize_unit_combos(state: AggregationState, config: AggregationConfig) -> list[UnitComboRow]:
    by_unit: dict[str, list[UnitComboBucket]] = {}
    for bucket in state.combos.values():
        if bucket.picks < config.min_picks_item_combo:
            continue
        by_unit.setdefault(bucket.unit_id, []).append(bucket)

    out = []
    for unit_id in sorted(by_unit):
        ranked = sorted(
            by_unit[unit_id],
            key=lambda b: (avg_placement(b.sum_placement, b.picks), -b.picks, b.combo_key),
        )
        combos = [
            ComboRow(
                combo=split_combo(b.combo_key),
                picks=b.picks,
                avg_placement=avg_placement(b.sum_placement, b.picks),
                winrate=winrate(b.wins, b.picks),
            )
            for b in ranked[: config.top_combos_per_unit]
        ]
        if combos:
            out.append(UnitComboRow(unit=unit_id, combos=combos))
    return out
