from dataclasses import dataclass, field

UNKNOWN_PATCH = "unknown"
MISSING_PLACEMENT = 9  # "finished out of the scored range", never a win

TOP_COMPS = 20

CompositionKey = tuple[str, str]  # (patch, composition signature)
ComboKey = tuple[str, str]  # (unit_id, combo key)


class MalformedSliceError(ValueError):
    pass


class PatchMismatchError(ValueError):
    pass


@dataclass(frozen=True)
class AggregationConfig:
    patch: str
    min_picks_comp: int = 200
    min_picks_item_combo: int = 50
    top_combos_per_unit: int = 10
    top_comps: int = TOP_COMPS


@dataclass(frozen=True)
class UnitSlot:
    unit_id: str
    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParticipantSlice:
    """One player's outcome in one match, already normalized."""

    patch: str
    placement: int
    units: tuple[UnitSlot, ...]
    match_id: str | None = None
    platform: str | None = None
    region: str | None = None


@dataclass
class CompositionBucket:
    patch: str
    signature: str
    unit_set: list[str]
    picks: int = 0
    wins: int = 0
    sum_placement: int = 0
    units: dict[str, dict[str, int]] = field(default_factory=dict)  # unit -> item -> count


@dataclass
class UnitComboBucket:
    unit_id: str
    combo_key: str
    picks: int = 0
    wins: int = 0
    sum_placement: int = 0


@dataclass
class AggregationState:
    patch: str
    compositions: dict[CompositionKey, CompositionBucket] = field(default_factory=dict)
    combos: dict[ComboKey, UnitComboBucket] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.compositions and not self.combos
