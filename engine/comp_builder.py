from typing import Iterable

from engine.state import CompositionKey, UnitSlot

SIGNATURE_SEP = ","
KEY_SEP = "::"


def unit_set(units: Iterable[UnitSlot]) -> list[str]:
    return sorted({u.unit_id for u in units})


def composition_signature(units: Iterable[UnitSlot]) -> str:
    # roster order, duplicate copies and items do not change the composition
    return SIGNATURE_SEP.join(unit_set(units))


def composition_key_to_str(key: CompositionKey) -> str:
    patch, signature = key
    return f"{patch}{KEY_SEP}{signature}"


def composition_key_from_str(raw: str) -> CompositionKey:
    patch, sep, signature = raw.partition(KEY_SEP)
    if not sep:
        raise ValueError(f"not a composition key: {raw!r}")
    return patch, signature
