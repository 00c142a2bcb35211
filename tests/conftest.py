"""Shared pytest fixtures for the meta aggregator tests."""

import pytest

from engine.state import AggregationConfig, ParticipantSlice, UnitSlot


def _make_slice(units, placement=1, patch="15.4", match_id=None):
    return ParticipantSlice(
        patch=patch,
        placement=placement,
        units=tuple(UnitSlot(uid, tuple(items)) for uid, items in units),
        match_id=match_id,
    )


@pytest.fixture
def make_slice():
    """Build a slice from [(unit_id, [items...]), ...]."""
    return _make_slice


@pytest.fixture
def sample_slices():
    """A small mixed batch covering wins, losses, missing items and duplicate units."""
    return [
        _make_slice([("Ahri", ["a", "b", "c"]), ("Jinx", ["d", "e", "f", "g"])], placement=1),
        _make_slice([("Jinx", ["g", "f", "e", "d"]), ("Ahri", ["c", "b", "a"])], placement=3),
        _make_slice([("Ahri", ["a", "b"]), ("Jinx", [])], placement=8),
        _make_slice([("Garen", ["x", "y", "z"]), ("Garen", ["x", "y", "z"])], placement=2),
        _make_slice([("Garen", ["z", "y", "x"])], placement=9),
        _make_slice([("Ahri", ["a", "b", "c", "d"]), ("Jinx", ["d"])], placement=1),
    ]


@pytest.fixture
def config_all():
    """Config that keeps every bucket."""
    return AggregationConfig(patch="15.4", min_picks_comp=1, min_picks_item_combo=1)


@pytest.fixture
def match_payload():
    """A ranked match in the shape the match-v1 endpoint returns."""
    return {
        "metadata": {"match_id": "NA1_100"},
        "info": {
            "queue_id": 1100,
            "game_version": "Linux Version 15.4.702.1234 (Mar 01 2025/10:00:00) [PUBLIC] <Releases/15.4>",
            "game_datetime": 1_700_000_000_000,
            "participants": [
                {
                    "placement": 1,
                    "units": [
                        {"character_id": "TFT14_Ahri", "items": [44, 12, 7]},
                        {"character_id": "TFT14_Jinx", "itemNames": ["IE", "LW"]},
                    ],
                },
                {
                    "units": [{"character_id": "TFT14_Garen"}],
                },
            ],
        },
    }
