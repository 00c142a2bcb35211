"""Tests for NDJSON slice staging and seen-id tracking."""

from engine.staging import append_slices, load_seen_ids, read_staged_slices, save_seen_ids


class TestStaging:
    def test_append_then_read_filters_patch(self, tmp_path, make_slice):
        path = tmp_path / "all" / "participants-20250301.ndjson"
        slices = [
            make_slice([("A", ["x", "y", "z"])], patch="15.4", match_id="NA1_1"),
            make_slice([("B", [])], patch="15.3", match_id="NA1_2", placement=4),
        ]

        assert append_slices(str(path), slices) == 2
        assert read_staged_slices(str(tmp_path / "all"), "15.4") == [slices[0]]

    def test_append_accumulates(self, tmp_path, make_slice):
        path = tmp_path / "p.ndjson"
        append_slices(str(path), [make_slice([("A", [])])])
        append_slices(str(path), [make_slice([("B", [])])])
        assert len(read_staged_slices(str(tmp_path), "15.4")) == 2

    def test_append_nothing(self, tmp_path):
        path = tmp_path / "p.ndjson"
        assert append_slices(str(path), []) == 0
        assert not path.exists()

    def test_bad_lines_skipped(self, tmp_path):
        (tmp_path / "p.ndjson").write_text(
            '{"patch": "15.4", "placement": 2, "units": [{"character_id": "A", "items": ["x"]}]}\n'
            "garbage\n"
            "5\n"
            "null\n"
            "\n"
            '{"patch": "15.4", "placement": 42, "units": []}\n',
            encoding="utf-8",
        )
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        slices = read_staged_slices(str(tmp_path), "15.4")
        assert len(slices) == 1
        assert slices[0].units[0].unit_id == "A"

    def test_missing_directory(self, tmp_path):
        assert read_staged_slices(str(tmp_path / "missing"), "15.4") == []


class TestSeenIds:
    def test_roundtrip_keeps_order(self, tmp_path):
        path = tmp_path / "state" / "seen.json"
        save_seen_ids(str(path), ["NA1_2", "NA1_1", "NA1_2"])
        assert list(load_seen_ids(str(path))) == ["NA1_2", "NA1_1"]

    def test_keep_caps_stored_ids(self, tmp_path):
        path = tmp_path / "seen.json"
        save_seen_ids(str(path), ["NA1_1", "NA1_2", "NA1_3"], keep=2)
        assert list(load_seen_ids(str(path))) == ["NA1_2", "NA1_3"]

    def test_cap_drops_oldest_across_platforms(self, tmp_path):
        path = tmp_path / "seen.json"
        ids = [f"{p}_{i}" for p in ("NA1", "EUW1", "KR") for i in range(3)]
        save_seen_ids(str(path), ids, keep=6)

        kept = load_seen_ids(str(path))
        assert list(kept) == ["EUW1_0", "EUW1_1", "EUW1_2", "KR_0", "KR_1", "KR_2"]
        assert "NA1_2" not in kept

    def test_later_runs_append_after_loaded_ids(self, tmp_path):
        path = tmp_path / "seen.json"
        save_seen_ids(str(path), ["NA1_1", "NA1_2"])
        seen = load_seen_ids(str(path))
        seen.update(dict.fromkeys(["EUW1_9", "NA1_1"]))
        save_seen_ids(str(path), seen, keep=2)

        assert list(load_seen_ids(str(path))) == ["NA1_2", "EUW1_9"]

    def test_missing_file(self, tmp_path):
        assert load_seen_ids(str(tmp_path / "none.json")) == {}
