"""Tests for CLI argument parsing and entry points."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from chordcraft import cli
from chordcraft.cli import (
    dedup_main,
    parse_dedup_args,
    parse_regenerate_args,
    parse_seed_args,
    regenerate_main,
    seed_main,
)
from chordcraft.models import Progression
from chordcraft.reports import submit_report
from chordcraft.store import JsonFileStore


def _failing_client():
    client = MagicMock()
    client.chat.completions.create.side_effect = OpenAIError("offline")
    return client


def _seed_file(path, *progressions):
    store = JsonFileStore(path)
    for p in progressions:
        store.add_progression(p)
    return store


class TestParseArgs:
    def test_seed_defaults(self):
        args = parse_seed_args([])
        assert args.count == 10
        assert args.key is None
        assert args.scale is None
        assert args.clear is False
        assert args.model == "gpt-4o"
        assert args.timeout == 60.0
        assert args.store_file is None

    def test_seed_overrides(self):
        args = parse_seed_args([
            "-n", "3",
            "--key", "A",
            "--scale", "mixolydian",
            "--mood", "relaxed",
            "--starting-chord", "A",
            "--clear",
            "--store-file", "out/store.json",
        ])
        assert args.count == 3
        assert args.scale == "mixolydian"
        assert args.starting_chord == "A"
        assert args.clear is True
        assert args.store_file == Path("out/store.json")

    def test_regenerate_actions(self):
        assert parse_regenerate_args(["--list"]).list is True
        assert parse_regenerate_args(["--dismiss", "r1"]).dismiss == "r1"

    def test_dedup_flags(self):
        args = parse_dedup_args(["-d", "-v"])
        assert args.dry_run is True
        assert args.verbose is True
        assert args.batch_size == 500

    def test_dedup_has_no_threshold_option(self):
        with pytest.raises(SystemExit):
            parse_dedup_args(["-t", "3"])
        with pytest.raises(SystemExit):
            parse_dedup_args(["--threshold", "3"])


class TestSeedMain:
    def test_missing_api_key(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        rc = seed_main(["--store-file", str(tmp_path / "s.json")])
        assert rc == 2

    def test_count_must_be_positive(self, tmp_path):
        assert seed_main(["-n", "0", "--store-file", str(tmp_path / "s.json")]) == 2

    def test_seeds_with_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "make_client", lambda cfg: _failing_client())
        path = tmp_path / "s.json"
        rc = seed_main(["-n", "3", "--scale", "minor", "--store-file", str(path)])
        assert rc == 0
        progressions = JsonFileStore(path).list_progressions()
        assert len(progressions) == 3
        assert all(p.scale == "minor" for p in progressions)
        assert all(len(p.numerals) == len(p.chords) for p in progressions)

    def test_clear_removes_existing(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "make_client", lambda cfg: _failing_client())
        path = tmp_path / "s.json"
        _seed_file(path, Progression(id="old"))
        assert seed_main(["-n", "1", "--clear", "--store-file", str(path)]) == 0
        ids = [p.id for p in JsonFileStore(path).list_progressions()]
        assert "old" not in ids and len(ids) == 1


class TestRegenerateMain:
    def test_list_does_not_need_api_key(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        path = tmp_path / "s.json"
        store = _seed_file(path, Progression(id="p1"))
        submit_report(store, "p1", "too repetitive")
        assert regenerate_main(["--list", "--store-file", str(path)]) == 0
        out = capsys.readouterr().out
        assert "p1" in out and "too repetitive" in out

    def test_dismiss_unknown_report(self, tmp_path):
        path = tmp_path / "s.json"
        _seed_file(path)
        assert regenerate_main(["--dismiss", "nope", "--store-file", str(path)]) == 1

    def test_regenerates_reported(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "make_client", lambda cfg: _failing_client())
        path = tmp_path / "s.json"
        store = _seed_file(path, Progression(id="p1", chords=["C", "F", "G", "C"]))
        submit_report(store, "p1", "boring")
        assert regenerate_main(["--store-file", str(path)]) == 0
        assert JsonFileStore(path).get_progression("p1").regeneration_count == 1


class TestDedupMain:
    def _store(self, path):
        chords = ["C", "G", "Am", "F"]
        return _seed_file(
            path,
            Progression(id="a1", chords=chords),
            Progression(id="a2", chords=chords, likes=5),
            Progression(id="b1", chords=["D", "A", "Bm", "G"]),
        )

    def test_dry_run_keeps_everything(self, tmp_path, capsys):
        path = tmp_path / "s.json"
        self._store(path)
        assert dedup_main(["--dry-run", "--store-file", str(path)]) == 0
        assert len(JsonFileStore(path).list_progressions()) == 3
        assert "Would delete:                 1" in capsys.readouterr().out

    def test_deletes_lower_scoring_copy(self, tmp_path):
        path = tmp_path / "s.json"
        self._store(path)
        assert dedup_main(["--store-file", str(path)]) == 0
        ids = sorted(p.id for p in JsonFileStore(path).list_progressions())
        assert ids == ["a2", "b1"]

    def test_invalid_batch_size(self, tmp_path):
        path = tmp_path / "s.json"
        self._store(path)
        assert dedup_main(["--batch-size", "0", "--store-file", str(path)]) == 1

    def test_corrupt_store_file(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("nope", encoding="utf-8")
        assert dedup_main(["--store-file", str(path)]) == 2
