from __future__ import annotations

from pathlib import Path

import pytest

from elementtcg.cli import main, run_match
from elementtcg.paths import get_paths
from elementtcg.services.content import ContentError, ContentService
from elementtcg.services.telemetry import TelemetryService


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def test_telemetry_appends_jsonl(tmp_path: Path) -> None:
    sink = TelemetryService(tmp_path / "t" / "telemetry.jsonl")
    sink.log("hello", {"n": 1})
    sink.log("hello", {"n": 2})
    records = sink.read()
    assert [r["payload"] for r in records] == [{"n": 1}, {"n": 2}]
    assert all(r["type"] == "hello" for r in records)


def test_disabled_telemetry_writes_nothing(tmp_path: Path) -> None:
    sink = TelemetryService(tmp_path / "telemetry.jsonl", enabled=False)
    sink.log("hello", {})
    assert sink.read() == []


def test_log_match_records_outcome(tmp_path: Path) -> None:
    engine = run_match(_content(), "starter_fire", "starter_water", seed=11)
    sink = TelemetryService(tmp_path / "telemetry.jsonl")
    sink.log_match("m1", engine)
    (rec,) = sink.read()
    payload = rec["payload"]
    assert rec["type"] == "match_finished"
    assert payload["match_id"] == "m1"
    assert payload["seed"] == 11
    assert payload["winner"] == engine.get_winner()
    assert payload["actions"] == len(engine.action_log)


def test_run_match_rejects_unknown_deck() -> None:
    with pytest.raises(ContentError):
        run_match(_content(), "starter_fire", "nope", seed=0)


def test_cli_runs_games(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    sink = tmp_path / "telemetry.jsonl"
    code = main(["--games", "2", "--seed", "3", "--telemetry", str(sink)])
    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("game=0 seed=3 winner=")
    assert out[1].startswith("game=1 seed=4 winner=")
    assert len(TelemetryService(sink).read()) == 2


def test_cli_unknown_deck_exits_with_error(tmp_path: Path) -> None:
    code = main(["--deck-b", "nope", "--telemetry", str(tmp_path / "t.jsonl")])
    assert code == 2
