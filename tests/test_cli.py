from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeLibraryProbe, healthy_libraries, read_events
from typer.testing import CliRunner

import agent_readiness.cli as cli
from agent_readiness.config import get_settings


def _use_probe(monkeypatch: pytest.MonkeyPatch, probe: FakeLibraryProbe) -> None:
    monkeypatch.setattr(cli, "CtypesLibraryProbe", lambda: probe)


def test_bare_invocation_exits_with_failure_count(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_probe(monkeypatch, FakeLibraryProbe())
    result = CliRunner().invoke(cli.app, [], catch_exceptions=False)
    assert result.exit_code == 9
    lines = result.output.splitlines()
    assert len(lines) == 9
    assert all(line.startswith("not ok ") for line in lines)


def test_healthy_host_exits_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_probe(monkeypatch, FakeLibraryProbe(healthy_libraries()))
    result = CliRunner().invoke(cli.app, ["run"], catch_exceptions=False)
    assert result.exit_code == 0
    results = [line for line in result.output.splitlines() if not line.startswith("#")]
    assert len(results) == 9
    assert all(line.startswith("ok ") for line in results)


def test_run_writes_event_log_and_summary(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    libraries = healthy_libraries()
    del libraries["libwebsockets.so"]
    _use_probe(monkeypatch, FakeLibraryProbe(libraries))
    event_log = tmp_path / "logs" / "events.jsonl"
    summary_path = tmp_path / "summary.json"

    result = CliRunner().invoke(
        cli.app,
        ["run", "--event-log", str(event_log), "--summary", str(summary_path)],
        catch_exceptions=False,
    )

    assert result.exit_code == 3
    events = read_events(event_log)
    assert events[0]["event"] == "run_started"
    assert events[-1]["event"] == "run_finished"
    assert events[-1]["failed_checks"] == 3
    assert sum(1 for e in events if e["event"] == "check") == 9
    assert sum(1 for e in events if e["event"] == "group_finished") == 3
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["total_checks"] == 9
    assert summary["exit_code"] == 3
    assert summary["groups"]["libwebsockets"] == "failed"
    assert summary["groups"]["lua"] == "version_ok"


def test_summary_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _use_probe(monkeypatch, FakeLibraryProbe(healthy_libraries()))
    summary_path = tmp_path / "summary.json"
    monkeypatch.setenv("AGENT_READINESS_SUMMARY", str(summary_path))
    get_settings.cache_clear()  # type: ignore[attr-defined]

    result = CliRunner().invoke(cli.app, [], catch_exceptions=False)

    assert result.exit_code == 0
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert [check["number"] for check in summary["checks"]] == list(range(1, 10))


def test_checks_command_lists_names() -> None:
    result = CliRunner().invoke(cli.app, ["checks"], catch_exceptions=False)
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "1 liblua.so"
    assert lines[-1] == "9 OpenSSL version >= 1.0.2b"


def test_version_command() -> None:
    result = CliRunner().invoke(cli.app, ["version"], catch_exceptions=False)
    assert result.exit_code == 0
    assert result.output.startswith("agent-readiness ")
