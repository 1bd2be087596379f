from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rpbands.cli import bands as bands_module
from rpbands.cli.constants import INTERNAL_EXIT_CODE, UPSTREAM_EXIT_CODE
from rpbands.cli.main import create_app
from tests.web.stubs import DAY10_MS, StubBandsService, build_snapshot, internal_failure, upstream_failure


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _install(monkeypatch: pytest.MonkeyPatch, service: StubBandsService) -> StubBandsService:
    monkeypatch.setattr(bands_module, "get_bands_service", lambda: service)
    return service


def _jsonl(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_bands_table_output(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    service = _install(monkeypatch, StubBandsService(build_snapshot()))

    result = runner.invoke(create_app(), ["--no-color", "bands"])

    assert result.exit_code == 0, result.output
    assert "BTC realized price bands" in result.stdout
    assert service.queries == 1
    assert service.closed is True


def test_bands_jsonl_output(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(build_snapshot()))

    result = runner.invoke(create_app(), ["--format", "jsonl", "bands"])

    assert result.exit_code == 0, result.output
    rows = _jsonl(result.stdout)
    assert len(rows) == 2
    assert list(rows[0]) == list(bands_module.RECORD_COLUMNS)
    assert rows[0]["rp_1_25"] == 25_000
    assert rows[0]["sth_rp"] is None


def test_bands_tail(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(build_snapshot()))

    result = runner.invoke(create_app(), ["--format", "jsonl", "bands", "--tail", "1"])

    assert result.exit_code == 0, result.output
    rows = _jsonl(result.stdout)
    assert [row["date"] for row in rows] == [DAY10_MS]


def test_bands_output_file(runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install(monkeypatch, StubBandsService(build_snapshot()))
    target = tmp_path / "bands.jsonl"

    result = runner.invoke(create_app(), ["--format", "jsonl", "--output", str(target), "bands"])

    assert result.exit_code == 0, result.output
    assert len(_jsonl(target.read_text(encoding="utf-8"))) == 2


def test_summary_jsonl(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(build_snapshot(latest_price=30_000)))

    result = runner.invoke(create_app(), ["--format", "jsonl", "summary"])

    assert result.exit_code == 0, result.output
    values = {row["field"]: row["value"] for row in _jsonl(result.stdout)}
    assert values["latest_price"] == 30_000
    assert values["latest_rp"] == 20_000
    assert values["latest_rp_date"] == "2024-01-11"
    assert values["ratio"] == 1.5
    assert values["sentiment"] == "Bull Trend"
    assert values["above_decision_line"] is True


def test_summary_table(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(build_snapshot()))

    result = runner.invoke(create_app(), ["--no-color", "summary"])

    assert result.exit_code == 0, result.output
    assert "Bull Trend" in result.stdout


def test_upstream_failure_exit_code(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(upstream_failure()))

    result = runner.invoke(create_app(), ["bands"])

    assert result.exit_code == UPSTREAM_EXIT_CODE


def test_internal_failure_exit_code(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, StubBandsService(internal_failure()))

    result = runner.invoke(create_app(), ["summary"])

    assert result.exit_code == INTERNAL_EXIT_CODE


def test_invalid_format_rejected(runner: CliRunner) -> None:
    result = runner.invoke(create_app(), ["--format", "xml", "bands"])

    assert result.exit_code != 0


def test_invalid_log_level_rejected(runner: CliRunner) -> None:
    result = runner.invoke(create_app(), ["--log-level", "loud", "bands"])

    assert result.exit_code != 0
