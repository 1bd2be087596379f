"""Bands command implementations for the rpbands CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import typer

from rpbands import create_service
from rpbands.core.exceptions import DataValidationError, ErrorSeverity
from rpbands.core.models.records import BandsFailure, BandsSnapshot
from rpbands.core.services.bands import BandsService
from rpbands.core.services.valuation import classify_position

from .constants import INTERNAL_EXIT_CODE, UPSTREAM_EXIT_CODE
from .utils import emit_error, prepare_output

RECORD_COLUMNS = [
    "date",
    "price",
    "rp",
    "rp_0_8",
    "rp_1_25",
    "rp_1_7",
    "rp_2_4",
    "rp_3_2",
    "sth_rp",
    "lth_rp",
]

SUMMARY_COLUMNS = ["field", "value"]


def register(app: typer.Typer) -> None:
    """Register the bands commands on the root application."""

    app.command("bands")(bands_command)
    app.command("summary")(summary_command)


def get_bands_service() -> BandsService:
    """Factory hook for obtaining a configured :class:`BandsService`."""

    return create_service()


async def _run_query(service: BandsService) -> BandsSnapshot | BandsFailure:
    try:
        return await service.query()
    finally:
        await service.close()


def _load_snapshot() -> BandsSnapshot:
    result = asyncio.run(_run_query(get_bands_service()))
    if isinstance(result, BandsFailure):
        emit_error(result.error, result.code, details=result.details)
        code = UPSTREAM_EXIT_CODE if result.severity is ErrorSeverity.UPSTREAM else INTERNAL_EXIT_CODE
        raise typer.Exit(code=code)
    return result


def bands_command(
    ctx: typer.Context,
    tail: int | None = typer.Option(
        None,
        "--tail",
        "-n",
        min=1,
        help="Only print the most recent N records.",
    ),
) -> None:
    """Print the merged realized price bands records."""

    formatter, stream, stack = prepare_output(ctx)
    try:
        snapshot = _load_snapshot()
        records = snapshot.data[-tail:] if tail else snapshot.data
        rows = [record.model_dump() for record in records]
        formatter.render(rows, stream=stream, columns=RECORD_COLUMNS, title="BTC realized price bands")
    finally:
        stack.close()


def summary_command(ctx: typer.Context) -> None:
    """Print the latest values and where the price sits within the bands."""

    formatter, stream, stack = prepare_output(ctx)
    try:
        snapshot = _load_snapshot()
        rows = _summary_rows(snapshot)
        formatter.render(rows, stream=stream, columns=SUMMARY_COLUMNS, title="BTC valuation summary")
    finally:
        stack.close()


def _summary_rows(snapshot: BandsSnapshot) -> list[Mapping[str, object]]:
    values: dict[str, object] = {
        "latest_price": snapshot.latest_price,
        "latest_rp": snapshot.latest_rp,
        "latest_rp_date": snapshot.latest_rp_date.date().isoformat(),
        "latest_sth": snapshot.latest_sth,
        "latest_lth": snapshot.latest_lth,
        "data_points": snapshot.data_points,
        "updated_at": snapshot.updated_at.isoformat(),
    }
    try:
        position = classify_position(snapshot.latest_price, snapshot.latest_rp)
    except DataValidationError:
        position = None
    if position is not None:
        values["ratio"] = position.ratio
        values["zone"] = position.zone.value
        values["sentiment"] = position.sentiment
        values["above_decision_line"] = position.above_decision_line
    return [{"field": key, "value": value} for key, value in values.items()]


__all__ = [
    "RECORD_COLUMNS",
    "SUMMARY_COLUMNS",
    "bands_command",
    "get_bands_service",
    "register",
    "summary_command",
]
