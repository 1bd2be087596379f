"""Pytest configuration for the rpbands test suite."""

from __future__ import annotations

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--rpbands-run-integration",
        action="store_true",
        default=False,
        help="Run rpbands integration tests that hit the live upstream feeds.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks rpbands tests requiring network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--rpbands-run-integration"):
        return

    rpbands_skip_integration = pytest.mark.skip(
        reason="integration tests require --rpbands-run-integration",
    )
    for rpbands_item in items:
        if "integration" in rpbands_item.keywords:
            rpbands_item.add_marker(rpbands_skip_integration)
