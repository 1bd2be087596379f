"""Shared constants for CLI exit codes."""

SUCCESS_EXIT_CODE = 0
VALIDATION_EXIT_CODE = 1
UPSTREAM_EXIT_CODE = 2
INTERNAL_EXIT_CODE = 3

__all__ = [
    "SUCCESS_EXIT_CODE",
    "VALIDATION_EXIT_CODE",
    "UPSTREAM_EXIT_CODE",
    "INTERNAL_EXIT_CODE",
]
