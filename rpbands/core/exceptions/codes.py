"""Standardized error codes for rpbands exceptions."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    # General errors
    GENERAL_ERROR = "GENERAL_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATA_FORMAT_ERROR = "DATA_FORMAT_ERROR"

    # Feed errors
    FEED_ERROR = "FEED_ERROR"
    FEED_TIMEOUT = "FEED_TIMEOUT"
    FEED_UNAVAILABLE = "FEED_UNAVAILABLE"

    # Coverage errors
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"


class ErrorSeverity(str, Enum):
    """Operation-level failure severities surfaced to callers."""

    UPSTREAM = "upstream"
    INTERNAL = "internal"


__all__ = ["ErrorCode", "ErrorSeverity"]
