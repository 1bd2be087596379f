"""Exception handling module."""

from rpbands.core.exceptions.base import (
    DataValidationError,
    FeedError,
    InsufficientDataError,
    InternalFaultError,
    RPBandsError,
)
from rpbands.core.exceptions.codes import ErrorCode, ErrorSeverity
from rpbands.core.exceptions.handler import ErrorHandler, error_handler, get_error_handler
from rpbands.core.exceptions.messages import ErrorMessageTemplate, format_error_response

__all__ = [
    "RPBandsError",
    "FeedError",
    "InsufficientDataError",
    "DataValidationError",
    "InternalFaultError",
    "ErrorCode",
    "ErrorSeverity",
    "ErrorMessageTemplate",
    "format_error_response",
    "ErrorHandler",
    "error_handler",
    "get_error_handler",
]
