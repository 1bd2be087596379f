"""rpbands核心异常类."""

from typing import Any

from rpbands.core.exceptions.codes import ErrorCode, ErrorSeverity


class RPBandsError(Exception):
    """rpbands基础异常类."""

    severity: ErrorSeverity = ErrorSeverity.INTERNAL

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class FeedError(RPBandsError):
    """Failure of a single upstream feed; always degraded to absence by fetchers."""

    def __init__(
        self,
        message: str,
        feed_name: str,
        error_code: str = ErrorCode.FEED_ERROR.value,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["feed"] = feed_name
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, error_code, super_details)
        self.feed_name = feed_name
        self.status_code = status_code


class InsufficientDataError(RPBandsError):
    """A mandatory feed is absent or too sparse to build a trustworthy chart."""

    severity = ErrorSeverity.UPSTREAM

    def __init__(
        self,
        message: str,
        feed_name: str,
        observed: int = 0,
        required: int = 0,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.update({"feed": feed_name, "observed": observed, "required": required})
        super().__init__(message, ErrorCode.INSUFFICIENT_DATA.value, super_details)
        self.feed_name = feed_name
        self.observed = observed
        self.required = required


class DataValidationError(RPBandsError):
    """数据验证异常."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class InternalFaultError(RPBandsError):
    """Unexpected fault while merging or reconciling series."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, ErrorCode.INTERNAL_ERROR.value, details)


__all__ = [
    "DataValidationError",
    "FeedError",
    "InsufficientDataError",
    "InternalFaultError",
    "RPBandsError",
]
