"""错误处理和日志记录模块."""

import traceback
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from .base import InternalFaultError, RPBandsError
from .codes import ErrorCode, ErrorSeverity
from .messages import ErrorMessageTemplate, format_error_response


class ErrorHandler:
    """统一的错误处理器."""

    def log_error(
        self,
        error: Exception | RPBandsError,
        context: dict[str, Any] | None = None,
        level: str = "ERROR",
    ) -> None:
        """记录错误日志.

        Args:
            error: 异常对象
            context: 上下文信息
            level: 日志级别
        """
        error_context = {
            "error_type": type(error).__name__,
            "timestamp": datetime.now(UTC).isoformat(),
            **(context or {}),
        }
        if level == "ERROR":
            error_context["stack_trace"] = "".join(traceback.format_exception(error))

        error_code = None
        if isinstance(error, RPBandsError):
            error_code = error.error_code
            error_context["details"] = error.details

        logger.opt(depth=1).bind(error_code=error_code).log(
            level,
            "{error_message} | context={context}",
            error_message=str(error),
            context=error_context,
        )

    def create_error_response(
        self,
        error: Exception | RPBandsError,
        error_code: ErrorCode | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """创建标准化的错误响应.

        Internal faults never echo the original exception text.
        """
        if isinstance(error, RPBandsError):
            return format_error_response(
                ErrorCode(error.error_code),
                message=error.message,
                **{**error.details, **kwargs},
            )
        error_code = error_code or ErrorCode.INTERNAL_ERROR
        return format_error_response(error_code, message=ErrorMessageTemplate.get_message(error_code), **kwargs)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        **context: Any,
    ) -> RPBandsError:
        """处理异常并返回标准化的RPBandsError.

        Args:
            error: 原始异常
            operation: 操作名称
            **context: 上下文信息

        Returns:
            标准化的RPBandsError
        """
        error_context = {"operation": operation, **context}

        if isinstance(error, RPBandsError):
            level = "WARNING" if error.severity is ErrorSeverity.UPSTREAM else "ERROR"
            self.log_error(error, error_context, level=level)
            return error

        self.log_error(error, error_context)
        return InternalFaultError(
            ErrorMessageTemplate.get_message(ErrorCode.INTERNAL_ERROR),
            details={"operation": operation, "error_type": type(error).__name__},
        )


# 全局错误处理器实例
error_handler = ErrorHandler()


def get_error_handler() -> ErrorHandler:
    """获取全局错误处理器."""
    return error_handler
