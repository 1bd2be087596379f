"""标准化错误消息模板."""

from typing import Any

from rpbands.core.exceptions.codes import ErrorCode


class ErrorMessageTemplate:
    """错误消息模板管理器."""

    _templates: dict[ErrorCode, str] = {
        ErrorCode.GENERAL_ERROR: "An unknown error occurred",
        ErrorCode.INTERNAL_ERROR: "Internal server error fetching BTC data",
        ErrorCode.CONFIGURATION_ERROR: "Configuration error: {details}",
        ErrorCode.VALIDATION_ERROR: "Data validation failed: {details}",
        ErrorCode.DATA_FORMAT_ERROR: "Malformed payload from {feed}",
        ErrorCode.FEED_ERROR: "Feed {feed} failed: {message}",
        ErrorCode.FEED_TIMEOUT: "Feed {feed} timed out",
        ErrorCode.FEED_UNAVAILABLE: "Feed {feed} is unavailable",
        ErrorCode.INSUFFICIENT_DATA: "Failed to fetch {feed} data",
    }

    @classmethod
    def get_message(cls, error_code: ErrorCode, **kwargs: Any) -> str:
        """获取标准化错误消息.

        Args:
            error_code: 错误代码
            **kwargs: 模板变量

        Returns:
            格式化后的错误消息
        """
        template = cls._templates.get(error_code, cls._templates[ErrorCode.GENERAL_ERROR])
        try:
            return template.format(**kwargs)
        except KeyError:
            return f"{cls._templates[ErrorCode.GENERAL_ERROR]} (error code: {error_code.value})"


def format_error_response(error_code: ErrorCode, message: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """格式化错误响应.

    Args:
        error_code: 错误代码
        message: 自定义错误消息(可选)
        **kwargs: 额外的错误详情

    Returns:
        标准化的错误响应字典
    """
    if message is None:
        message = ErrorMessageTemplate.get_message(error_code, **kwargs)

    return {
        "error": {
            "code": error_code.value,
            "message": message,
            "details": kwargs,
        }
    }


__all__ = ["ErrorMessageTemplate", "format_error_response"]
