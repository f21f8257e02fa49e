"""图像转换异常处理模块。

定义统一的异常类、编解码异常转换装饰器，以及把异常收敛为单文件失败结果的处理器。
"""

from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.conversion_result import ConversionResult
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


class ConversionError(Exception):
    """转换相关错误基类"""

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ValidationError(ConversionError):
    """参数验证错误 - 批次开始前的前置条件不满足"""

    pass


class ProcessingError(ConversionError):
    """处理过程错误（解码、编码、写盘）"""

    pass


class UnsupportedFormatError(ConversionError):
    """不支持的格式错误"""

    pass


class AnimatedImageError(ConversionError):
    """多帧图片被拒绝"""

    pass


def handle_image_errors(operation_name: str = "图像处理"):
    """统一的编解码异常转换装饰器

    Pillow 与文件系统异常被转换为项目异常，消息文本保持原样以便直接展示给用户。

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ConversionError:
                raise
            except UnidentifiedImageError as e:
                logger.error(f"{operation_name} - 无法识别图像格式: {e}")
                raise UnsupportedFormatError(MessageFormatter.error_text(e)) from e
            except DecompressionBombError as e:
                logger.error(f"{operation_name} - 图像过大: {e}")
                raise ProcessingError(MessageFormatter.error_text(e)) from e
            except OSError as e:
                logger.error(f"{operation_name} - 文件操作失败: {e}")
                raise ProcessingError(MessageFormatter.error_text(e)) from e
            except Exception as e:
                logger.error(f"{operation_name} - 未知错误: {e}")
                raise ProcessingError(MessageFormatter.error_text(e)) from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    单文件边界上的异常一律在这里记录日志并转换为失败结果，不再向上传播。
    """

    @staticmethod
    def _log_error(
        operation: str, path: Path, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称
            path: 相关文件路径
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def handle_with_context(
        error: Exception,
        input_path: Path,
        operation: str = "未知操作",
        input_size: int | None = None,
        log_level: str = "error",
    ) -> ConversionResult:
        """记录日志并返回携带异常消息的失败结果"""
        ErrorHandler._log_error(operation, input_path, error, log_level)
        return ConversionResult.failure(
            input_path=input_path,
            error=MessageFormatter.error_text(error),
            input_size=input_size,
        )

    @staticmethod
    def handle_conversion_error(
        error: Exception,
        input_path: Path,
        operation: str = "图像转换",
        input_size: int | None = None,
    ) -> ConversionResult:
        """按异常类型选择日志级别后生成失败结果"""
        match error:
            case AnimatedImageError():
                return ErrorHandler.handle_with_context(
                    error, input_path, operation, input_size, log_level="info"
                )
            case UnsupportedFormatError() | FileNotFoundError():
                return ErrorHandler.handle_with_context(
                    error, input_path, operation, input_size, log_level="warning"
                )
            case PermissionError():
                return ErrorHandler.handle_with_context(
                    error, input_path, f"{operation} - 权限错误", input_size
                )
            case OSError():
                return ErrorHandler.handle_with_context(
                    error, input_path, f"{operation} - 系统错误", input_size
                )
            case _:
                return ErrorHandler.handle_with_context(
                    error, input_path, operation, input_size
                )
