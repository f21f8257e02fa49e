"""消息格式化工具模块。

集中管理返回给桌面端的结果文案与内部日志文案。
"""

from collections.abc import Iterable
from pathlib import Path


# 返回给调用方的结果文案（界面直接展示，保持英文）
UNSUPPORTED_FILE_TYPE = "Unsupported file type"
ANIMATED_IMAGE_REJECTED = (
    "Animated images are not supported. Only the first frame would be converted."
)
UNKNOWN_CONVERSION_ERROR = "Unknown conversion error"

FORMAT_DISPLAY_NAMES = {
    "webp": "WebP",
    "png": "PNG",
}


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    @staticmethod
    def error_text(error: BaseException) -> str:
        """提取异常的消息文本，没有消息时返回通用文案"""
        message = getattr(error, "message", None) or str(error)
        return message or UNKNOWN_CONVERSION_ERROR

    @staticmethod
    def format_names(formats: Iterable[str]) -> str:
        """将格式键拼接为展示文本，如 "WebP and PNG" """
        names = [FORMAT_DISPLAY_NAMES.get(fmt, fmt.upper()) for fmt in formats]
        if not names:
            return "no format"
        if len(names) == 1:
            return names[0]
        return f"{', '.join(names[:-1])} and {names[-1]}"

    @staticmethod
    def batch_completed(file_count: int, formats: Iterable[str]) -> str:
        """批量转换完成的通知文案"""
        return (
            f"Converted {file_count} file(s) to "
            f"{MessageFormatter.format_names(formats)}"
        )

    @staticmethod
    def files_skipped(count: int) -> str:
        """校验阶段被跳过的文件提示"""
        return f"{count} unsupported file(s) skipped"
