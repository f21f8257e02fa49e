"""文件命名工具模块。

提供输出文件命名规则与不覆盖已有文件的唯一路径生成。
"""

from pathlib import Path

from ..config import get_config
from ..models.constants import ImageFormats, OutputFormat
from .logging_helpers import get_logger


logger = get_logger()


class FileNamingStrategy:
    """文件命名策略类"""

    @staticmethod
    def generate_output_name(input_path: Path, target_format: OutputFormat) -> str:
        """生成规范输出文件名

        WebP 为 ``<stem>.webp``，PNG 为 ``<stem>_optimized.png``。

        Args:
            input_path: 输入文件路径
            target_format: 目标格式

        Returns:
            str: 生成的文件名（不含路径）
        """
        suffix = ImageFormats.OUTPUT_NAME_SUFFIX[target_format]
        ext = ImageFormats.OUTPUT_EXTENSION[target_format]
        return f"{input_path.stem}{suffix}{ext}"


class PathResolver:
    """路径解析器"""

    @staticmethod
    def resolve_output_dir(input_path: Path, output_dir: Path | None = None) -> Path:
        """输出目录：指定目录优先，否则与输入文件同目录"""
        return output_dir or input_path.parent

    @staticmethod
    def resolve_output_path(
        input_path: Path,
        target_format: OutputFormat,
        output_dir: Path | None = None,
    ) -> Path:
        """解析规范输出路径（尚未去重）"""
        target_dir = PathResolver.resolve_output_dir(input_path, output_dir)
        filename = FileNamingStrategy.generate_output_name(input_path, target_format)
        return target_dir / filename

    @staticmethod
    def ensure_unique_path(path: Path, max_attempts: int | None = None) -> Path:
        """确保路径唯一，如果文件已存在则在扩展名前追加 " (k)"

        k 从 1 开始取最小的未占用值。检查与随后的写入不是原子操作，
        多个进程同时写同一目录时仍可能冲突。

        Args:
            path: 候选路径
            max_attempts: 最大尝试次数，默认读取全局配置

        Returns:
            Path: 唯一的路径

        Raises:
            ProcessingError: 超过最大尝试次数
        """
        if not path.exists():
            return path

        limit = max_attempts
        if limit is None:
            limit = get_config().conversion.MAX_NAME_ATTEMPTS
        base = path.stem
        suffix = path.suffix
        parent = path.parent

        for counter in range(1, limit + 1):
            new_path = parent / f"{base} ({counter}){suffix}"
            if not new_path.exists():
                logger.debug(f"目标已存在，重命名为: {new_path.name}")
                return new_path

        from ..exceptions import ProcessingError

        raise ProcessingError(
            f"Could not find a free file name for {path} after {limit} attempts",
            path,
        )


def unique_path(candidate: str | Path) -> Path:
    """返回不与现有文件冲突的路径"""
    return PathResolver.ensure_unique_path(Path(candidate))
