"""桌面图像优化器的转换核心。

把常见位图批量转换为 WebP 和/或优化后的 PNG，支持缩放、元数据剥离与不覆盖命名。
"""

__version__ = "0.1.0"
__description__ = "批量图像优化：转换为 WebP 与优化 PNG"

from .converter import ImageOptimizer, convert_image, convert_images
from .models import (
    BatchResult,
    ConversionResult,
    ConversionSettings,
    OutputFormats,
    ProgressEvent,
    ValidationReport,
)


__all__ = [
    "BatchResult",
    "ConversionResult",
    "ConversionSettings",
    "ImageOptimizer",
    "OutputFormats",
    "ProgressEvent",
    "ValidationReport",
    "convert_image",
    "convert_images",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
