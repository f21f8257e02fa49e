"""数据模型包。

定义转换设置、转换结果、进度事件与图片元数据。
"""

from .constants import ImageFormats, OutputFormat, is_supported_extension
from .conversion_result import (
    BatchResult,
    ConversionResult,
    ProgressEvent,
    ValidationReport,
    calculate_savings,
)
from .conversion_settings import ConversionSettings, OutputFormats
from .image_metadata import BasicImageInfo


__all__ = [
    "BasicImageInfo",
    "BatchResult",
    "ConversionResult",
    "ConversionSettings",
    "ImageFormats",
    "OutputFormat",
    "OutputFormats",
    "ProgressEvent",
    "ValidationReport",
    "calculate_savings",
    "is_supported_extension",
]
