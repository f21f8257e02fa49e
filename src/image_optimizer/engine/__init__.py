"""图像转换处理引擎模块。

包含批量转换和设置构建等批次级逻辑。
"""

from .batch import BatchConverter, ProgressCallback
from .config import SettingsBuilder, build_settings, ensure_output_format_selected


__all__ = [
    "BatchConverter",
    "ProgressCallback",
    "SettingsBuilder",
    "build_settings",
    "ensure_output_format_selected",
]
