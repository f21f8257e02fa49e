"""核心模块包。

单文件转换、格式编码与图片信息探测。
"""

from .conversion_engine import SingleFileConverter, prepare_image
from .formats import (
    FormatEncoder,
    FormatProcessor,
    PreparedImage,
    get_png_params,
    get_save_parameters,
    get_webp_params,
)
from .image_info import HEIF_SUPPORTED, ImageInfoExtractor


__all__ = [
    "HEIF_SUPPORTED",
    "FormatEncoder",
    "FormatProcessor",
    "ImageInfoExtractor",
    "PreparedImage",
    "SingleFileConverter",
    "get_png_params",
    "get_save_parameters",
    "get_webp_params",
    "prepare_image",
]
