"""格式编码模块。

根据设置生成各格式的保存参数，并把预处理好的图片写成 WebP / PNG 文件。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from PIL import Image

from ..config import get_config
from ..exceptions import handle_image_errors
from ..models.constants import OutputFormat
from ..models.conversion_settings import ConversionSettings
from ..utils.logging_helpers import get_logger


logger = get_logger()

# 被视为元数据的 info 键，剥离元数据时全部移除
METADATA_KEYS = ("exif", "icc_profile", "xmp", "XML:com.adobe.xmp")


@dataclass(frozen=True)
class PreparedImage:
    """解码、方向校正、缩放与元数据处理后的中间结果

    各格式编码只读取它，不会修改其中的图片对象。
    """

    image: Image.Image
    metadata: dict[str, Any] = field(default_factory=dict)
    was_resized: bool = False
    original_size: tuple[int, int] = (0, 0)

    @property
    def has_alpha(self) -> bool:
        return self.image.mode in ("RGBA", "LA", "PA") or (
            "transparency" in self.image.info
        )


def get_webp_params(settings: ConversionSettings) -> dict[str, Any]:
    """获取WebP编码参数

    无损模式下不传 quality，用户质量值不会影响无损编码。
    """
    params: dict[str, Any] = {
        "lossless": settings.lossless,
        "method": get_config().conversion.WEBP_METHOD,
    }
    if not settings.lossless:
        params["quality"] = settings.quality
    return params


def get_png_params(settings: ConversionSettings) -> dict[str, Any]:
    """获取PNG编码参数

    PNG 像素本身无损；quality 低于 100 时通过调色板量化换取体积，
    压缩级别与 lossless 无关，始终取最高。
    """
    return {
        "quality": 100 if settings.lossless else settings.quality,
        "compress_level": get_config().conversion.PNG_COMPRESS_LEVEL,
        "optimize": True,
    }


def get_save_parameters(
    target_format: OutputFormat, settings: ConversionSettings
) -> dict[str, Any]:
    """按格式分发保存参数"""
    match target_format:
        case OutputFormat.WEBP:
            return get_webp_params(settings)
        case OutputFormat.PNG:
            return get_png_params(settings)


def palette_size_for_quality(quality: int) -> int:
    """PNG 量化使用的颜色数，质量越高颜色越多"""
    return max(2, min(256, round(256 * quality / 100)))


class FormatProcessor:
    """为目标格式准备图片的色彩模式"""

    def prepare_for_format(
        self, prepared: PreparedImage, target_format: OutputFormat, quality: int = 100
    ) -> Image.Image:
        """返回适合目标格式的新图片对象，不修改 prepared.image"""
        match target_format:
            case OutputFormat.WEBP:
                return self._prepare_for_webp(prepared)
            case OutputFormat.PNG:
                return self._prepare_for_png(prepared, quality)

    def _prepare_for_webp(self, prepared: PreparedImage) -> Image.Image:
        """WebP只支持RGB和RGBA"""
        return self._rgb_or_rgba(prepared)

    def _prepare_for_png(self, prepared: PreparedImage, quality: int) -> Image.Image:
        """PNG支持多种色彩模式，质量低于100时量化为调色板"""
        img = prepared.image

        if quality < 100 and img.mode not in ("1", "P"):
            return self._rgb_or_rgba(prepared).quantize(
                colors=palette_size_for_quality(quality),
                method=Image.Quantize.FASTOCTREE,
            )

        if img.mode in ("CMYK", "YCbCr", "LAB", "HSV"):
            return img.convert("RGB")

        return img.copy()

    @staticmethod
    def _rgb_or_rgba(prepared: PreparedImage) -> Image.Image:
        """转为 RGB/RGBA 新图片，颜色键透明（tRNS）展开为 alpha 通道"""
        img = prepared.image
        if prepared.has_alpha:
            return img.copy() if img.mode == "RGBA" else img.convert("RGBA")
        return img.copy() if img.mode == "RGB" else img.convert("RGB")


class FormatEncoder:
    """格式编码器

    无状态，每次调用把一张预处理图片写成一个文件并返回文件大小。
    """

    def __init__(self, format_processor: FormatProcessor | None = None) -> None:
        self.format_processor = format_processor or FormatProcessor()

    def encode(
        self,
        prepared: PreparedImage,
        output_path: Path,
        target_format: OutputFormat,
        options: dict[str, Any],
    ) -> int:
        """编码并写盘

        Args:
            prepared: 预处理后的中间结果
            output_path: 已去重的输出路径
            target_format: 目标格式
            options: get_save_parameters 生成的参数

        Returns:
            int: 写入文件的字节数
        """
        try:
            return self._write(prepared, output_path, target_format, options)
        except Exception:
            # 输出路径在写入前并不存在，失败时清理残留文件
            output_path.unlink(missing_ok=True)
            raise

    @handle_image_errors("格式编码")
    def _write(
        self,
        prepared: PreparedImage,
        output_path: Path,
        target_format: OutputFormat,
        options: dict[str, Any],
    ) -> int:
        save_params = dict(options)
        quality = save_params.get("quality", 100)
        if target_format == OutputFormat.PNG:
            # PNG 编码器没有 quality 参数，只用于量化
            save_params.pop("quality", None)

        img = self.format_processor.prepare_for_format(prepared, target_format, quality)
        save_params.update(self._metadata_params(prepared))

        logger.debug(f"编码 {target_format.value}: {output_path.name} {options}")
        try:
            img.save(output_path, format=target_format.pillow_format, **save_params)
        finally:
            img.close()

        return output_path.stat().st_size

    @staticmethod
    def _metadata_params(prepared: PreparedImage) -> dict[str, Any]:
        """显式传入元数据，剥离时覆盖编码器从 info 读取的默认值"""
        metadata = prepared.metadata
        params: dict[str, Any] = {
            "exif": metadata.get("exif") or b"",
            "icc_profile": metadata.get("icc_profile") or None,
        }
        if metadata.get("xmp"):
            params["xmp"] = metadata["xmp"]
        return params
