"""单文件转换引擎模块。

按设置把一个输入文件转换为所请求的各个格式，所有错误都收敛为该文件的失败结果。
"""

from pathlib import Path

from PIL import Image, ImageOps

from ..exceptions import (
    AnimatedImageError,
    ErrorHandler,
    UnsupportedFormatError,
    handle_image_errors,
)
from ..models.constants import ImageFormats, OutputFormat
from ..models.conversion_result import ConversionResult, calculate_savings
from ..models.conversion_settings import ConversionSettings
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import ANIMATED_IMAGE_REJECTED, MessageFormatter
from ..utils.naming_helpers import PathResolver
from .formats import (
    METADATA_KEYS,
    FormatEncoder,
    PreparedImage,
    get_save_parameters,
)
from .image_info import HEIF_SUPPORTED, ImageInfoExtractor


logger = get_logger()


class SingleFileConverter:
    """单文件转换器

    处理流程：读取文件大小 → 探测元数据 → 拒绝多帧图片 → 缩放 → 元数据策略 →
    逐个格式命名、编码并统计节省比例。
    """

    def __init__(
        self,
        encoder: FormatEncoder | None = None,
        info_extractor: ImageInfoExtractor | None = None,
    ) -> None:
        self.encoder = encoder or FormatEncoder()
        self.info_extractor = info_extractor or ImageInfoExtractor()

    def convert(
        self, input_path: str | Path, settings: ConversionSettings
    ) -> ConversionResult:
        """转换单个文件

        Args:
            input_path: 输入文件路径
            settings: 本批次的转换设置

        Returns:
            ConversionResult: 转换结果，任何异常都不会向外抛出
        """
        input_path = Path(input_path)

        try:
            input_size = input_path.stat().st_size
        except OSError as e:
            return ErrorHandler.handle_conversion_error(e, input_path, "读取输入文件")

        try:
            return self._convert(input_path, input_size, settings)
        except Exception as e:
            return ErrorHandler.handle_conversion_error(
                e, input_path, "图像转换", input_size=input_size
            )

    def _convert(
        self, input_path: Path, input_size: int, settings: ConversionSettings
    ) -> ConversionResult:
        output_dir = PathResolver.resolve_output_dir(input_path, settings.output_folder)

        if (
            input_path.suffix.lower() in ImageFormats.HEIF_EXTENSIONS
            and not HEIF_SUPPORTED
        ):
            raise UnsupportedFormatError(
                "HEIC/HEIF decoding requires the pillow-heif package", input_path
            )

        metadata = self.info_extractor.extract(input_path)
        if metadata.frame_count > 1:
            raise AnimatedImageError(ANIMATED_IMAGE_REJECTED, input_path)

        requested = settings.requested_formats()
        if not requested:
            logger.warning(f"未选择任何输出格式，跳过编码: {input_path}")
            return ConversionResult(
                success=True,
                input_path=input_path,
                input_size=input_size,
                original_dimensions=(metadata.width, metadata.height),
            )

        prepared = prepare_image(input_path, settings)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            result = self._encode_formats(
                input_path, input_size, output_dir, prepared, requested, settings
            )
        finally:
            prepared.image.close()

        return result

    def _encode_formats(
        self,
        input_path: Path,
        input_size: int,
        output_dir: Path,
        prepared: PreparedImage,
        requested: list[OutputFormat],
        settings: ConversionSettings,
    ) -> ConversionResult:
        """逐个格式编码，单个格式失败不影响其他格式"""
        output_paths: dict[str, Path] = {}
        output_sizes: dict[str, int] = {}
        savings: dict[str, int] = {}
        failed: dict[str, str] = {}

        for fmt in requested:
            try:
                candidate = PathResolver.resolve_output_path(input_path, fmt, output_dir)
                output_path = PathResolver.ensure_unique_path(candidate)
                output_size = self.encoder.encode(
                    prepared, output_path, fmt, get_save_parameters(fmt, settings)
                )
            except Exception as e:
                ErrorHandler._log_error(f"{fmt.value} 编码", input_path, e)
                failed[fmt.value] = MessageFormatter.error_text(e)
                continue

            output_paths[fmt.value] = output_path
            output_sizes[fmt.value] = output_size
            savings[fmt.value] = calculate_savings(input_size, output_size)
            logger.info(
                f"{input_path.name} → {output_path.name} "
                f"({input_size} → {output_size} bytes, {savings[fmt.value]}%)"
            )

        return ConversionResult(
            success=not failed,
            input_path=input_path,
            input_size=input_size,
            output_paths=output_paths,
            output_sizes=output_sizes,
            savings=savings,
            failed_formats=failed,
            error="; ".join(failed.values()) if failed else None,
            was_resized=prepared.was_resized,
            original_dimensions=prepared.original_size,
            final_dimensions=prepared.image.size,
        )


@handle_image_errors("图像解码")
def prepare_image(input_path: Path, settings: ConversionSettings) -> PreparedImage:
    """解码并生成各格式共享的只读中间结果"""
    with Image.open(input_path) as img:
        img.load()
        # 校正方向，同时从 EXIF 中移除方向标记
        image = ImageOps.exif_transpose(img)

    original_size = image.size
    image = _resize_to_max_width(image, settings.max_width)

    if settings.preserve_metadata:
        metadata = {
            key: image.info[key]
            for key in ("exif", "icc_profile", "xmp")
            if image.info.get(key)
        }
    else:
        metadata = {}
        for key in METADATA_KEYS:
            image.info.pop(key, None)

    return PreparedImage(
        image=image,
        metadata=metadata,
        was_resized=image.size != original_size,
        original_size=original_size,
    )


def _resize_to_max_width(image: Image.Image, max_width: int | None) -> Image.Image:
    """宽度超过上限时等比缩小，从不放大"""
    if max_width is None or image.width <= max_width:
        return image

    if image.mode in ("1", "P"):
        has_alpha = "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")

    new_height = max(1, round(image.height * max_width / image.width))
    logger.debug(f"缩放 {image.size} → {(max_width, new_height)}")
    return image.resize((max_width, new_height), Image.Resampling.LANCZOS)
