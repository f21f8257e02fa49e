"""图像优化器接口。

面向界面层的简洁入口，对外提供四个操作：校验路径、转换单个文件、批量转换、生成唯一文件名。
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .core.conversion_engine import SingleFileConverter
from .core.image_info import ImageInfoExtractor
from .engine.batch import BatchConverter, ProgressCallback
from .engine.config import SettingsBuilder
from .exceptions import ErrorHandler, ValidationError
from .models import (
    BasicImageInfo,
    BatchResult,
    ConversionResult,
    ConversionSettings,
    ValidationReport,
)
from .utils.file_helpers import classify_paths
from .utils.logging_helpers import get_logger
from .utils.naming_helpers import unique_path


logger = get_logger()

SettingsInput = ConversionSettings | Mapping[str, Any] | None


class ImageOptimizer:
    """图像优化器

    不持有任何跨调用的状态，界面层创建一个实例并在各操作间复用即可。
    """

    def __init__(
        self,
        converter: SingleFileConverter | None = None,
        settings_builder: SettingsBuilder | None = None,
    ):
        self.settings_builder = settings_builder or SettingsBuilder()
        self.converter = converter or SingleFileConverter()
        self.batch_converter = BatchConverter(
            converter=self.converter,
            settings_builder=self.settings_builder,
        )
        self.info_extractor = ImageInfoExtractor()

        logger.debug("初始化图像优化器")

    def validate(self, paths: Sequence[str | Path]) -> ValidationReport:
        """把候选路径划分为有效图片与其他路径"""
        return classify_paths(paths)

    def convert_one(
        self, input_path: str | Path, settings: SettingsInput = None
    ) -> ConversionResult:
        """转换单个文件。

        Args:
            input_path: 输入文件路径
            settings: 转换设置，None 使用默认设置

        Returns:
            ConversionResult: 转换结果

        Raises:
            ValidationError: 设置结构不合法

        Examples:
            >>> optimizer = ImageOptimizer()
            >>> result = optimizer.convert_one("photo.jpg", {"quality": 75})
            >>> result.savings.get("webp")
        """
        resolved = self.settings_builder.build(settings)
        return self.converter.convert(input_path, resolved)

    def convert_batch(
        self,
        input_paths: Sequence[str | Path],
        settings: SettingsInput = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ConversionResult]:
        """顺序转换一批文件，每个文件完成后回调一次 on_progress"""
        return self.batch_converter.convert_batch(
            input_paths, self.settings_builder.build(settings), on_progress
        )

    def run_batch(
        self,
        input_paths: Sequence[str | Path],
        settings: SettingsInput = None,
        on_progress: ProgressCallback | None = None,
    ) -> BatchResult:
        """校验后批量转换并汇总统计

        无效路径在校验阶段被剔除并计入 skipped_count，不占用进度事件。
        """
        resolved = self.settings_builder.build(settings)
        report = self.validate(input_paths)
        results = self.batch_converter.convert_batch(
            report.valid_files, resolved, on_progress
        )
        return BatchResult.from_results(
            results,
            requested_formats=[fmt.value for fmt in resolved.requested_formats()],
            skipped_count=len(report.invalid_files),
        )

    def unique_name(self, candidate: str | Path) -> Path:
        """返回不与现有文件冲突的路径"""
        return unique_path(candidate)

    def get_image_info(self, input_path: str | Path) -> BasicImageInfo:
        """探测图片基础信息"""
        return self.info_extractor.extract(input_path)


def convert_images(
    input_paths: Sequence[str | Path], **settings: Any
) -> list[ConversionResult]:
    """便捷的批量转换函数

    Examples:
        >>> results = convert_images(["a.jpg", "b.png"], quality=70, max_width=1600)
        >>> [r.success for r in results]
    """
    try:
        return ImageOptimizer().convert_batch(input_paths, settings)
    except ValidationError as e:
        logger.error(f"便捷批量转换失败: {e}")
        raise


def convert_image(input_path: str | Path, **settings: Any) -> ConversionResult:
    """便捷的单文件转换函数，设置错误也以失败结果返回"""
    try:
        return ImageOptimizer().convert_one(input_path, settings)
    except ValidationError as e:
        return ErrorHandler.handle_with_context(
            e, Path(input_path), "便捷转换函数", log_level="warning"
        )
