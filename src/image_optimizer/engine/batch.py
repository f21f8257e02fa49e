"""批量转换模块。

按输入顺序逐个转换文件，每个文件完成后发出一次进度事件。
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from ..core.conversion_engine import SingleFileConverter
from ..exceptions import ValidationError
from ..models.conversion_result import ConversionResult, ProgressEvent
from ..models.conversion_settings import ConversionSettings
from ..utils.file_helpers import is_image_file
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import UNSUPPORTED_FILE_TYPE
from .config import SettingsBuilder


logger = get_logger()

ProgressCallback = Callable[[ProgressEvent], None]


class BatchConverter:
    """批量转换器

    单个工作者顺序处理：第 N+1 个文件在第 N 个文件的结果与进度事件完成之后才开始，
    同一时刻内存中只有一张解码后的图片。
    """

    def __init__(
        self,
        converter: SingleFileConverter | None = None,
        settings_builder: SettingsBuilder | None = None,
    ):
        self.converter = converter or SingleFileConverter()
        self.settings_builder = settings_builder or SettingsBuilder()

    def convert_batch(
        self,
        input_paths: Sequence[str | Path],
        settings: ConversionSettings | Mapping[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> list[ConversionResult]:
        """转换一批文件

        Args:
            input_paths: 有序输入路径
            settings: 转换设置
            on_progress: 每个文件完成后调用的回调

        Returns:
            list[ConversionResult]: 与输入顺序一致的结果，数量等于输入数量

        Raises:
            ValidationError: 设置或输入列表结构不合法，此时不会处理任何文件
        """
        results: list[ConversionResult] = []

        for event in self.iter_batch(input_paths, settings):
            results.append(event.result)
            if on_progress is not None:
                on_progress(event)

        return results

    def iter_batch(
        self,
        input_paths: Sequence[str | Path],
        settings: ConversionSettings | Mapping[str, Any],
    ) -> Iterator[ProgressEvent]:
        """以生成器形式执行批次，恰好产出 len(input_paths) 个进度事件

        前置校验在调用时立即执行；文件在迭代时才逐个处理，生成器只能消费一次。
        """
        paths, resolved = self._prepare(input_paths, settings)
        return self._run(paths, resolved)

    def _prepare(
        self,
        input_paths: Sequence[str | Path],
        settings: ConversionSettings | Mapping[str, Any],
    ) -> tuple[list[Path], ConversionSettings]:
        """批次级前置校验"""
        if isinstance(input_paths, (str, bytes, Path)):
            raise ValidationError("input_paths 必须是路径序列，而不是单个路径")

        try:
            paths = [Path(p) for p in input_paths]
        except TypeError as e:
            raise ValidationError(f"无效的输入路径: {e}") from e

        return paths, self.settings_builder.build(settings)

    def _run(
        self, paths: list[Path], settings: ConversionSettings
    ) -> Iterator[ProgressEvent]:
        total = len(paths)
        logger.info(f"开始批量转换 {total} 个文件")

        for completed, path in enumerate(paths, start=1):
            if is_image_file(path):
                result = self.converter.convert(path, settings)
            else:
                logger.warning(f"不支持的文件类型，跳过: {path}")
                result = ConversionResult.failure(path, UNSUPPORTED_FILE_TYPE)

            yield ProgressEvent(
                completed=completed,
                total=total,
                current_file=path,
                result=result,
            )

        logger.info(f"批量转换完成 {total} 个文件")
