"""设置构建器模块。

把调用方传入的设置（模型实例或字典）统一转换为经过验证的 ConversionSettings。
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError as CustomValidationError
from ..models.conversion_settings import ConversionSettings
from ..utils.logging_helpers import get_logger


logger = get_logger()


class SettingsBuilder:
    """转换设置构建器

    批次开始前完成全部结构校验，校验失败直接抛出，不触碰任何文件。
    """

    def build(
        self, settings: ConversionSettings | Mapping[str, Any] | None = None, **overrides: Any
    ) -> ConversionSettings:
        """构建转换设置

        Args:
            settings: 已有设置、字典（snake_case 或 camelCase 键）或 None 表示默认值
            **overrides: 覆盖字段

        Returns:
            ConversionSettings: 验证后的设置

        Raises:
            CustomValidationError: 设置结构不合法
        """
        if isinstance(settings, ConversionSettings) and not overrides:
            return settings

        try:
            match settings:
                case None:
                    data: dict[str, Any] = {}
                case ConversionSettings():
                    data = settings.model_dump()
                case Mapping():
                    data = dict(settings)
                case _:
                    raise CustomValidationError(
                        f"设置必须是 ConversionSettings 或字典，得到: {type(settings).__name__}"
                    )

            data.update(overrides)
            return ConversionSettings.model_validate(data)

        except PydanticValidationError as e:
            error_msg = self._format_validation_error(e)
            logger.warning(f"转换设置验证失败: {error_msg}")
            raise CustomValidationError(error_msg) from e

    def _format_validation_error(self, error: PydanticValidationError) -> str:
        """格式化验证错误"""
        messages = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            msg = err["msg"]
            if field:
                messages.append(f"{field}: {msg}")
            else:
                messages.append(msg)
        return "; ".join(messages)


def ensure_output_format_selected(settings: ConversionSettings) -> None:
    """调用方前置条件：至少选择一种输出格式

    核心流程本身接受空格式（返回空的成功结果），界面层在发起批次前调用本函数拦截。

    Raises:
        CustomValidationError: 没有选择任何格式
    """
    if not settings.output_formats.any_selected:
        raise CustomValidationError("Please select at least one output format")


# 全局设置构建器实例
_default_builder = SettingsBuilder()


def build_settings(
    settings: ConversionSettings | Mapping[str, Any] | None = None, **overrides: Any
) -> ConversionSettings:
    """便捷的设置构建函数"""
    return _default_builder.build(settings, **overrides)
