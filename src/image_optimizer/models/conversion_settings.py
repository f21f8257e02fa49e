"""转换设置模型。

一次批量转换使用同一份不可变设置。字段同时接受 snake_case 与桌面端的 camelCase 命名。
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..config import get_config
from .constants import OutputFormat


class OutputFormats(BaseModel):
    """需要生成的输出格式开关"""

    model_config = ConfigDict(frozen=True)

    webp: bool = Field(
        default_factory=lambda: get_config().conversion.DEFAULT_WEBP,
        description="生成 WebP",
    )
    png: bool = Field(
        default_factory=lambda: get_config().conversion.DEFAULT_PNG,
        description="生成优化后的 PNG",
    )

    def requested(self) -> list[OutputFormat]:
        """按固定顺序返回被选中的格式"""
        return [fmt for fmt in OutputFormat if getattr(self, fmt.value)]

    @property
    def any_selected(self) -> bool:
        return self.webp or self.png


class ConversionSettings(BaseModel):
    """单次批量转换的设置"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    quality: int = Field(
        default_factory=lambda: get_config().conversion.DEFAULT_QUALITY,
        ge=1,
        le=100,
        description="有损质量 1-100",
    )
    lossless: bool = Field(False, description="无损模式，WebP 忽略 quality")
    max_width: int | None = Field(None, gt=0, description="最大宽度，None 表示不缩放")
    preserve_metadata: bool = Field(False, description="保留 EXIF/ICC 等元数据")
    output_folder: Path | None = Field(None, description="输出目录，None 表示与输入同目录")
    output_formats: OutputFormats = Field(
        default_factory=OutputFormats, description="输出格式开关"
    )

    @field_validator("output_folder", mode="before")
    @classmethod
    def blank_output_folder(cls, v: object) -> object:
        # 桌面端以空字符串表示"与输入同目录"
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("output_folder")
    @classmethod
    def normalize_output_folder(cls, v: Path | None) -> Path | None:
        if v is None:
            return None
        return v.expanduser().absolute()

    def requested_formats(self) -> list[OutputFormat]:
        """本次需要生成的格式列表"""
        return self.output_formats.requested()
