"""图像元数据模型。

探测阶段得到的基础信息，用于动画判断、缩放决策与信息展示。
"""

from pathlib import Path

from pydantic import BaseModel, Field, computed_field


class BasicImageInfo(BaseModel):
    """基础图片信息"""

    file_path: Path
    file_size: int = Field(description="文件大小（字节）")
    format: str = Field(description="图片格式")
    mode: str = Field(description="颜色模式")
    width: int = Field(description="图片宽度（已按 EXIF 方向校正）")
    height: int = Field(description="图片高度（已按 EXIF 方向校正）")
    has_transparency: bool = Field(default=False, description="是否有透明通道")
    frame_count: int = Field(default=1, description="帧数/页数")
    has_exif: bool = Field(default=False, description="是否包含 EXIF")
    has_icc_profile: bool = Field(default=False, description="是否包含 ICC 配置文件")

    @computed_field
    def is_animated(self) -> bool:
        """是否为多帧图片"""
        return self.frame_count > 1

    @computed_field
    def aspect_ratio(self) -> float:
        """宽高比"""
        return self.width / self.height if self.height > 0 else 0.0

    def get_file_size_human(self) -> str:
        """人性化显示文件大小"""
        from humanize import naturalsize

        return naturalsize(self.file_size, binary=True)
