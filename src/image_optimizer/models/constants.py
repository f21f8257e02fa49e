"""图像处理相关常量定义。"""

from enum import Enum
from pathlib import Path
from typing import Final


class OutputFormat(str, Enum):
    """可输出的目标格式

    定义顺序即同一输入的编码顺序，保证命名结果可复现。
    """

    WEBP = "webp"
    PNG = "png"

    @property
    def pillow_format(self) -> str:
        """Pillow 保存时使用的格式名"""
        return self.value.upper()


class ImageFormats:
    """输入格式与输出命名规则"""

    # 桌面端接受的输入扩展名（小写，含点）
    SUPPORTED_EXTENSIONS: Final[frozenset[str]] = frozenset(
        {
            ".jpg",
            ".jpeg",
            ".png",
            ".tif",
            ".tiff",
            ".webp",
            ".gif",
            ".heic",
            ".heif",
            ".bmp",
        }
    )

    # 各输出格式的文件名后缀，PNG 加 _optimized 避免与 WebP 同名
    OUTPUT_NAME_SUFFIX: Final[dict[OutputFormat, str]] = {
        OutputFormat.WEBP: "",
        OutputFormat.PNG: "_optimized",
    }

    OUTPUT_EXTENSION: Final[dict[OutputFormat, str]] = {
        OutputFormat.WEBP: ".webp",
        OutputFormat.PNG: ".png",
    }

    HEIF_EXTENSIONS: Final[frozenset[str]] = frozenset({".heic", ".heif"})


def is_supported_extension(path: str | Path) -> bool:
    """扩展名（不区分大小写）是否在支持列表中"""
    return Path(path).suffix.lower() in ImageFormats.SUPPORTED_EXTENSIONS
