"""图片信息探测模块。

只读取文件头即可得到的信息：格式、尺寸、帧数、透明度与元数据是否存在。
"""

import importlib.util
from pathlib import Path

from PIL import Image

from ..exceptions import handle_image_errors
from ..models.image_metadata import BasicImageInfo
from ..utils.logging_helpers import get_logger


# 可选的 pillow-heif 插件，安装后才能解码 HEIC/HEIF
HAS_PILLOW_HEIF = importlib.util.find_spec("pillow_heif") is not None

# EXIF Orientation 取值 5-8 表示图片需要旋转 90/270 度
_EXIF_ORIENTATION_TAG = 0x0112
_ROTATED_ORIENTATIONS = {5, 6, 7, 8}

logger = get_logger()


def register_optional_openers() -> bool:
    """注册可选的解码插件，返回 HEIF 是否可用"""
    if not HAS_PILLOW_HEIF:
        return False

    import pillow_heif

    pillow_heif.register_heif_opener()
    logger.debug("HEIF 解码支持已启用")
    return True


HEIF_SUPPORTED = register_optional_openers()


class ImageInfoExtractor:
    """图片信息提取器"""

    @handle_image_errors("图片信息探测")
    def extract(self, file_path: str | Path) -> BasicImageInfo:
        """探测图片基础信息

        Args:
            file_path: 图片文件路径

        Returns:
            BasicImageInfo: 基础信息，宽高已按 EXIF 方向校正
        """
        file_path = Path(file_path)

        with Image.open(file_path) as img:
            width, height = img.size
            exif = img.getexif()
            if exif.get(_EXIF_ORIENTATION_TAG) in _ROTATED_ORIENTATIONS:
                width, height = height, width

            return BasicImageInfo(
                file_path=file_path,
                file_size=file_path.stat().st_size,
                format=img.format or "UNKNOWN",
                mode=img.mode,
                width=width,
                height=height,
                has_transparency=self._detect_transparency(img),
                frame_count=getattr(img, "n_frames", 1),
                has_exif=len(exif) > 0,
                has_icc_profile=bool(img.info.get("icc_profile")),
            )

    def _detect_transparency(self, img: Image.Image) -> bool:
        """检测图片是否有透明度"""
        if img.mode in ("RGBA", "LA", "PA"):
            return True

        return "transparency" in img.info
