"""测试配置文件。

在临时目录中生成测试图片，并提供设置构建辅助函数。
"""

from pathlib import Path

import pytest
from PIL import Image, ImageCms, ImageDraw

from image_optimizer.config import reset_config


def _draw_pattern(img: Image.Image, steps: int = 40) -> None:
    """画一些色块，避免纯色图片压缩结果过于极端"""
    draw = ImageDraw.Draw(img)
    width, height = img.size
    for i in range(steps):
        x, y = (i * 37) % width, (i * 23) % height
        color = (i * 5 % 256, i * 7 % 256, i * 11 % 256)
        if img.mode == "RGBA":
            color = (*color, 80 + i * 4 % 175)
        draw.rectangle([x, y, x + width // 8, y + height // 8], fill=color)


@pytest.fixture(autouse=True)
def fresh_config():
    """每个测试前后重置全局配置，隔离环境变量覆盖"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """存放输入图片的目录"""
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """指定输出目录（尚未创建）"""
    return tmp_path / "output"


@pytest.fixture
def rgb_jpeg(image_dir: Path) -> Path:
    """800x600 的 JPEG 照片"""
    path = image_dir / "photo.jpg"
    img = Image.new("RGB", (800, 600), color="white")
    _draw_pattern(img)
    img.save(path, "JPEG", quality=95)
    return path


@pytest.fixture
def rgba_png(image_dir: Path) -> Path:
    """带透明通道的 PNG"""
    path = image_dir / "logo.png"
    img = Image.new("RGBA", (200, 200), color=(0, 0, 0, 0))
    _draw_pattern(img, steps=20)
    img.save(path, "PNG")
    return path


@pytest.fixture
def portrait_png(image_dir: Path) -> Path:
    """300x600 的竖图"""
    path = image_dir / "portrait.png"
    img = Image.new("RGB", (300, 600), color="navy")
    _draw_pattern(img, steps=10)
    img.save(path, "PNG")
    return path


@pytest.fixture
def color_key_png(image_dir: Path) -> Path:
    """RGB 模式、以 tRNS 颜色键标记白色透明的 PNG"""
    path = image_dir / "stamp.png"
    img = Image.new("RGB", (120, 80), color="white")
    ImageDraw.Draw(img).rectangle([20, 20, 100, 60], fill=(200, 30, 30))
    img.save(path, "PNG", transparency=(255, 255, 255))
    return path


@pytest.fixture
def animated_gif(image_dir: Path) -> Path:
    """两帧动画 GIF"""
    path = image_dir / "anim.gif"
    frames = [Image.new("RGB", (64, 64), color=c) for c in ("red", "blue")]
    frames[0].save(path, "GIF", save_all=True, append_images=frames[1:], duration=100)
    return path


@pytest.fixture
def exif_jpeg(image_dir: Path) -> Path:
    """带 EXIF（方向 6、相机厂商）和 sRGB ICC 配置文件的 300x200 JPEG"""
    path = image_dir / "camera.jpg"
    img = Image.new("RGB", (300, 200), color="green")
    _draw_pattern(img, steps=10)

    exif = Image.Exif()
    exif[0x0112] = 6
    exif[0x010F] = "TestCam"
    icc = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()

    img.save(path, "JPEG", quality=90, exif=exif.tobytes(), icc_profile=icc)
    return path


@pytest.fixture
def corrupt_jpeg(image_dir: Path) -> Path:
    """扩展名是 .jpg 但内容不是图片"""
    path = image_dir / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")
    return path


@pytest.fixture
def text_file(image_dir: Path) -> Path:
    path = image_dir / "notes.txt"
    path.write_text("hello")
    return path


def create_settings(**kwargs):
    """创建 ConversionSettings，默认只输出 WebP"""
    from image_optimizer.models import ConversionSettings

    defaults = {
        "quality": 80,
        "lossless": False,
        "max_width": None,
        "preserve_metadata": False,
        "output_folder": None,
        "output_formats": {"webp": True, "png": False},
    }
    defaults.update(kwargs)
    return ConversionSettings.model_validate(defaults)
