#!/usr/bin/env python3
"""批量转换演示脚本。

在临时目录生成几张测试图，演示校验、批量转换、进度回调与不覆盖命名。
"""

import tempfile
from pathlib import Path

from PIL import Image, ImageDraw

from image_optimizer import ImageOptimizer, ProgressEvent


def create_demo_images(target: Path) -> list[Path]:
    """生成演示用图片，包含一张不支持的文本文件"""
    photo = Image.new("RGB", (2400, 1600), color="white")
    draw = ImageDraw.Draw(photo)
    for i in range(60):
        x, y = (i * 40) % 2400, (i * 27) % 1600
        draw.rectangle([x, y, x + 120, y + 80], fill=(i * 4 % 256, i * 7 % 256, 200))
    photo_path = target / "photo.jpg"
    photo.save(photo_path, "JPEG", quality=95)

    logo = Image.new("RGBA", (400, 400), color=(0, 0, 0, 0))
    ImageDraw.Draw(logo).ellipse([50, 50, 350, 350], fill=(255, 80, 0, 200))
    logo_path = target / "logo.png"
    logo.save(logo_path, "PNG")

    notes_path = target / "notes.txt"
    notes_path.write_text("not an image")

    return [photo_path, logo_path, notes_path]


def print_progress(event: ProgressEvent) -> None:
    status = "✅" if event.result.success else "❌"
    print(f"  [{event.completed}/{event.total}] {status} {event.current_file.name}")


def main() -> None:
    optimizer = ImageOptimizer()

    with tempfile.TemporaryDirectory() as tmp:
        workdir = Path(tmp)
        candidates = create_demo_images(workdir)

        print("🔍 校验输入")
        report = optimizer.validate(candidates)
        print(f"  有效: {[p.name for p in report.valid_files]}")
        print(f"  跳过: {[p.name for p in report.invalid_files]}")

        print("\n🚀 批量转换 (WebP + PNG, 最大宽度 1600)")
        batch = optimizer.run_batch(
            candidates,
            {
                "quality": 75,
                "maxWidth": 1600,
                "outputFolder": str(workdir / "out"),
                "outputFormats": {"webp": True, "png": True},
            },
            on_progress=print_progress,
        )

        for result in batch.results:
            print(f"  {result.input_path.name}: {result.get_summary()}")
        print(f"\n📊 {batch.get_summary()}")
        print(f"🔔 {batch.get_notification()}")

        print("\n📝 再次转换同一文件不会覆盖已有输出")
        again = optimizer.convert_one(candidates[0], {"outputFolder": str(workdir / "out")})
        print(f"  {again.output_paths}")
        print(f"  下一个可用名称: {optimizer.unique_name(again.output_paths['webp'])}")


if __name__ == "__main__":
    main()
