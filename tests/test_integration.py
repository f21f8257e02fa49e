"""集成测试。

测试对外接口、设置模型、环境变量配置与 MCP 服务器。
"""

import asyncio
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from image_optimizer import (
    ConversionSettings,
    ImageOptimizer,
    convert_image,
    convert_images,
    get_version,
)
from image_optimizer.config import get_config, reset_config
from image_optimizer.engine import build_settings
from image_optimizer.exceptions import ValidationError


class TestImageOptimizer:
    """对外接口测试"""

    @pytest.fixture
    def optimizer(self):
        return ImageOptimizer()

    def test_validate(self, optimizer, rgb_jpeg: Path, text_file: Path):
        report = optimizer.validate([str(text_file), str(rgb_jpeg)])
        assert report.valid_files == [rgb_jpeg]
        assert report.invalid_files == [text_file]

    def test_convert_one_with_defaults(self, optimizer, rgb_jpeg: Path):
        result = optimizer.convert_one(rgb_jpeg)

        assert result.success
        assert list(result.output_paths) == ["webp"]

    def test_convert_one_rejects_bad_settings(self, optimizer, rgb_jpeg: Path):
        with pytest.raises(ValidationError):
            optimizer.convert_one(rgb_jpeg, {"quality": 101})

    def test_convert_batch(self, optimizer, rgb_jpeg: Path, rgba_png: Path):
        events = []
        results = optimizer.convert_batch(
            [rgb_jpeg, rgba_png], {"quality": 60}, on_progress=events.append
        )

        assert [r.success for r in results] == [True, True]
        assert len(events) == 2

    def test_run_batch_skips_invalid_paths(
        self, optimizer, rgb_jpeg: Path, text_file: Path, output_dir: Path
    ):
        events = []
        batch = optimizer.run_batch(
            [text_file, rgb_jpeg],
            {"outputFolder": str(output_dir)},
            on_progress=events.append,
        )

        assert batch.get_total_count() == 1
        assert batch.skipped_count == 1
        assert [e.total for e in events] == [1]
        assert batch.get_notification() == "Converted 1 file(s) to WebP"

    def test_unique_name(self, optimizer, tmp_path: Path):
        (tmp_path / "a.webp").write_bytes(b"x")
        assert optimizer.unique_name(tmp_path / "a.webp") == tmp_path / "a (1).webp"

    def test_convenience_function_returns_failure_result(self, rgb_jpeg: Path):
        result = convert_image(rgb_jpeg, quality=0)
        assert not result.success
        assert "quality" in result.error

    def test_convenience_function_logs_settings_error_as_warning(
        self, rgb_jpeg: Path, caplog
    ):
        with caplog.at_level(logging.WARNING, logger="image_optimizer"):
            result = convert_image(rgb_jpeg, max_width=0)

        assert not result.success
        records = [r for r in caplog.records if "便捷转换函数" in r.getMessage()]
        assert [r.levelno for r in records] == [logging.WARNING]

    def test_validation_error_inside_conversion_logged_as_error(
        self, rgb_jpeg: Path, caplog
    ):
        """文件边界上出现的 ValidationError 按通用错误处理"""
        from image_optimizer.exceptions import ErrorHandler

        with caplog.at_level(logging.WARNING, logger="image_optimizer"):
            result = ErrorHandler.handle_conversion_error(
                ValidationError("bad input"), rgb_jpeg
            )

        assert result.error == "bad input"
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_convenience_batch_function(self, rgb_jpeg: Path, rgba_png: Path):
        results = convert_images([rgb_jpeg, rgba_png], quality=70, max_width=100)
        assert [r.was_resized for r in results] == [True, True]

    def test_get_image_info(self, optimizer, rgb_jpeg: Path):
        info = optimizer.get_image_info(rgb_jpeg)
        assert info.format == "JPEG"
        assert info.get_file_size_human().endswith("KiB")


class TestConversionSettings:
    """设置模型测试"""

    def test_defaults(self):
        settings = ConversionSettings()

        assert settings.quality == 80
        assert not settings.lossless
        assert settings.max_width is None
        assert not settings.preserve_metadata
        assert settings.output_folder is None
        assert [f.value for f in settings.requested_formats()] == ["webp"]

    def test_camel_case_aliases(self, tmp_path: Path):
        settings = ConversionSettings.model_validate(
            {
                "maxWidth": 1920,
                "preserveMetadata": True,
                "outputFolder": str(tmp_path),
                "outputFormats": {"webp": True, "png": True},
            }
        )

        assert settings.max_width == 1920
        assert settings.preserve_metadata
        assert settings.output_folder == tmp_path
        assert [f.value for f in settings.requested_formats()] == ["webp", "png"]

    def test_blank_output_folder_means_next_to_input(self):
        assert ConversionSettings(output_folder="  ").output_folder is None

    @pytest.mark.parametrize("field", [{"quality": 0}, {"quality": 101}, {"max_width": 0}])
    def test_out_of_range_rejected(self, field):
        with pytest.raises(PydanticValidationError):
            ConversionSettings(**field)

    def test_build_settings_with_overrides(self):
        base = build_settings({"quality": 50})
        derived = build_settings(base, lossless=True)

        assert build_settings(base) is base
        assert derived.quality == 50
        assert derived.lossless
        assert not base.lossless

    def test_settings_are_immutable(self):
        settings = ConversionSettings()
        with pytest.raises(PydanticValidationError):
            settings.quality = 10


class TestConfig:
    """环境变量配置测试"""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("IMGOPT_DEFAULT_QUALITY", "65")
        monkeypatch.setenv("IMGOPT_PNG_COMPRESS_LEVEL", "42")
        reset_config()

        assert get_config().conversion.DEFAULT_QUALITY == 65
        assert get_config().conversion.PNG_COMPRESS_LEVEL == 9
        assert ConversionSettings().quality == 65

    def test_name_attempt_limit_from_env(self, monkeypatch, tmp_path: Path):
        from image_optimizer.exceptions import ProcessingError
        from image_optimizer.utils.naming_helpers import unique_path

        monkeypatch.setenv("IMGOPT_MAX_NAME_ATTEMPTS", "1")
        reset_config()
        (tmp_path / "a.png").write_bytes(b"x")
        (tmp_path / "a (1).png").write_bytes(b"x")

        with pytest.raises(ProcessingError):
            unique_path(tmp_path / "a.png")

    def test_version(self):
        assert get_version() == "0.1.0"


class TestMCPServer:
    """MCP服务器功能测试"""

    def test_mcp_server_imports(self):
        from image_optimizer.mcp_server import mcp

        assert mcp is not None

    def test_mcp_tools(self):
        from image_optimizer import mcp_server

        for name in (
            "validate_files",
            "convert_image",
            "convert_images_batch",
            "unique_name",
            "get_image_info",
        ):
            tool = getattr(mcp_server, name)
            assert hasattr(tool, "name")
            assert tool.name == name

    def test_validate_payload(self, rgb_jpeg: Path, text_file: Path):
        from image_optimizer.mcp_server import validate_paths

        payload = validate_paths([str(rgb_jpeg), str(text_file)])
        assert payload["validFiles"] == [str(rgb_jpeg)]
        assert payload["invalidFiles"] == [str(text_file)]

    def test_convert_single_payload(self, rgb_jpeg: Path):
        from image_optimizer.mcp_server import convert_single

        payload = convert_single(str(rgb_jpeg), {"quality": 50})
        assert payload["success"]
        assert payload["outputPaths"]["webp"].endswith("photo.webp")
        assert "webp" in payload["savings"]

    def test_convert_single_bad_settings(self, rgb_jpeg: Path):
        from image_optimizer.mcp_server import convert_single

        payload = convert_single(str(rgb_jpeg), {"quality": "high"})
        assert not payload["success"]
        assert payload["errorType"] == "validation"

    def test_batch_payload(self, rgb_jpeg: Path, rgba_png: Path, text_file: Path):
        from image_optimizer.mcp_server import convert_batch_with_progress

        payload = asyncio.run(
            convert_batch_with_progress(
                [str(rgb_jpeg), str(text_file), str(rgba_png)],
                {"outputFormats": {"webp": True, "png": True}},
            )
        )

        assert payload["success"]
        assert payload["totalFiles"] == 2
        assert payload["successfulFiles"] == 2
        assert payload["notification"] == "Converted 2 file(s) to WebP and PNG"
        assert payload["skipped"] == "1 unsupported file(s) skipped"
        assert [r["inputPath"] for r in payload["results"]] == [
            str(rgb_jpeg),
            str(rgba_png),
        ]

    def test_batch_requires_output_format(self, rgb_jpeg: Path):
        from image_optimizer.mcp_server import convert_batch_with_progress

        payload = asyncio.run(
            convert_batch_with_progress(
                [str(rgb_jpeg)], {"outputFormats": {"webp": False, "png": False}}
            )
        )

        assert not payload["success"]
        assert payload["error"] == "Please select at least one output format"
        assert not rgb_jpeg.with_suffix(".webp").exists()

    def test_image_info_missing_file(self, tmp_path: Path):
        from image_optimizer.mcp_server import image_info

        payload = image_info(str(tmp_path / "ghost.png"))
        assert not payload["success"]
        assert payload["errorType"] == "file"
