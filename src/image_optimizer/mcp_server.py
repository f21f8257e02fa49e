"""图像优化 MCP 服务器。

桌面端通过 MCP 调用的进程边界：校验路径、转换单个文件、批量转换（带进度上报）、生成唯一文件名。
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fastmcp import Context, FastMCP

from .converter import ImageOptimizer
from .engine.config import ensure_output_format_selected
from .exceptions import ConversionError
from .models import BatchResult
from .utils.logging_helpers import get_logger, setup_logging
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 响应构建器"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> MCPResponse:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result: MCPResponse = {
            "success": False,
            "error": message,
            "errorType": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str) -> MCPResponse:
        return MCPResponseBuilder.error(message=message, error_type="validation")

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> MCPResponse:
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )


logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("图像优化服务")

# 全局优化器实例（无跨调用状态）
optimizer = ImageOptimizer()


# ============================================================================
# 工具实现（与传输层解耦，便于直接调用）
# ============================================================================


def validate_paths(paths: list[str]) -> MCPResponse:
    report = optimizer.validate(paths)
    return {"success": True, **report.to_payload()}


def convert_single(
    input_path: str, settings: Mapping[str, Any] | None = None
) -> MCPResponse:
    try:
        result = optimizer.convert_one(input_path, settings)
    except ConversionError as e:
        logger.warning(MessageFormatter.operation_failed("设置校验", input_path, e))
        return MCPResponseBuilder.validation_error(e.message)

    return {**result.to_payload(), "summary": result.get_summary()}


def batch_payload(batch: BatchResult) -> MCPResponse:
    """批量结果的响应结构"""
    payload: MCPResponse = {
        "success": batch.success,
        "results": [r.to_payload() for r in batch.results],
        "totalFiles": batch.get_total_count(),
        "successfulFiles": batch.get_success_count(),
        "failedFiles": batch.get_failure_count(),
        "notification": batch.get_notification(),
        "summary": batch.get_summary(),
    }
    if batch.skipped_count:
        payload["skipped"] = MessageFormatter.files_skipped(batch.skipped_count)
    return payload


async def convert_batch_with_progress(
    input_paths: list[str],
    settings: Mapping[str, Any] | None = None,
    ctx: Context | None = None,
) -> MCPResponse:
    """执行一个批次，每个文件完成后向客户端上报进度

    文件转换在工作线程中逐个执行，事件循环在两次转换之间上报进度。
    """
    try:
        resolved = optimizer.settings_builder.build(settings)
        ensure_output_format_selected(resolved)
        report = optimizer.validate(input_paths)
        events = optimizer.batch_converter.iter_batch(report.valid_files, resolved)
    except ConversionError as e:
        logger.warning(MessageFormatter.operation_failed("批量设置校验", "batch", e))
        return MCPResponseBuilder.validation_error(e.message)

    results = []
    while (event := await asyncio.to_thread(next, events, None)) is not None:
        results.append(event.result)
        if ctx is not None:
            await ctx.report_progress(progress=event.completed, total=event.total)

    batch = BatchResult.from_results(
        results,
        requested_formats=[fmt.value for fmt in resolved.requested_formats()],
        skipped_count=len(report.invalid_files),
    )
    logger.info(batch.get_summary())
    return batch_payload(batch)


def image_info(input_path: str) -> MCPResponse:
    path = Path(input_path)
    if not path.exists():
        return MCPResponseBuilder.error(
            MessageFormatter.file_not_found(input_path), error_type="file"
        )

    try:
        info = optimizer.get_image_info(path)
    except ConversionError as e:
        logger.error(MessageFormatter.operation_failed("获取图片信息", input_path, e))
        return MCPResponseBuilder.processing_error(e.message, "图片信息获取")

    return {
        "success": True,
        "filePath": str(info.file_path),
        "fileSize": info.file_size,
        "fileSizeHuman": info.get_file_size_human(),
        "format": info.format,
        "mode": info.mode,
        "width": info.width,
        "height": info.height,
        "aspectRatio": info.aspect_ratio,
        "hasTransparency": info.has_transparency,
        "isAnimated": info.is_animated,
        "frameCount": info.frame_count,
        "hasExif": info.has_exif,
        "hasIccProfile": info.has_icc_profile,
    }


# ============================================================================
# MCP 工具
# ============================================================================


@mcp.tool()
def validate_files(paths: list[str]) -> MCPResponse:
    """校验候选路径，返回可转换的图片与其余路径（均保持输入顺序）

    Args:
        paths: 拖入或选择的文件路径
    """
    return validate_paths(paths)


@mcp.tool()
def convert_image(
    input_path: str, settings: dict[str, Any] | None = None
) -> MCPResponse:
    """把单张图片转换为 WebP 和/或优化后的 PNG

    Args:
        input_path: 输入图片路径
        settings: 转换设置，如 {"quality": 80, "maxWidth": 1920,
            "outputFormats": {"webp": true, "png": false}}
    """
    return convert_single(input_path, settings)


@mcp.tool()
async def convert_images_batch(
    input_paths: list[str],
    ctx: Context,
    settings: dict[str, Any] | None = None,
) -> MCPResponse:
    """顺序批量转换，每完成一个文件上报一次进度

    Args:
        input_paths: 输入图片路径，结果按相同顺序返回
        settings: 转换设置，至少需要选择一种输出格式
    """
    return await convert_batch_with_progress(input_paths, settings, ctx)


@mcp.tool()
def unique_name(path: str) -> MCPResponse:
    """返回不覆盖已有文件的路径，如 photo.webp → photo (1).webp"""
    try:
        return {"success": True, "path": str(optimizer.unique_name(path))}
    except ConversionError as e:
        return MCPResponseBuilder.processing_error(e.message, "生成文件名")


@mcp.tool()
def get_image_info(input_path: str) -> MCPResponse:
    """获取图片尺寸、格式、帧数、元数据等基础信息"""
    return image_info(input_path)


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    setup_logging()
    logger.info("启动图像优化 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
