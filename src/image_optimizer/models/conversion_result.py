"""转换结果模型。

定义单文件结果、进度事件、批量汇总以及路径校验结果。
"""

import math
from pathlib import Path
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field

from ..utils.message_formatter import MessageFormatter


def calculate_savings(input_size: int, output_size: int) -> int:
    """节省百分比，四舍五入取整，输出更大时为负数

    与桌面端 Math.round 一致，.5 向正无穷方向取整。
    """
    if input_size <= 0:
        return 0
    return math.floor((input_size - output_size) / input_size * 100 + 0.5)


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class ConversionResult(BaseResult):
    """单个输入文件的转换结果

    output_paths / output_sizes / savings 只包含实际生成成功的格式。
    """

    input_path: Path = Field(description="输入文件路径")
    input_size: int | None = Field(None, description="输入文件大小（字节）")

    output_paths: dict[str, Path] = Field(default_factory=dict, description="各格式输出路径")
    output_sizes: dict[str, int] = Field(default_factory=dict, description="各格式输出大小")
    savings: dict[str, int] = Field(default_factory=dict, description="各格式节省百分比")
    failed_formats: dict[str, str] = Field(
        default_factory=dict, description="请求了但编码失败的格式及原因"
    )

    was_resized: bool = Field(False, description="是否调整了尺寸")
    original_dimensions: tuple[int, int] | None = Field(None, description="原始尺寸")
    final_dimensions: tuple[int, int] | None = Field(None, description="最终尺寸")

    @classmethod
    def failure(
        cls, input_path: Path, error: str, input_size: int | None = None
    ) -> "ConversionResult":
        """构建失败结果"""
        return cls(
            success=False,
            input_path=input_path,
            input_size=input_size,
            error=error,
        )

    def get_input_size_human(self) -> str:
        if self.input_size is None:
            return "-"
        return self.format_size(self.input_size)

    def get_output_size_human(self, fmt: str) -> str:
        if fmt not in self.output_sizes:
            return "-"
        return self.format_size(self.output_sizes[fmt])

    def get_summary(self) -> str:
        """转换结果摘要"""
        parts = [
            f"{fmt}: {self.get_input_size_human()} → "
            f"{self.get_output_size_human(fmt)} ({self.savings[fmt]}%)"
            for fmt in self.output_paths
        ]
        if not self.success:
            parts.insert(0, f"失败: {self.error}")
        return "; ".join(parts) if parts else "无输出"

    def to_payload(self) -> dict[str, Any]:
        """序列化为桌面端使用的字典（camelCase 键、字符串路径）"""
        payload: dict[str, Any] = {
            "success": self.success,
            "inputPath": str(self.input_path),
        }
        if self.input_size is not None:
            payload["inputSize"] = self.input_size
        if self.output_paths:
            payload["outputPaths"] = {k: str(v) for k, v in self.output_paths.items()}
            payload["outputSizes"] = dict(self.output_sizes)
            payload["savings"] = dict(self.savings)
        if self.failed_formats:
            payload["failedFormats"] = dict(self.failed_formats)
        if self.error is not None:
            payload["error"] = self.error
        return payload


class ProgressEvent(BaseModel):
    """单个文件处理完成后发出的进度事件"""

    model_config = ConfigDict(frozen=True)

    completed: int = Field(ge=1, description="已完成数量（从 1 开始）")
    total: int = Field(ge=1, description="本批次文件总数")
    current_file: Path = Field(description="刚完成的文件")
    result: ConversionResult = Field(description="该文件的转换结果")

    @property
    def percent(self) -> float:
        return self.completed / self.total * 100


class ResultCollection(BaseResult):
    """结果集合基类，提供通用的统计方法"""

    results: list[Any] = Field(description="结果列表")

    def get_successful_items(self) -> list[Any]:
        """获取成功的结果项"""
        return [r for r in self.results if getattr(r, "success", False)]

    def get_failed_items(self) -> list[Any]:
        """获取失败的结果项"""
        return [r for r in self.results if not getattr(r, "success", False)]

    def get_total_count(self) -> int:
        return len(self.results)

    def get_success_count(self) -> int:
        return len(self.get_successful_items())

    def get_failure_count(self) -> int:
        return len(self.get_failed_items())

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        total = self.get_total_count()
        if total == 0:
            return 0.0
        return (self.get_success_count() / total) * 100


class BatchResult(ResultCollection):
    """批量转换汇总

    部分文件失败的批次依然是"已完成"的批次，success 只反映批次本身是否跑完。
    """

    results: list[ConversionResult] = Field(description="按输入顺序的转换结果")
    requested_formats: list[str] = Field(default_factory=list, description="请求的格式")
    skipped_count: int = Field(0, ge=0, description="校验阶段跳过的文件数")

    @classmethod
    def from_results(
        cls,
        results: list[ConversionResult],
        requested_formats: list[str],
        skipped_count: int = 0,
    ) -> "BatchResult":
        return cls(
            success=True,
            results=results,
            requested_formats=requested_formats,
            skipped_count=skipped_count,
        )

    def get_total_input_size(self, fmt: str | None = None) -> int:
        """输入总大小；指定格式时只统计产出了该格式的文件"""
        return sum(
            r.input_size or 0
            for r in self.results
            if r.input_size is not None and (fmt is None or fmt in r.output_sizes)
        )

    def get_total_output_size(self, fmt: str) -> int:
        return sum(r.output_sizes.get(fmt, 0) for r in self.results)

    def get_overall_savings(self, fmt: str) -> int:
        """指定格式的整体节省百分比"""
        return calculate_savings(
            self.get_total_input_size(fmt), self.get_total_output_size(fmt)
        )

    def get_notification(self) -> str:
        """完成通知文案"""
        return MessageFormatter.batch_completed(
            self.get_total_count(), self.requested_formats
        )

    def get_summary(self) -> str:
        """批量处理摘要"""
        if not self.success:
            return f"批量处理失败: {self.error}"

        lines = [
            f"处理 {self.get_success_count()}/{self.get_total_count()} 个文件 "
            f"(成功率 {self.get_success_rate():.1f}%)"
        ]
        for fmt in self.requested_formats:
            total_in = self.get_total_input_size(fmt)
            total_out = self.get_total_output_size(fmt)
            lines.append(
                f"{fmt}: {self.format_size(total_in)} → {self.format_size(total_out)} "
                f"({self.get_overall_savings(fmt)}%)"
            )
        if self.skipped_count:
            lines.append(MessageFormatter.files_skipped(self.skipped_count))
        return "; ".join(lines)


class ValidationReport(BaseModel):
    """路径校验结果，两个列表均保持输入顺序"""

    valid_files: list[Path] = Field(default_factory=list)
    invalid_files: list[Path] = Field(default_factory=list)

    def to_payload(self) -> dict[str, list[str]]:
        return {
            "validFiles": [str(p) for p in self.valid_files],
            "invalidFiles": [str(p) for p in self.invalid_files],
        }
