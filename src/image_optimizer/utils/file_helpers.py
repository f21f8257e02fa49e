"""文件校验工具模块。

把候选路径划分为可处理的图片文件与其他路径（不存在、目录、扩展名不支持）。
"""

import stat
from collections.abc import Iterable
from pathlib import Path

from ..models.constants import is_supported_extension
from ..models.conversion_result import ValidationReport
from .logging_helpers import get_logger


logger = get_logger()


def is_image_file(file_path: str | Path) -> bool:
    """仅按扩展名判断是否为支持的图片"""
    return is_supported_extension(file_path)


def is_valid_image_file(file_path: str | Path) -> bool:
    """路径存在、是普通文件且扩展名受支持"""
    path = Path(file_path)
    try:
        mode = path.stat().st_mode
    except (OSError, ValueError) as e:
        logger.debug(f"无法读取文件状态 {path}: {e}")
        return False

    return stat.S_ISREG(mode) and is_image_file(path)


def classify_paths(paths: Iterable[str | Path]) -> ValidationReport:
    """稳定划分候选路径

    Args:
        paths: 候选路径序列

    Returns:
        ValidationReport: valid_files 与 invalid_files，均保持输入顺序
    """
    report = ValidationReport()

    for raw in paths:
        try:
            path = Path(raw)
        except TypeError:
            path = Path(str(raw))

        if is_valid_image_file(path):
            report.valid_files.append(path)
        else:
            report.invalid_files.append(path)

    if report.invalid_files:
        logger.info(f"跳过 {len(report.invalid_files)} 个无效或不支持的路径")

    return report
