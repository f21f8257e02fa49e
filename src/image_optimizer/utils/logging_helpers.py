"""日志工具模块。

提供统一的日志记录器获取与入口处的日志初始化。
"""

import inspect
import logging


def get_logger(name: str | None = None) -> logging.Logger:
    """获取标准化配置的日志记录器。

    Args:
        name: 日志记录器名称，默认使用调用模块的 __name__

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    if name is None:
        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")
        else:
            name = "unknown"

    return logging.getLogger(name)


def setup_logging(level: str | None = None) -> None:
    """按全局配置初始化根日志记录器，仅供程序入口调用。

    Args:
        level: 覆盖配置中的日志级别，如 "DEBUG"
    """
    from ..config import get_config

    logging_defaults = get_config().logging
    resolved = (level or logging_defaults.LOG_LEVEL).upper()

    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format=logging_defaults.LOG_FORMAT,
    )
