"""工具模块包。

提供纯工具函数，不包含业务逻辑。命名与路径校验工具依赖模型与异常定义，
请直接从 ``naming_helpers`` / ``file_helpers`` 子模块导入。
"""

from .logging_helpers import get_logger, setup_logging
from .message_formatter import MessageFormatter


__all__ = [
    "MessageFormatter",
    "get_logger",
    "setup_logging",
]
