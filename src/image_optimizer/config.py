"""统一配置管理模块。

提供转换默认值与日志配置，支持通过 ``IMGOPT_`` 前缀的环境变量覆盖。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionDefaults:
    """转换相关的默认配置"""

    # 与桌面端默认设置保持一致
    DEFAULT_QUALITY: int = 80
    DEFAULT_WEBP: bool = True
    DEFAULT_PNG: bool = False

    # WebP 编码努力程度 0-6，4 为编码器默认值
    WEBP_METHOD: int = 4

    # PNG 始终使用最高压缩级别
    PNG_COMPRESS_LEVEL: int = 9

    # 唯一文件名探测上限，超过则报错
    MAX_NAME_ATTEMPTS: int = 100_000


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.conversion = ConversionDefaults()
        self.logging = LoggingDefaults()

        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        if quality := os.getenv("IMGOPT_DEFAULT_QUALITY"):
            object.__setattr__(
                self.conversion, "DEFAULT_QUALITY", _clamp(int(quality), 1, 100)
            )

        if webp_method := os.getenv("IMGOPT_WEBP_METHOD"):
            object.__setattr__(
                self.conversion, "WEBP_METHOD", _clamp(int(webp_method), 0, 6)
            )

        if png_level := os.getenv("IMGOPT_PNG_COMPRESS_LEVEL"):
            object.__setattr__(
                self.conversion, "PNG_COMPRESS_LEVEL", _clamp(int(png_level), 0, 9)
            )

        if max_attempts := os.getenv("IMGOPT_MAX_NAME_ATTEMPTS"):
            object.__setattr__(
                self.conversion, "MAX_NAME_ATTEMPTS", max(1, int(max_attempts))
            )

        if log_level := os.getenv("IMGOPT_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if log_format := os.getenv("IMGOPT_LOG_FORMAT"):
            object.__setattr__(self.logging, "LOG_FORMAT", log_format)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
