"""
Elm Forest 工具模块。

提供日志记录、网络重试、输入验证和 JSON 文件读写等工具功能。
"""

from .logger import get_logger, setup_logger, set_log_level
from .retry import RetryHandler
from .input_validator import InputValidator, InputValidationError
from .json_file import atomic_save_json, load_json

__all__ = [
    "get_logger",
    "setup_logger",
    "set_log_level",
    "RetryHandler",
    "InputValidator",
    "InputValidationError",
    "atomic_save_json",
    "load_json",
]
