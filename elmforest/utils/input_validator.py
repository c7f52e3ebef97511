"""
输入验证模块。

提供用户输入的验证和 sanitization 功能。
"""

import os
import re


class InputValidationError(Exception):
    """输入验证错误异常。"""
    pass


class InputValidator:
    """
    输入验证器类。

    提供用户输入的验证和 sanitization 功能。
    """

    VERSION_REQUEST_PATTERN = re.compile(r'^[a-zA-Z0-9._-]+$')
    MAX_VERSION_LENGTH = 100

    @classmethod
    def validate_version_string(cls, version: str) -> bool:
        """
        验证版本号字符串的有效性。

        参数:
            version: 版本号字符串（也接受 "latest"）

        返回:
            验证通过返回 True，否则抛出 InputValidationError
        """
        if not version or not version.strip():
            raise InputValidationError("版本号不能为空")

        version = version.strip()

        if len(version) > cls.MAX_VERSION_LENGTH:
            raise InputValidationError(f"版本号不能超过 {cls.MAX_VERSION_LENGTH} 个字符")

        if not cls.VERSION_REQUEST_PATTERN.match(version):
            raise InputValidationError(f"版本号格式无效: {version}")

        if version in (".", ".."):
            raise InputValidationError(f"版本号格式无效: {version}")

        return True

    @classmethod
    def sanitize_version_string(cls, version: str) -> str:
        """
        sanitize 版本号字符串。

        参数:
            version: 原始版本号

        返回:
            sanitized 后的版本号
        """
        if not version:
            return ""
        return version.strip()

    @classmethod
    def safe_join_path(cls, base_path: str, *paths: str) -> str:
        """
        安全连接路径，防止路径遍历。

        参数:
            base_path: 基础路径
            *paths: 要连接的路径部分

        返回:
            安全连接后的路径

        抛出:
            InputValidationError: 如果结果路径不在 base_path 之下
        """
        base = os.path.abspath(base_path)
        joined = os.path.abspath(os.path.join(base, *paths))
        if not joined.startswith(base + os.sep):
            raise InputValidationError(f"路径遍历检测: {joined}")
        return joined
