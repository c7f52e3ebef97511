"""
Elm 项目模块。

提供查找最近的 elm-package.json 以及读取其中版本约束的功能。
"""

import os
from pathlib import Path

from elmforest.core.config_manager import ForestConfig
from elmforest.core.constraints import VersionConstraint, parse_constraint
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.utils.json_file import load_json
from elmforest.utils.logger import get_logger

logger = get_logger()


class ElmProject:
    """
    Elm 项目类。

    代表一个 elm-package.json 文件。
    """

    def __init__(self, manifest_path: Path, version_key: str = "elm-version"):
        """
        初始化 Elm 项目。

        参数:
            manifest_path: elm-package.json 路径
            version_key: 声明版本约束的字段名
        """
        self.manifest_path = manifest_path
        self.version_key = version_key

    @property
    def directory(self) -> Path:
        return self.manifest_path.parent

    def query_constraint(self) -> VersionConstraint:
        """
        读取并解析项目声明的版本约束。

        返回:
            VersionConstraint 实例

        抛出:
            ForestError: 文件无法解析时抛出 BAD_ELM_PACKAGE，
                缺少约束字段时抛出 NO_VERSION_CONSTRAINT，
                约束不是字符串或格式无法识别时抛出 PARSE_CONSTRAINT_FAILED
        """
        try:
            data = load_json(self.manifest_path)
        except (OSError, ValueError) as e:
            raise ForestError(
                ErrorKind.BAD_ELM_PACKAGE,
                f"无法解析 {self.manifest_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ForestError(
                ErrorKind.BAD_ELM_PACKAGE,
                f"{self.manifest_path} 必须是 JSON 对象"
            )

        if self.version_key not in data:
            raise ForestError(
                ErrorKind.NO_VERSION_CONSTRAINT,
                f"{self.manifest_path} 缺少 `{self.version_key}` 字段"
            )

        value = data[self.version_key]
        if not isinstance(value, str):
            raise ForestError(
                ErrorKind.PARSE_CONSTRAINT_FAILED,
                f"`{self.version_key}` 必须是字符串"
            )

        constraint = parse_constraint(value)
        logger.debug(f"项目 {self.directory} 的版本约束: {value}")
        return constraint

    def __repr__(self) -> str:
        return f"ElmProject({str(self.manifest_path)!r})"


def find_project(start: str, config: ForestConfig) -> ElmProject:
    """
    从 start 目录开始逐级向上查找 elm-package.json。

    参数:
        start: 起始目录，支持 ~ 展开
        config: 运行配置

    返回:
        找到的 ElmProject

    抛出:
        ForestError: 直到文件系统根目录都没有找到时抛出 NO_ELM_PROJECT
    """
    current = Path(os.path.normpath(os.path.abspath(os.path.expanduser(start))))

    for directory in (current, *current.parents):
        candidate = directory / config.manifest_name
        if candidate.is_file():
            return ElmProject(candidate, config.version_key)

    raise ForestError(ErrorKind.NO_ELM_PROJECT, f"在 {start} 及其上级目录中找不到 Elm 项目")
