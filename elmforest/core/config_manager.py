"""
配置管理器模块。

提供应用程序配置的加载和验证功能，生成不可变的 ForestConfig 对象。
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple

from elmforest.utils.logger import get_logger
from elmforest.utils.json_file import load_json

logger = get_logger()

ROOT_ENV_VAR = "ELM_FOREST_ROOT"
DEFAULT_ROOT = "~/.elm-forest"
CONFIG_FILE_NAME = "config.json"
LOG_DIR_NAME = "logs"


class ConfigValidationError(Exception):
    """配置验证错误异常。"""
    pass


class ConfigLoadError(Exception):
    """配置加载错误异常。"""
    pass


class ForestConfig(NamedTuple):
    """
    Elm Forest 运行配置。

    root 下存放版本缓存 versions.json、日志目录以及每个已安装版本的目录。
    """

    root: Path
    registry_url: str = "https://registry.npmjs.org/elm"
    registry_timeout: float = 5.0
    registry_retry_count: int = 1
    first_version: str = "0.15.1-alpha"
    blacklist: Tuple[str, ...] = ("0.0.0",)
    manifest_name: str = "elm-package.json"
    version_key: str = "elm-version"
    package_name: str = "elm"
    cache_file_name: str = "versions.json"
    binpath_file_name: str = "binpath.log"
    npm_executable: str = "npm"
    elm_executable: str = "elm"
    init_args: Tuple[str, ...] = ("package", "install", "elm-lang/core")

    @property
    def cache_file(self) -> Path:
        return self.root / self.cache_file_name

    @property
    def log_dir(self) -> Path:
        return self.root / LOG_DIR_NAME


class ConfigManager:
    """
    配置管理器类。

    负责从内置默认值、root 目录下的 config.json 以及环境变量中组装 ForestConfig。
    配置文件格式为 ``{"settings": {...}}``，settings 中只需写出需要覆盖的字段。
    """

    SETTINGS_FIELDS: Dict[str, Any] = {
        "registry_url": str,
        "registry_timeout": (int, float),
        "registry_retry_count": int,
        "first_version": str,
        "blacklist": list,
        "manifest_name": str,
        "version_key": str,
        "package_name": str,
        "npm_executable": str,
        "elm_executable": str,
        "init_args": list,
    }

    def __init__(self, root: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """
        初始化配置管理器。

        参数:
            root: 存储根目录，为 None 时读取环境变量 ELM_FOREST_ROOT，再退回默认值
            environ: 环境变量映射，默认为 os.environ
        """
        self._environ = os.environ if environ is None else environ
        self.root = self._resolve_root(root)
        self.config_file = self.root / CONFIG_FILE_NAME
        self._config: Optional[ForestConfig] = None

    def _resolve_root(self, root: Optional[str]) -> Path:
        """
        解析存储根目录。

        参数:
            root: 显式指定的根目录

        返回:
            展开用户目录后的绝对路径
        """
        candidate = root or self._environ.get(ROOT_ENV_VAR) or DEFAULT_ROOT
        return Path(os.path.expanduser(candidate)).absolute()

    def _read_settings(self) -> Dict[str, Any]:
        """
        读取配置文件中的 settings 部分。

        返回:
            settings 字典，文件不存在时返回空字典

        抛出:
            ConfigLoadError: 文件无法读取或不是合法 JSON
        """
        if not self.config_file.exists():
            logger.debug(f"配置文件不存在，使用默认配置: {self.config_file}")
            return {}
        try:
            data = load_json(self.config_file)
        except (OSError, ValueError) as e:
            raise ConfigLoadError(f"无法读取配置文件 {self.config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigLoadError(f"配置文件 {self.config_file} 必须是 JSON 对象")
        settings = data.get("settings", {})
        if not isinstance(settings, dict):
            raise ConfigLoadError("字段 'settings' 必须是对象")
        return settings

    def validate_settings(self, settings: Dict[str, Any]) -> bool:
        """
        验证配置的有效性。

        参数:
            settings: 要验证的 settings 字典

        返回:
            验证通过返回 True

        抛出:
            ConfigValidationError: 配置验证失败时抛出
        """
        for field, value in settings.items():
            expected_type = self.SETTINGS_FIELDS.get(field)
            if expected_type is None:
                raise ConfigValidationError(f"未知配置字段: {field}")
            if isinstance(value, bool) or not isinstance(value, expected_type):
                raise ConfigValidationError(
                    f"字段 'settings.{field}' 类型错误，实际为 {type(value).__name__}"
                )
            if expected_type is list and not all(isinstance(item, str) for item in value):
                raise ConfigValidationError(f"字段 'settings.{field}' 只能包含字符串")

        logger.debug("配置验证通过")
        return True

    def _build(self, settings: Dict[str, Any]) -> ForestConfig:
        overrides = dict(settings)
        for field in ("blacklist", "init_args"):
            if field in overrides:
                overrides[field] = tuple(overrides[field])
        if "registry_timeout" in overrides:
            overrides["registry_timeout"] = float(overrides["registry_timeout"])
        return ForestConfig(root=self.root, **overrides)

    def load(self) -> ForestConfig:
        """
        加载配置。

        配置文件无法读取或验证失败时记录错误并使用默认配置。

        返回:
            ForestConfig 实例
        """
        try:
            settings = self._read_settings()
            self.validate_settings(settings)
            self._config = self._build(settings)
        except ConfigLoadError as e:
            logger.error(f"加载配置文件失败，使用默认配置: {e}")
            self._config = ForestConfig(root=self.root)
        except ConfigValidationError as e:
            logger.error(f"配置验证失败，使用默认配置: {e}")
            self._config = ForestConfig(root=self.root)
        return self._config

    @property
    def config(self) -> ForestConfig:
        """
        获取配置（延迟加载）。

        返回:
            ForestConfig 实例
        """
        if self._config is None:
            self.load()
        return self._config
