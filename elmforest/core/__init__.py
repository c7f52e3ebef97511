"""
Elm Forest 核心模块。

提供版本解析、约束匹配、版本选择、版本目录、安装管理和配置管理功能。
"""

from .errors import ErrorKind, ForestError, EXIT_CODES, GENERIC_EXIT_CODE
from .interfaces import IRegistryClient, IVersionCache, IProcessRunner, IInstallState
from .config_manager import ConfigManager, ForestConfig, ConfigValidationError, ConfigLoadError
from .version_utils import ExpandedVersion, parse_version, stage_rank
from .constraints import VersionConstraint, parse_constraint, try_parse_constraint
from .selector import find_suitable, first_match, select_best
from .remote_fetcher import RegistryClient
from .version_cache import VersionCache
from .project import ElmProject, find_project
from .version_catalog import VersionCatalog, CurrentProject
from .process_runner import ProcessRunner
from .installation_manager import InstallationManager, DirectoryInstallState
from .version_manager import VersionManager

__all__ = [
    "ErrorKind", "ForestError", "EXIT_CODES", "GENERIC_EXIT_CODE",
    "IRegistryClient", "IVersionCache", "IProcessRunner", "IInstallState",
    "ConfigManager", "ForestConfig", "ConfigValidationError", "ConfigLoadError",
    "ExpandedVersion", "parse_version", "stage_rank",
    "VersionConstraint", "parse_constraint", "try_parse_constraint",
    "find_suitable", "first_match", "select_best",
    "RegistryClient",
    "VersionCache",
    "ElmProject", "find_project",
    "VersionCatalog", "CurrentProject",
    "ProcessRunner",
    "InstallationManager", "DirectoryInstallState",
    "VersionManager",
]
