"""
版本管理器模块。

协调版本目录与安装管理器，提供命令行各子命令使用的高层操作。
"""

import os
from typing import List, Optional, Sequence, Tuple

from elmforest.core.config_manager import ForestConfig
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.installation_manager import InstallationManager
from elmforest.core.interfaces import IInstallState, IProcessRunner, IRegistryClient, IVersionCache
from elmforest.core.selector import find_suitable
from elmforest.core.version_catalog import CurrentProject, VersionCatalog, VersionPool
from elmforest.core.version_utils import ExpandedVersion
from elmforest.utils.input_validator import InputValidator, InputValidationError
from elmforest.utils.logger import get_logger

logger = get_logger()


class VersionManager:
    """
    版本管理器类。

    本类作为协调者，将具体工作委托给 VersionCatalog 和 InstallationManager。
    """

    def __init__(
        self,
        config: ForestConfig,
        registry: Optional[IRegistryClient] = None,
        cache: Optional[IVersionCache] = None,
        runner: Optional[IProcessRunner] = None,
        install_state: Optional[IInstallState] = None,
    ):
        """
        初始化版本管理器。

        参数:
            config: 运行配置
            registry: 注册表客户端
            cache: 版本缓存
            runner: 进程执行器
            install_state: 安装状态检查
        """
        self.config = config
        self.catalog = VersionCatalog(config, registry=registry, cache=cache)
        self.installer = InstallationManager(config, runner=runner, install_state=install_state)

    @staticmethod
    def _validate_request(requested: str) -> str:
        requested = InputValidator.sanitize_version_string(requested)
        try:
            InputValidator.validate_version_string(requested)
        except InputValidationError as e:
            raise ForestError(ErrorKind.NO_MATCHING_VERSION, str(e)) from e
        return requested

    def list_versions(self) -> List[Tuple[ExpandedVersion, bool]]:
        """
        查询注册表中可用的版本及其安装状态。

        返回:
            (版本, 是否已安装) 列表，按新到旧排列
        """
        return [(version, self.installer.is_installed(version)) for version in self.catalog.query_versions()]

    def current(self, start: Optional[str] = None) -> CurrentProject:
        """
        获取当前目录所在项目应使用的版本。

        参数:
            start: 起始目录，默认为当前工作目录

        返回:
            CurrentProject
        """
        return self.catalog.current(start or os.getcwd())

    def resolve(self, requested: str, pool: Optional[VersionPool] = None) -> ExpandedVersion:
        """
        解析用户请求的版本。

        未提供版本池时优先在缓存中精确匹配，其次查询注册表。

        参数:
            requested: 用户输入的版本，如 "latest"、"0.18"
            pool: 已获取的版本池

        返回:
            匹配的版本

        抛出:
            ForestError: 没有匹配版本时抛出 NO_MATCHING_VERSION
        """
        requested = self._validate_request(requested)
        if pool is None:
            version = self.catalog.expand_version(requested)
        else:
            version = find_suitable(requested, pool)
            if version is None:
                raise ForestError(
                    ErrorKind.NO_MATCHING_VERSION,
                    f"找不到可安装的版本: {requested}"
                )
        if version.raw != version.expanded:
            logger.info(f"{version.raw} 解析为 {version.expanded}")
        return version

    def install(self, requested: str) -> Tuple[ExpandedVersion, bool]:
        """
        安装用户请求的版本。

        参数:
            requested: 用户输入的版本

        返回:
            (完整版本, 是否实际执行了安装) 元组
        """
        version = self.resolve(requested)
        return self.installer.install(version)

    def remove(self, requested: str) -> bool:
        """
        删除已安装的版本。

        参数:
            requested: 完整版本号

        返回:
            实际删除返回 True，未安装返回 False
        """
        requested = self._validate_request(requested)
        return self.installer.remove(ExpandedVersion(requested))

    def init(self, requested: str = "latest", cwd: Optional[str] = None) -> int:
        """
        使用指定版本初始化新的 Elm 项目。

        参数:
            requested: 用户输入的版本
            cwd: 项目目录，默认为当前工作目录

        返回:
            elm 退出码
        """
        version = self.resolve(requested)
        self.installer.ensure_installed(version)
        return self.installer.run_elm(version, self.config.init_args, cwd)

    def run_elm_here(self, args: Sequence[str], cwd: Optional[str] = None) -> int:
        """
        使用当前项目对应的版本运行 elm。

        参数:
            args: elm 参数
            cwd: 工作目录，默认为当前工作目录

        返回:
            elm 退出码
        """
        project = self.current(cwd)
        return self.installer.run_elm(project.version, args, cwd)

    def run_npm_here(self, args: Sequence[str], cwd: Optional[str] = None) -> int:
        """
        在当前项目对应版本的安装目录中运行 npm。

        参数:
            args: npm 参数
            cwd: 起始目录，默认为当前工作目录

        返回:
            npm 退出码
        """
        project = self.current(cwd)
        return self.installer.run_npm(project.version, args)
