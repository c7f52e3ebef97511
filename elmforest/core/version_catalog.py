"""
版本目录模块。

生成可安装的版本池：优先使用本地缓存，必要时查询 npm 注册表并回写缓存。
"""

from typing import NamedTuple, Optional, Sequence, Tuple

from elmforest.core.config_manager import ForestConfig
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IRegistryClient, IVersionCache
from elmforest.core.project import ElmProject, find_project
from elmforest.core.remote_fetcher import RegistryClient
from elmforest.core.selector import find_suitable, first_match, select_best
from elmforest.core.version_cache import VersionCache
from elmforest.core.version_utils import ExpandedVersion
from elmforest.utils.logger import get_logger

logger = get_logger()

VersionPool = Tuple[ExpandedVersion, ...]


class CurrentProject(NamedTuple):
    """当前项目及其应使用的版本。"""

    project: ElmProject
    version: ExpandedVersion


class VersionCatalog:
    """
    版本目录类。

    负责版本池的获取、过滤和缓存，以及为项目约束或用户输入选出版本。
    """

    def __init__(
        self,
        config: ForestConfig,
        registry: Optional[IRegistryClient] = None,
        cache: Optional[IVersionCache] = None,
    ):
        """
        初始化版本目录。

        参数:
            config: 运行配置
            registry: 注册表客户端，默认为 RegistryClient
            cache: 版本缓存，默认为 root 下的 versions.json
        """
        self.config = config
        self.registry = registry if registry is not None else RegistryClient(config)
        self.cache = cache if cache is not None else VersionCache(config.cache_file)
        self._floor = ExpandedVersion(config.first_version)

    def is_blacklisted(self, version: ExpandedVersion) -> bool:
        return version.expanded in self.config.blacklist

    def is_supported(self, version: ExpandedVersion) -> bool:
        """
        检查版本是否可以进入版本池。

        参数:
            version: 待检查版本

        返回:
            版本有效、不低于最早支持版本且不在黑名单中时返回 True
        """
        if not version.is_valid or self.is_blacklisted(version):
            return False
        if self._floor.is_valid and version < self._floor:
            return False
        return True

    def build_pool(self, names: Sequence[str]) -> VersionPool:
        """
        由注册表返回的版本号列表构建版本池。

        参数:
            names: 旧到新排列的版本号

        返回:
            过滤后按新到旧排列的版本池
        """
        versions = [ExpandedVersion(name) for name in names]
        supported = [version for version in versions if self.is_supported(version)]
        if len(supported) != len(versions):
            logger.debug(f"过滤掉 {len(versions) - len(supported)} 个不受支持的版本")
        return tuple(reversed(supported))

    def query_versions(self) -> VersionPool:
        """
        查询注册表获取版本池，并尽力回写缓存。

        返回:
            按新到旧排列的版本池

        抛出:
            ForestError: 注册表通信失败或没有版本时抛出
        """
        pool = self.build_pool(self.registry.fetch_version_names())
        try:
            self.cache.write(pool)
        except ForestError as e:
            logger.warning(f"写入版本缓存失败: {e.message}")
        return pool

    def cached_versions(self) -> VersionPool:
        """
        读取缓存的版本池。

        返回:
            缓存中的版本池

        抛出:
            ForestError: 缓存不可用时抛出 VERSION_CACHE_READ_FAIL
        """
        return self.cache.read()

    def cached_or_empty(self) -> VersionPool:
        """读取缓存的版本池，缓存不可用时返回空池。"""
        try:
            return self.cached_versions()
        except ForestError as e:
            if e.kind is not ErrorKind.VERSION_CACHE_READ_FAIL:
                raise
            logger.debug(f"版本缓存不可用: {e.message}")
            return ()

    def expand_cached(self, requested: str) -> ExpandedVersion:
        """
        在缓存的版本池中查找与输入完全相同的版本。

        参数:
            requested: 用户输入的版本

        返回:
            缓存中的版本

        抛出:
            ForestError: 缓存不可用时抛出 VERSION_CACHE_READ_FAIL，
                没有完全相同的版本时抛出 VERSION_NO_EXACT_MATCH
        """
        for version in self.cached_versions():
            if version.expanded == requested:
                return version
        raise ForestError(ErrorKind.VERSION_NO_EXACT_MATCH, f"版本缓存中没有 {requested}")

    def expand_version(self, requested: str) -> ExpandedVersion:
        """
        将用户输入的版本展开为完整版本，例如 "0.18" 展开为 "0.18.0"。

        缓存中存在完全相同的版本时直接返回，否则查询注册表。

        参数:
            requested: 用户输入的版本

        返回:
            完整版本

        抛出:
            ForestError: 没有匹配版本时抛出 NO_MATCHING_VERSION
        """
        try:
            return self.expand_cached(requested)
        except ForestError as e:
            if e.kind not in (ErrorKind.VERSION_CACHE_READ_FAIL, ErrorKind.VERSION_NO_EXACT_MATCH):
                raise
            logger.debug(e.message)

        logger.info(f"正在解析版本 {requested}...")
        result = find_suitable(requested, self.query_versions())
        if result is None:
            raise ForestError(
                ErrorKind.NO_MATCHING_VERSION,
                f"在 npm 上找不到与 {requested} 匹配的 Elm 版本"
            )
        return result

    def current(self, start: str) -> CurrentProject:
        """
        获取 start 所在项目应使用的版本。

        先在缓存的版本池中匹配约束，缓存不可用或没有匹配时再查询注册表。

        参数:
            start: 起始目录

        返回:
            CurrentProject

        抛出:
            ForestError: 找不到项目、约束无效或没有满足约束的版本时抛出
        """
        project = find_project(start, self.config)
        constraint = project.query_constraint()

        version = first_match(self.cached_or_empty(), constraint)
        if version is not None:
            return CurrentProject(project, version)

        logger.info("正在查询 npm...")
        return CurrentProject(project, select_best(self.query_versions(), constraint))
