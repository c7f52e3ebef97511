"""
版本缓存模块。

在存储根目录下以 JSON 数组形式保存按新到旧排列的版本列表。
"""

from pathlib import Path
from typing import Sequence, Tuple

from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IVersionCache
from elmforest.core.version_utils import ExpandedVersion
from elmforest.utils.json_file import atomic_save_json, load_json
from elmforest.utils.logger import get_logger

logger = get_logger()


class VersionCache(IVersionCache):
    """
    版本缓存类。

    缓存只用于加速，读取失败由调用方回退到注册表查询。
    """

    def __init__(self, cache_file: Path):
        """
        初始化版本缓存。

        参数:
            cache_file: 缓存文件路径
        """
        self.cache_file = cache_file

    def read(self) -> Tuple[ExpandedVersion, ...]:
        """
        读取缓存的版本池。

        非字符串条目和不符合版本格式的条目会被丢弃。

        返回:
            按新到旧排列的版本元组

        抛出:
            ForestError: 文件缺失、无法读取或内容不是数组时抛出 VERSION_CACHE_READ_FAIL
        """
        try:
            data = load_json(self.cache_file)
        except (OSError, ValueError) as e:
            raise ForestError(
                ErrorKind.VERSION_CACHE_READ_FAIL,
                f"无法读取版本缓存 {self.cache_file}: {e}"
            ) from e

        if not isinstance(data, list):
            raise ForestError(ErrorKind.VERSION_CACHE_READ_FAIL, "版本缓存已损坏")

        versions = (ExpandedVersion(item) for item in data if isinstance(item, str))
        pool = tuple(version for version in versions if version.is_valid)
        if len(pool) != len(data):
            logger.debug(f"版本缓存中有 {len(data) - len(pool)} 个无效项被过滤")
        return pool

    def write(self, pool: Sequence[ExpandedVersion]) -> None:
        """
        写入版本池到缓存。

        参数:
            pool: 按新到旧排列的版本池

        抛出:
            ForestError: 写入失败时抛出 VERSION_CACHE_WRITE_FAIL
        """
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            atomic_save_json(self.cache_file, [version.expanded for version in pool])
        except (OSError, TypeError) as e:
            raise ForestError(
                ErrorKind.VERSION_CACHE_WRITE_FAIL,
                f"无法写入版本缓存 {self.cache_file}: {e}"
            ) from e
        logger.debug(f"已缓存 {len(pool)} 个版本到 {self.cache_file}")
