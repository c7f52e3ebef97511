"""
版本选择模块。

从按新到旧排列的版本池中挑选最合适的版本。
"""

from typing import Optional, Sequence

from elmforest.core.constraints import VersionConstraint
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.version_utils import ExpandedVersion

LATEST = "latest"


def find_suitable(requested: str, pool: Sequence[ExpandedVersion]) -> Optional[ExpandedVersion]:
    """
    按用户输入的版本字符串在版本池中查找匹配版本。

    匹配规则依次为：
    - "latest" 返回池中第一个（最新）版本
    - 与某个版本的完整写法完全相同
    - 以 ``requested + "."`` 开头的第一个版本，即该前缀下最新的版本

    参数:
        requested: 用户输入的版本，如 "latest"、"0.18"、"0.18.0"
        pool: 按新到旧排列的版本池

    返回:
        匹配的版本（raw 为 requested），未找到返回 None
    """
    if requested == LATEST:
        return pool[0].with_raw(requested) if pool else None

    dotted = requested + "."
    prefix_match: Optional[ExpandedVersion] = None
    for item in pool:
        if item.expanded == requested:
            return item
        if prefix_match is None and item.expanded.startswith(dotted):
            prefix_match = item
    return prefix_match.with_raw(requested) if prefix_match is not None else None


def first_match(pool: Sequence[ExpandedVersion], constraint: VersionConstraint) -> Optional[ExpandedVersion]:
    """
    返回池中第一个满足约束的版本。

    参数:
        pool: 按新到旧排列的版本池
        constraint: 版本约束

    返回:
        满足约束的最新版本，没有则返回 None
    """
    return next((version for version in pool if constraint.match(version)), None)


def select_best(pool: Sequence[ExpandedVersion], constraint: VersionConstraint) -> ExpandedVersion:
    """
    选择池中满足约束的最新版本。

    参数:
        pool: 按新到旧排列的版本池
        constraint: 版本约束

    返回:
        满足约束的最新版本

    抛出:
        ForestError: 没有版本满足约束时抛出 NO_MATCHING_VERSION
    """
    best = first_match(pool, constraint)
    if best is None:
        raise ForestError(
            ErrorKind.NO_MATCHING_VERSION,
            f"找不到满足约束 {constraint.raw} 的 Elm 版本"
        )
    return best
