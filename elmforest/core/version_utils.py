"""
版本工具模块。

提供版本号解析、比较以及版本对象的定义。

支持的版本格式::

    <major>[.minor[.patch]][-stage[increment]]

例如 "0"、"0.17"、"0.17.1"、"0.18.0-beta"、"0.17.0-alpha2"。
"""

import operator
import re
import sys
from typing import Callable, Optional, Tuple

VERSION_PATTERN = re.compile(
    r'^(\d+)(?:\.(\d+)(?:\.(\d+))?)?(?:-([^\d]+)(\d+)?)?$'
)

# 阶段排名：稳定版最高，其次 beta、alpha，未知阶段（如 rc）最低
STAGE_STABLE = sys.maxsize
STAGE_BETA = 2
STAGE_ALPHA = 1
STAGE_UNKNOWN = 0

ParsedVersion = Tuple[int, int, int, int, int]


def stage_rank(stage: Optional[str]) -> int:
    """
    将发布阶段名称转换为排名数值。

    参数:
        stage: 阶段名称，None 表示稳定版

    返回:
        阶段排名，数值越大版本越新
    """
    if stage is None or stage == "stable":
        return STAGE_STABLE
    if stage == "beta":
        return STAGE_BETA
    if stage == "alpha":
        return STAGE_ALPHA
    return STAGE_UNKNOWN


def parse_version(version_str: str) -> Optional[ParsedVersion]:
    """
    解析版本字符串为可比较的元组。

    参数:
        version_str: 版本字符串

    返回:
        版本元组 (major, minor, patch, stage_rank, increment)，
        不符合版本格式时返回 None
    """
    match = VERSION_PATTERN.match(version_str)
    if match is None:
        return None
    major, minor, patch, stage, increment = match.groups()
    return (
        int(major),
        int(minor or 0),
        int(patch or 0),
        stage_rank(stage),
        int(increment or 0),
    )


class ExpandedVersion:
    """
    版本对象。

    expanded 是用作安装目录名的完整版本字符串，raw 是最初遇到的写法。
    parsed 在构造时计算一次，不符合版本格式的版本 parsed 为 None，
    此类版本与任何版本都不相等，也不参与排序和约束匹配。
    """

    __slots__ = ("expanded", "raw", "parsed")

    def __init__(self, expanded: str, raw: Optional[str] = None):
        self.expanded = expanded
        self.raw = raw if raw is not None else expanded
        self.parsed = parse_version(expanded)

    @property
    def is_valid(self) -> bool:
        return self.parsed is not None

    def with_raw(self, raw: str) -> "ExpandedVersion":
        """返回同一版本、但 raw 为用户原始写法的新对象。"""
        return ExpandedVersion(self.expanded, raw)

    def for_npm(self, package_name: str = "elm") -> str:
        """
        获取 npm install 使用的包标识。

        参数:
            package_name: npm 包名

        返回:
            形如 "elm@0.18.0" 的字符串
        """
        return f"{package_name}@{self.expanded}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExpandedVersion):
            return NotImplemented
        if self.parsed is None or other.parsed is None:
            return False
        return self.parsed == other.parsed

    def _compare(self, other: object, op: Callable[[ParsedVersion, ParsedVersion], bool]) -> bool:
        if not isinstance(other, ExpandedVersion):
            return NotImplemented
        if self.parsed is None or other.parsed is None:
            return False
        return op(self.parsed, other.parsed)

    def __lt__(self, other: object) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: object) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: object) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: object) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        if self.parsed is None:
            return hash(self.expanded)
        return hash(self.parsed)

    def __str__(self) -> str:
        return self.expanded

    def __repr__(self) -> str:
        return f"ExpandedVersion({self.expanded!r})"
