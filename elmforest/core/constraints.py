"""
版本约束模块。

解析 elm-package.json 中 elm-version 字段形如 ``0.18.0 <= v < 0.19.0`` 的区间表达式。
"""

import operator
import re
from typing import Callable, Dict, Optional, Tuple

from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.version_utils import ExpandedVersion, ParsedVersion, parse_version

Predicate = Callable[[ParsedVersion], bool]

LEFT_PATTERN = re.compile(r'(\d+(?:\.\d+){0,2})\s+(<=|>=|<|>)\s+v')
RIGHT_PATTERN = re.compile(r'v\s+(<=|>=|<|>)\s+(\d+(?:\.\d+){0,2})')

OPERATORS: Dict[str, Callable[[ParsedVersion, ParsedVersion], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _always_fail(version: ParsedVersion) -> bool:
    return False


def _left_predicate(literal: str, op: str) -> Predicate:
    """左侧形如 ``literal op v``，比较方向为字面量对 v。"""
    bound = parse_version(literal)
    if bound is None:
        return _always_fail
    compare = OPERATORS[op]
    return lambda version: compare(bound, version)


def _right_predicate(op: str, literal: str) -> Predicate:
    """右侧形如 ``v op literal``，比较方向为 v 对字面量。"""
    bound = parse_version(literal)
    if bound is None:
        return _always_fail
    compare = OPERATORS[op]
    return lambda version: compare(version, bound)


class VersionConstraint:
    """
    版本约束类。

    由左右两个谓词组成，版本必须同时满足两者才算匹配。
    """

    def __init__(self, lower: Predicate, upper: Predicate, raw: str = ""):
        """
        初始化版本约束。

        参数:
            lower: 左侧谓词
            upper: 右侧谓词
            raw: 原始约束字符串
        """
        self.predicates: Tuple[Predicate, Predicate] = (lower, upper)
        self.raw = raw

    def match(self, version: ExpandedVersion) -> bool:
        """
        检查版本是否满足约束。

        参数:
            version: 待检查版本

        返回:
            满足返回 True，版本无效或不满足返回 False
        """
        if version.parsed is None:
            return False
        return all(check(version.parsed) for check in self.predicates)

    def __repr__(self) -> str:
        return f"VersionConstraint({self.raw!r})"


def try_parse_constraint(constraint: str) -> Optional[VersionConstraint]:
    """
    解析约束字符串。

    左右两侧必须同时存在，缺少任意一侧即视为解析失败。
    某一侧的版本字面量本身无法解析时，该侧谓词恒为 False。

    参数:
        constraint: 约束字符串

    返回:
        VersionConstraint 实例，格式无法识别时返回 None
    """
    left = LEFT_PATTERN.search(constraint)
    right = RIGHT_PATTERN.search(constraint)
    if left is None or right is None:
        return None
    return VersionConstraint(
        _left_predicate(left.group(1), left.group(2)),
        _right_predicate(right.group(1), right.group(2)),
        raw=constraint,
    )


def parse_constraint(constraint: str) -> VersionConstraint:
    """
    解析约束字符串，失败时抛出异常。

    参数:
        constraint: 约束字符串

    返回:
        VersionConstraint 实例

    抛出:
        ForestError: 格式无法识别时抛出 PARSE_CONSTRAINT_FAILED
    """
    result = try_parse_constraint(constraint)
    if result is None:
        raise ForestError(
            ErrorKind.PARSE_CONSTRAINT_FAILED,
            f"无法识别的版本约束格式: {constraint}"
        )
    return result
