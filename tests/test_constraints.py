"""版本约束解析与匹配测试。"""

import pytest

from elmforest.core.constraints import (
    VersionConstraint,
    _always_fail,
    parse_constraint,
    try_parse_constraint,
)
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.version_utils import ExpandedVersion


def matches(constraint, name):
    return constraint.match(ExpandedVersion(name))


class TestConstraintParsing:
    """约束字符串解析。"""

    def test_standard_interval(self):
        constraint = parse_constraint("0.18.0 <= v < 0.19.0")
        assert matches(constraint, "0.18.0")
        assert matches(constraint, "0.18.5")
        assert not matches(constraint, "0.19.0")
        assert not matches(constraint, "0.17.1")

    def test_exclusive_lower_inclusive_upper(self):
        constraint = parse_constraint("0.17.0 < v <= 0.18.0")
        assert not matches(constraint, "0.17.0")
        assert matches(constraint, "0.17.1")
        assert matches(constraint, "0.18.0")

    def test_short_literals(self):
        constraint = parse_constraint("0.18 <= v < 1")
        assert matches(constraint, "0.18.0")
        assert matches(constraint, "0.99.9")
        assert not matches(constraint, "1.0.0")

    def test_extra_whitespace(self):
        constraint = parse_constraint("0.16.0   <=   v   <   0.17.0")
        assert matches(constraint, "0.16.0")

    @pytest.mark.parametrize(
        "text",
        ["", "0.18.0", "0.18.0 <= v", "v < 0.19.0", "0.18.0<=v<0.19.0", "latest", ">= 0.18.0"],
    )
    def test_unrecognized(self, text):
        assert try_parse_constraint(text) is None
        with pytest.raises(ForestError) as exc_info:
            parse_constraint(text)
        assert exc_info.value.kind is ErrorKind.PARSE_CONSTRAINT_FAILED

    def test_raw_kept(self):
        assert parse_constraint("0.18.0 <= v < 0.19.0").raw == "0.18.0 <= v < 0.19.0"


class TestConstraintMatching:
    """约束匹配。"""

    def test_invalid_version_never_matches(self):
        constraint = parse_constraint("0.0.0 <= v < 100.0.0")
        assert not matches(constraint, "garbage")

    def test_failed_side_rejects_everything(self):
        constraint = VersionConstraint(_always_fail, lambda parsed: True)
        assert not matches(constraint, "0.18.0")
