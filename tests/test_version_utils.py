"""版本解析与比较测试。"""

import pytest

from elmforest.core.version_utils import (
    STAGE_ALPHA,
    STAGE_BETA,
    STAGE_STABLE,
    STAGE_UNKNOWN,
    ExpandedVersion,
    parse_version,
    stage_rank,
)


class TestParseVersion:
    """版本字符串解析。"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0", (0, 0, 0, STAGE_STABLE, 0)),
            ("0.17", (0, 17, 0, STAGE_STABLE, 0)),
            ("0.17.1", (0, 17, 1, STAGE_STABLE, 0)),
            ("0.18.0-beta", (0, 18, 0, STAGE_BETA, 0)),
            ("0.17.0-alpha2", (0, 17, 0, STAGE_ALPHA, 2)),
            ("0.18.0-rc1", (0, 18, 0, STAGE_UNKNOWN, 1)),
            ("0.18.0-stable", (0, 18, 0, STAGE_STABLE, 0)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_version(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "v0.18.0", "1.2.3.4", "0.18.0-", "0.18.", "-beta"])
    def test_invalid(self, text):
        assert parse_version(text) is None

    def test_stage_rank(self):
        assert stage_rank(None) == STAGE_STABLE
        assert stage_rank("stable") > stage_rank("beta") > stage_rank("alpha") > stage_rank("rc")


class TestExpandedVersion:
    """版本对象的相等性和排序。"""

    def test_short_forms_equal(self):
        assert ExpandedVersion("0.18") == ExpandedVersion("0.18.0")
        assert ExpandedVersion("0") == ExpandedVersion("0.0.0")

    def test_invalid_never_equal(self):
        garbage = ExpandedVersion("garbage")
        assert not garbage.is_valid
        assert garbage != ExpandedVersion("garbage")
        assert garbage != ExpandedVersion("0.18.0")

    def test_invalid_not_ordered(self):
        garbage = ExpandedVersion("garbage")
        stable = ExpandedVersion("0.18.0")
        assert not garbage < stable
        assert not garbage > stable
        assert not stable >= garbage

    def test_stage_ordering(self):
        alpha = ExpandedVersion("0.18.0-alpha")
        beta = ExpandedVersion("0.18.0-beta")
        stable = ExpandedVersion("0.18.0")
        rc = ExpandedVersion("0.18.0-rc")
        assert rc < alpha < beta < stable
        assert stable < ExpandedVersion("0.18.1-alpha")

    def test_increment_ordering(self):
        assert ExpandedVersion("0.17.0-alpha1") < ExpandedVersion("0.17.0-alpha2")

    def test_sorting(self):
        names = ["0.17.1", "0.18.0-beta", "0.16", "0.18.0", "0.17.0"]
        ordered = sorted(ExpandedVersion(name) for name in names)
        assert [v.expanded for v in ordered] == ["0.16", "0.17.0", "0.17.1", "0.18.0-beta", "0.18.0"]

    def test_hash_consistent_with_equality(self):
        assert len({ExpandedVersion("0.18"), ExpandedVersion("0.18.0")}) == 1

    def test_raw_defaults_to_expanded(self):
        version = ExpandedVersion("0.18.0")
        assert version.raw == "0.18.0"
        assert ExpandedVersion("0.18.0", raw="0.18").raw == "0.18"

    def test_for_npm(self):
        assert ExpandedVersion("0.18.0").for_npm() == "elm@0.18.0"
        assert ExpandedVersion("0.18.0").for_npm("elm-test") == "elm-test@0.18.0"

    def test_str(self):
        assert str(ExpandedVersion("0.18.0")) == "0.18.0"

    def test_with_raw(self):
        version = ExpandedVersion("0.18.0").with_raw("0.18")
        assert (version.expanded, version.raw) == ("0.18.0", "0.18")
        assert version == ExpandedVersion("0.18.0")
