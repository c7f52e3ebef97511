"""版本缓存测试。"""

import json

import pytest

from conftest import versions
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.version_cache import VersionCache


class TestVersionCache:
    """版本缓存读写。"""

    def test_write_then_read(self, tmp_path):
        cache = VersionCache(tmp_path / "root" / "versions.json")
        cache.write(versions("0.18.0", "0.17.1"))

        assert json.loads((tmp_path / "root" / "versions.json").read_text()) == ["0.18.0", "0.17.1"]
        assert [v.expanded for v in cache.read()] == ["0.18.0", "0.17.1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ForestError) as exc_info:
            VersionCache(tmp_path / "versions.json").read()
        assert exc_info.value.kind is ErrorKind.VERSION_CACHE_READ_FAIL

    def test_corrupt_json(self, tmp_path):
        cache_file = tmp_path / "versions.json"
        cache_file.write_text("[\"0.18.0\"", encoding="utf-8")
        with pytest.raises(ForestError) as exc_info:
            VersionCache(cache_file).read()
        assert exc_info.value.kind is ErrorKind.VERSION_CACHE_READ_FAIL

    def test_not_a_list(self, tmp_path):
        cache_file = tmp_path / "versions.json"
        cache_file.write_text(json.dumps({"versions": ["0.18.0"]}), encoding="utf-8")
        with pytest.raises(ForestError) as exc_info:
            VersionCache(cache_file).read()
        assert exc_info.value.kind is ErrorKind.VERSION_CACHE_READ_FAIL

    def test_bad_entries_dropped(self, tmp_path):
        cache_file = tmp_path / "versions.json"
        cache_file.write_text(json.dumps(["0.18.0", 5, None, "garbage", "0.17.1"]), encoding="utf-8")
        assert [v.expanded for v in VersionCache(cache_file).read()] == ["0.18.0", "0.17.1"]

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(ForestError) as exc_info:
            VersionCache(blocker / "versions.json").write(versions("0.18.0"))
        assert exc_info.value.kind is ErrorKind.VERSION_CACHE_WRITE_FAIL

    def test_overwrite_leaves_no_temp_file(self, tmp_path):
        cache = VersionCache(tmp_path / "versions.json")
        cache.write(versions("0.17.1"))
        cache.write(versions("0.18.0", "0.17.1"))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["versions.json"]
        assert len(cache.read()) == 2

    def test_invalid_utf8(self, tmp_path):
        cache_file = tmp_path / "versions.json"
        cache_file.write_bytes(b'["0.18.0", "\xff\xfe"]')
        with pytest.raises(ForestError) as exc_info:
            VersionCache(cache_file).read()
        assert exc_info.value.kind is ErrorKind.VERSION_CACHE_READ_FAIL
