"""测试公共夹具与替身对象。"""

import json
from typing import List, Optional, Sequence

import pytest

from elmforest.core.config_manager import ForestConfig
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IProcessRunner, IRegistryClient, IVersionCache
from elmforest.core.version_utils import ExpandedVersion

REGISTRY_NAMES = [
    "0.0.0",
    "0.1.0",
    "0.15.0",
    "0.15.1-alpha",
    "0.15.1",
    "0.16.0",
    "0.17.0",
    "0.17.1",
    "0.18.0",
    "bogus",
]


class FakeRegistry(IRegistryClient):
    def __init__(self, names: Optional[List[str]] = None, error: Optional[ForestError] = None):
        self.names = list(REGISTRY_NAMES if names is None else names)
        self.error = error
        self.calls = 0

    def fetch_version_names(self) -> List[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.names)


class FakeCache(IVersionCache):
    def __init__(self, versions: Optional[Sequence[str]] = None, write_error: bool = False):
        self.pool = None if versions is None else tuple(ExpandedVersion(v) for v in versions)
        self.write_error = write_error
        self.writes = []

    def read(self):
        if self.pool is None:
            raise ForestError(ErrorKind.VERSION_CACHE_READ_FAIL, "no cache")
        return self.pool

    def write(self, pool):
        if self.write_error:
            raise ForestError(ErrorKind.VERSION_CACHE_WRITE_FAIL, "read-only")
        self.writes.append([v.expanded for v in pool])
        self.pool = tuple(pool)


class FakeRunner(IProcessRunner):
    """记录调用的进程执行器，npm prefix 返回工作目录。"""

    def __init__(self, fail_on: Optional[str] = None, run_code: int = 0):
        self.fail_on = fail_on
        self.run_code = run_code
        self.captured = []
        self.runs = []

    def capture(self, cmd, args, cwd):
        self.captured.append((cmd, list(args), cwd))
        if self.fail_on is not None and args and args[0] == self.fail_on:
            raise ForestError(ErrorKind.COMMAND_FAILED, f"{cmd} failed", 1)
        if args and args[0] == "prefix":
            return cwd + "\n"
        return ""

    def run(self, cmd, args, cwd, env=None):
        self.runs.append((cmd, list(args), cwd, env))
        return self.run_code


@pytest.fixture
def config(tmp_path):
    return ForestConfig(root=tmp_path / "forest")


@pytest.fixture
def make_project(tmp_path):
    """在 tmp_path 下创建带 elm-package.json 的项目目录。"""

    def _make(constraint="0.18.0 <= v < 0.19.0", name="app", content=None):
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        manifest = directory / "elm-package.json"
        if content is None:
            content = json.dumps({"version": "1.0.0", "elm-version": constraint})
        manifest.write_text(content, encoding="utf-8")
        return directory

    return _make


def versions(*names):
    return tuple(ExpandedVersion(name) for name in names)
