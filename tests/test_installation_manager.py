"""安装管理测试。"""

import os

import pytest

from conftest import FakeRunner
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.installation_manager import InstallationManager
from elmforest.core.version_utils import ExpandedVersion

VERSION = ExpandedVersion("0.18.0")


def expected_bin(manager):
    return os.path.join(manager.version_root(VERSION), "node_modules", ".bin")


class BrokenRunner(FakeRunner):
    def run(self, cmd, args, cwd, env=None):
        raise ForestError(ErrorKind.IO_ERROR, "npm not found")


class TestInstall:
    """版本安装与回滚。"""

    def test_install_steps(self, config):
        runner = FakeRunner()
        manager = InstallationManager(config, runner=runner)

        assert manager.install(VERSION) == (VERSION, True)

        root = manager.version_root(VERSION)
        assert root == str(config.root / "0.18.0")
        assert [call[1] for call in runner.captured] == [
            ["init", "-y"],
            ["install", "--save", "elm@0.18.0"],
            ["prefix"],
        ]
        assert all(call[0] == "npm" and call[2] == root for call in runner.captured)
        assert manager.get_bin_path(VERSION) == expected_bin(manager)

    def test_already_installed(self, config):
        runner = FakeRunner()
        manager = InstallationManager(config, runner=runner)
        manager.install(VERSION)

        assert manager.install(VERSION) == (VERSION, False)
        assert len(runner.captured) == 3

    def test_ensure_installed_runs_once(self, config):
        runner = FakeRunner()
        manager = InstallationManager(config, runner=runner)
        manager.ensure_installed(VERSION)
        manager.ensure_installed(VERSION)
        assert len(runner.captured) == 3

    @pytest.mark.parametrize(
        "step, kind",
        [
            ("init", ErrorKind.NPM_INIT_FAILED),
            ("install", ErrorKind.NPM_ELM_INSTALL_FAILED),
            ("prefix", ErrorKind.NPM_BIN_FAILED),
        ],
    )
    def test_failed_step_rolls_back(self, config, step, kind):
        manager = InstallationManager(config, runner=FakeRunner(fail_on=step))

        with pytest.raises(ForestError) as exc_info:
            manager.install(VERSION)

        assert exc_info.value.kind is kind
        assert not os.path.exists(manager.version_root(VERSION))
        assert not manager.is_installed(VERSION)

    def test_path_escaping_version_rejected(self, config):
        manager = InstallationManager(config, runner=FakeRunner())
        with pytest.raises(ForestError) as exc_info:
            manager.version_root(ExpandedVersion(".."))
        assert exc_info.value.kind is ErrorKind.IO_ERROR


class TestRemove:
    """版本删除。"""

    def test_remove_installed(self, config):
        manager = InstallationManager(config, runner=FakeRunner())
        manager.install(VERSION)

        assert manager.remove(VERSION) is True
        assert not os.path.exists(manager.version_root(VERSION))

    def test_remove_missing(self, config):
        manager = InstallationManager(config, runner=FakeRunner())
        assert manager.remove(VERSION) is False

    def test_file_is_not_an_installation(self, config):
        config.root.mkdir(parents=True)
        (config.root / "0.18.0").write_text("", encoding="utf-8")
        manager = InstallationManager(config, runner=FakeRunner())
        assert not manager.is_installed(VERSION)


class TestRunCommands:
    """在版本环境下执行命令。"""

    def test_missing_bin_path(self, config):
        (config.root / "0.18.0").mkdir(parents=True)
        manager = InstallationManager(config, runner=FakeRunner())
        with pytest.raises(ForestError) as exc_info:
            manager.get_bin_path(VERSION)
        assert exc_info.value.kind is ErrorKind.BIN_PATH_READ_FAILED

    def test_command_env_prepends_bin_path(self, config):
        manager = InstallationManager(config, runner=FakeRunner())
        manager.install(VERSION)

        env = manager.command_env(VERSION, {"PATH": "/usr/bin", "HOME": "/home/elm"})
        assert env["PATH"] == expected_bin(manager) + os.pathsep + "/usr/bin"
        assert env["HOME"] == "/home/elm"
        assert manager.command_env(VERSION, {})["PATH"] == expected_bin(manager)

    def test_run_elm_installs_on_demand(self, config, tmp_path):
        runner = FakeRunner()
        manager = InstallationManager(config, runner=runner)

        assert manager.run_elm(VERSION, ["make", "Main.elm"], str(tmp_path)) == 0
        assert len(runner.captured) == 3
        cmd, args, cwd, env = runner.runs[0]
        assert (cmd, args, cwd) == ("elm", ["make", "Main.elm"], str(tmp_path))
        assert env["PATH"].startswith(expected_bin(manager))

    def test_run_elm_failure_keeps_child_exit_code(self, config):
        manager = InstallationManager(config, runner=FakeRunner(run_code=3))
        with pytest.raises(ForestError) as exc_info:
            manager.run_elm(VERSION, ["make"])
        assert exc_info.value.kind is ErrorKind.ELM_COMMAND_FAILED
        assert exc_info.value.exit_code == 3

    def test_run_npm_in_version_root(self, config):
        runner = FakeRunner()
        manager = InstallationManager(config, runner=runner)
        assert manager.run_npm(VERSION, ["ls"]) == 0
        cmd, args, cwd, env = runner.runs[0]
        assert (cmd, args, cwd) == ("npm", ["ls"], manager.version_root(VERSION))

    def test_run_npm_nonzero(self, config):
        manager = InstallationManager(config, runner=FakeRunner(run_code=2))
        with pytest.raises(ForestError) as exc_info:
            manager.run_npm(VERSION, ["ls"])
        assert exc_info.value.kind is ErrorKind.NPM_COMMAND_FAILED
        assert exc_info.value.exit_code == 2

    def test_run_elm_cannot_start(self, config):
        manager = InstallationManager(config, runner=BrokenRunner())
        with pytest.raises(ForestError) as exc_info:
            manager.run_elm(VERSION, ["make"])
        assert exc_info.value.kind is ErrorKind.COMMAND_FAILED

    def test_run_npm_cannot_start(self, config):
        manager = InstallationManager(config, runner=BrokenRunner())
        with pytest.raises(ForestError) as exc_info:
            manager.run_npm(VERSION, ["ls"])
        assert exc_info.value.kind is ErrorKind.NPM_RUN_FAILED
