"""
安装管理模块。

提供 Elm 版本的安装、回滚、删除以及在指定版本环境下执行命令的功能。

每个版本安装在 ``<root>/<expanded>`` 目录中，目录内包含 npm 的 package.json、
node_modules 以及记录可执行文件目录的 binpath.log。
目录存在即视为已安装，不校验目录内容。
"""

import os
import shutil
import stat
from typing import Mapping, Optional, Sequence, Tuple

from elmforest.core.config_manager import ForestConfig
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IInstallState, IProcessRunner
from elmforest.core.process_runner import ProcessRunner
from elmforest.core.version_utils import ExpandedVersion
from elmforest.utils.input_validator import InputValidator, InputValidationError
from elmforest.utils.logger import get_logger

logger = get_logger()

NODE_BIN_DIR = os.path.join("node_modules", ".bin")


class DirectoryInstallState(IInstallState):
    """以版本目录是否存在作为安装状态。"""

    def is_installed(self, version_root: str) -> bool:
        """
        检查版本目录是否存在。

        参数:
            version_root: 版本目录

        返回:
            目录存在返回 True

        抛出:
            ForestError: 无法访问目录时抛出 IO_ERROR
        """
        try:
            st = os.stat(version_root)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ForestError(ErrorKind.IO_ERROR, f"无法访问版本目录 {version_root}: {e}") from e
        return stat.S_ISDIR(st.st_mode)


class InstallationManager:
    """
    安装管理器类。

    负责确保某个版本实际安装在本地，并在该版本的环境下运行 elm 或 npm。
    """

    def __init__(
        self,
        config: ForestConfig,
        runner: Optional[IProcessRunner] = None,
        install_state: Optional[IInstallState] = None,
    ):
        """
        初始化安装管理器。

        参数:
            config: 运行配置
            runner: 进程执行器，默认为 ProcessRunner
            install_state: 安装状态检查，默认为 DirectoryInstallState
        """
        self.config = config
        self.runner = runner if runner is not None else ProcessRunner()
        self.install_state = install_state if install_state is not None else DirectoryInstallState()

    def version_root(self, version: ExpandedVersion) -> str:
        """
        获取版本的安装目录。

        参数:
            version: 版本

        返回:
            安装目录路径

        抛出:
            ForestError: 版本号会导致路径越出存储根目录时抛出 IO_ERROR
        """
        try:
            return InputValidator.safe_join_path(str(self.config.root), version.expanded)
        except InputValidationError as e:
            raise ForestError(ErrorKind.IO_ERROR, f"非法的版本目录: {e}") from e

    def binpath_file(self, version: ExpandedVersion) -> str:
        return os.path.join(self.version_root(version), self.config.binpath_file_name)

    def is_installed(self, version: ExpandedVersion) -> bool:
        return self.install_state.is_installed(self.version_root(version))

    def _npm(self, version: ExpandedVersion, args: Sequence[str], kind: ErrorKind, message: str) -> str:
        try:
            return self.runner.capture(self.config.npm_executable, args, self.version_root(version))
        except ForestError as e:
            logger.debug(f"npm {' '.join(args)} 失败: {e.message}")
            raise ForestError(kind, message, e.returncode) from e

    def _install_steps(self, version: ExpandedVersion) -> None:
        root = self.version_root(version)
        try:
            os.makedirs(root, exist_ok=True)
        except OSError as e:
            raise ForestError(ErrorKind.IO_ERROR, f"无法创建目录 {root}: {e}") from e

        logger.info(f"正在为 {version.expanded} 准备环境")
        self._npm(version, ["init", "-y"], ErrorKind.NPM_INIT_FAILED, "npm init 失败")

        logger.info("正在安装...")
        package = version.for_npm(self.config.package_name)
        self._npm(
            version,
            ["install", "--save", package],
            ErrorKind.NPM_ELM_INSTALL_FAILED,
            f"`npm install {package}` 失败",
        )

        logger.info("正在完成...")
        prefix = self._npm(version, ["prefix"], ErrorKind.NPM_BIN_FAILED, "无法定位 elm 可执行文件目录").strip()
        if not prefix:
            raise ForestError(ErrorKind.NPM_BIN_FAILED, "无法定位 elm 可执行文件目录")
        bin_dir = os.path.join(prefix, NODE_BIN_DIR)

        try:
            with open(self.binpath_file(version), "w", encoding="utf-8") as f:
                f.write(bin_dir)
        except OSError as e:
            raise ForestError(ErrorKind.BIN_PATH_WRITE_FAILED, f"无法写入 binpath: {e}") from e

    def install(self, version: ExpandedVersion) -> Tuple[ExpandedVersion, bool]:
        """
        安装指定版本，已安装时不做任何操作。

        任一步骤失败时删除已创建的版本目录，再抛出原始错误。

        参数:
            version: 版本

        返回:
            (版本, 是否实际执行了安装) 元组

        抛出:
            ForestError: 安装步骤失败时抛出对应种类的错误
        """
        if self.is_installed(version):
            logger.debug(f"{version.expanded} 已安装")
            return version, False

        try:
            self._install_steps(version)
        except ForestError:
            if self.is_installed(version):
                logger.info("安装失败，正在清理...")
                try:
                    self.remove(version)
                except ForestError as cleanup_error:
                    logger.error(f"清理失败: {cleanup_error.message}")
                else:
                    logger.info("清理完成")
            raise

        return version, True

    def ensure_installed(self, version: ExpandedVersion) -> ExpandedVersion:
        """
        确保指定版本已安装。

        参数:
            version: 版本

        返回:
            同一个版本
        """
        if self.is_installed(version):
            return version

        logger.info(f"需要安装 Elm {version.expanded}")
        self.install(version)
        logger.info(f"Elm {version.expanded} 安装完成")
        return version

    def remove(self, version: ExpandedVersion) -> bool:
        """
        删除指定版本。

        参数:
            version: 版本

        返回:
            实际删除返回 True，未安装返回 False

        抛出:
            ForestError: 删除失败时抛出 REMOVAL_FAILED
        """
        if not self.is_installed(version):
            return False

        root = self.version_root(version)
        try:
            shutil.rmtree(root)
        except OSError as e:
            raise ForestError(ErrorKind.REMOVAL_FAILED, f"删除 {root} 失败: {e}") from e
        logger.debug(f"已删除 {root}")
        return True

    def get_bin_path(self, version: ExpandedVersion) -> str:
        """
        读取版本的可执行文件目录。

        参数:
            version: 版本

        返回:
            可执行文件目录

        抛出:
            ForestError: 读取失败时抛出 BIN_PATH_READ_FAILED
        """
        try:
            with open(self.binpath_file(version), "r", encoding="utf-8") as f:
                return f.read().strip()
        except OSError as e:
            raise ForestError(ErrorKind.BIN_PATH_READ_FAILED, f"无法读取 binpath: {e}") from e

    def command_env(self, version: ExpandedVersion, environ: Optional[Mapping[str, str]] = None) -> dict:
        """
        构造子进程环境变量，将版本的可执行文件目录置于 PATH 最前。

        参数:
            version: 版本
            environ: 父进程环境变量，默认为 os.environ

        返回:
            环境变量字典
        """
        env = dict(os.environ if environ is None else environ)
        parent_path = env.get("PATH", "")
        bin_path = self.get_bin_path(version)
        env["PATH"] = bin_path + os.pathsep + parent_path if parent_path else bin_path
        return env

    def run_command(self, version: ExpandedVersion, cmd: str, args: Sequence[str], cwd: Optional[str] = None) -> int:
        """
        在指定版本的环境下运行命令。

        参数:
            version: 版本
            cmd: 可执行文件
            args: 命令参数
            cwd: 工作目录，默认为当前目录

        返回:
            子进程退出码（总是 0）

        抛出:
            ForestError: 命令无法启动或退出码非零时抛出 COMMAND_FAILED
        """
        self.ensure_installed(version)
        env = self.command_env(version)
        try:
            code = self.runner.run(cmd, args, cwd or os.getcwd(), env)
        except ForestError as e:
            raise ForestError(ErrorKind.COMMAND_FAILED, e.message) from e
        if code != 0:
            raise ForestError(ErrorKind.COMMAND_FAILED, f"{cmd} 命令执行失败，退出码 {code}", code)
        return code

    def run_elm(self, version: ExpandedVersion, args: Sequence[str], cwd: Optional[str] = None) -> int:
        """
        使用指定版本运行 elm。

        参数:
            version: 版本
            args: elm 参数
            cwd: 工作目录

        返回:
            子进程退出码

        抛出:
            ForestError: elm 退出码非零时抛出 ELM_COMMAND_FAILED
        """
        try:
            return self.run_command(version, self.config.elm_executable, args, cwd)
        except ForestError as e:
            if e.kind is ErrorKind.COMMAND_FAILED and e.returncode is not None:
                raise ForestError(ErrorKind.ELM_COMMAND_FAILED, e.message, e.returncode) from e
            raise

    def run_npm(self, version: ExpandedVersion, args: Sequence[str]) -> int:
        """
        在指定版本的安装目录中运行 npm，标准流继承自父进程。

        参数:
            version: 版本
            args: npm 参数

        返回:
            子进程退出码

        抛出:
            ForestError: npm 无法启动时抛出 NPM_RUN_FAILED，
                退出码非零时抛出 NPM_COMMAND_FAILED
        """
        self.ensure_installed(version)
        try:
            code = self.runner.run(self.config.npm_executable, args, self.version_root(version))
        except ForestError as e:
            raise ForestError(ErrorKind.NPM_RUN_FAILED, e.message) from e
        if code != 0:
            raise ForestError(ErrorKind.NPM_COMMAND_FAILED, f"npm 命令执行失败，退出码 {code}", code)
        return code
