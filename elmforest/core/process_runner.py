"""
进程执行模块。

提供在指定目录和环境下执行外部命令的功能。
"""

import subprocess
from typing import Mapping, Optional, Sequence

from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IProcessRunner
from elmforest.utils.logger import get_logger

logger = get_logger()


class ProcessRunner(IProcessRunner):
    """
    进程执行器类。

    实现 IProcessRunner 抽象接口。
    """

    def capture(self, cmd: str, args: Sequence[str], cwd: str) -> str:
        """
        执行命令并返回标准输出，标准错误直接输出到父进程。

        参数:
            cmd: 可执行文件
            args: 命令参数
            cwd: 工作目录

        返回:
            标准输出文本

        抛出:
            ForestError: 命令无法启动时抛出 IO_ERROR，
                退出码非零时抛出 COMMAND_FAILED
        """
        command = [cmd, *args]
        logger.debug(f"执行命令: {' '.join(command)} (cwd={cwd})")
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ForestError(ErrorKind.IO_ERROR, f"无法执行 {cmd}: {e}") from e

        if result.returncode != 0:
            raise ForestError(
                ErrorKind.COMMAND_FAILED,
                f"{cmd} 命令执行失败，退出码 {result.returncode}",
                result.returncode,
            )
        return result.stdout

    def run(self, cmd: str, args: Sequence[str], cwd: str, env: Optional[Mapping[str, str]] = None) -> int:
        """
        执行命令，标准输入、输出和错误均继承自父进程。

        参数:
            cmd: 可执行文件
            args: 命令参数
            cwd: 工作目录
            env: 子进程环境变量，为 None 时继承父进程

        返回:
            子进程退出码

        抛出:
            ForestError: 命令无法启动时抛出 IO_ERROR
        """
        command = [cmd, *args]
        logger.debug(f"执行命令: {' '.join(command)} (cwd={cwd})")
        try:
            completed = subprocess.run(command, cwd=cwd, env=dict(env) if env is not None else None)
        except OSError as e:
            raise ForestError(ErrorKind.IO_ERROR, f"无法执行 {cmd}: {e}") from e
        return completed.returncode
