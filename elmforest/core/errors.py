"""
错误定义模块。

定义 Elm Forest 对外暴露的错误类型、错误种类以及错误种类到进程退出码的映射。
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """错误种类。"""

    NO_ELM_VERSIONS = "NoElmVersions"
    NPM_COMMUNICATION_ERROR = "NpmCommunicationError"
    BIN_PATH_WRITE_FAILED = "BinPathWriteFailed"
    BIN_PATH_READ_FAILED = "BinPathReadFailed"
    BAD_ELM_PACKAGE = "BadElmPackage"
    NO_VERSION_CONSTRAINT = "NoVersionConstraint"
    PARSE_CONSTRAINT_FAILED = "ParseConstraintFailed"
    NO_MATCHING_VERSION = "NoMatchingVersion"
    VERSION_CACHE_READ_FAIL = "VersionCacheReadFail"
    VERSION_CACHE_WRITE_FAIL = "VersionCacheWriteFail"
    NO_ELM_PROJECT = "NoElmProject"
    NPM_INIT_FAILED = "NpmInitFailed"
    NPM_ELM_INSTALL_FAILED = "NpmElmInstallFailed"
    NPM_BIN_FAILED = "NpmBinFailed"
    NPM_RUN_FAILED = "NpmRunFailed"
    NPM_COMMAND_FAILED = "NpmCommandFailed"
    ELM_COMMAND_FAILED = "ElmCommandFailed"
    COMMAND_FAILED = "CommandFailed"
    VERSION_NO_EXACT_MATCH = "VersionNoExactMatch"
    REMOVAL_FAILED = "RemovalFailed"
    IO_ERROR = "IOError"


# 退出码 1 保留给未预料的异常
GENERIC_EXIT_CODE = 1

EXIT_CODES = {kind: code for code, kind in enumerate(ErrorKind, start=2)}

# 以下种类的退出码沿用子进程自身的退出码
CHILD_EXIT_KINDS = frozenset({
    ErrorKind.NPM_COMMAND_FAILED,
    ErrorKind.ELM_COMMAND_FAILED,
    ErrorKind.COMMAND_FAILED,
})


class ForestError(Exception):
    """
    Elm Forest 错误异常。

    属性:
        kind: 错误种类
        message: 面向用户的错误信息
        returncode: 子进程退出码，仅对命令执行失败类错误有意义
    """

    def __init__(self, kind: ErrorKind, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.returncode = returncode

    @property
    def exit_code(self) -> int:
        """
        获取该错误对应的进程退出码。

        返回:
            子进程失败时为子进程的非零退出码，否则为映射表中的退出码
        """
        if self.kind in CHILD_EXIT_KINDS and self.returncode:
            if self.returncode < 0:
                # 被信号终止的子进程按 shell 惯例报告为 128 + 信号编号
                return 128 - self.returncode
            return self.returncode
        return EXIT_CODES.get(self.kind, GENERIC_EXIT_CODE)

    def __repr__(self) -> str:
        return f"ForestError({self.kind.value}, {self.message!r})"
