"""
核心模块抽象接口定义。

定义注册表客户端、版本缓存、进程执行器和安装状态检查等协作者的抽象接口。
"""

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Sequence, Tuple

from elmforest.core.version_utils import ExpandedVersion


class IRegistryClient(ABC):
    """注册表客户端抽象接口。"""

    @abstractmethod
    def fetch_version_names(self) -> List[str]:
        """获取注册表中的全部版本号，按发布顺序（旧到新）排列。"""
        pass


class IVersionCache(ABC):
    """版本缓存抽象接口。"""

    @abstractmethod
    def read(self) -> Tuple[ExpandedVersion, ...]:
        """读取缓存的版本池。"""
        pass

    @abstractmethod
    def write(self, pool: Sequence[ExpandedVersion]) -> None:
        """写入版本池到缓存。"""
        pass


class IProcessRunner(ABC):
    """进程执行器抽象接口。"""

    @abstractmethod
    def capture(self, cmd: str, args: Sequence[str], cwd: str) -> str:
        """执行命令并返回标准输出。"""
        pass

    @abstractmethod
    def run(self, cmd: str, args: Sequence[str], cwd: str, env: Optional[Mapping[str, str]] = None) -> int:
        """执行命令并继承标准流，返回退出码。"""
        pass


class IInstallState(ABC):
    """安装状态检查抽象接口。"""

    @abstractmethod
    def is_installed(self, version_root: str) -> bool:
        """检查版本目录是否代表一个已安装版本。"""
        pass
