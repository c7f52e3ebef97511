"""
远程版本获取模块。

提供从 npm 注册表获取 Elm 版本列表的功能。
"""

from typing import Any, List

import requests

from elmforest.core.config_manager import ForestConfig
from elmforest.core.errors import ErrorKind, ForestError
from elmforest.core.interfaces import IRegistryClient
from elmforest.utils.logger import get_logger
from elmforest.utils.retry import RetryHandler

logger = get_logger()

# 精简元数据格式，仍包含 versions 字段
NPM_ABBREVIATED_METADATA = "application/vnd.npm.install-v1+json"


class RegistryClient(IRegistryClient):
    """
    npm 注册表客户端类。

    负责向注册表查询包的全部版本号。
    实现 IRegistryClient 抽象接口。
    """

    def __init__(self, config: ForestConfig, session: Any = None):
        """
        初始化注册表客户端。

        参数:
            config: 运行配置
            session: 可选的 requests.Session，为 None 时直接使用 requests 模块
        """
        self.config = config
        self.session = session if session is not None else requests
        self.retry_handler = RetryHandler(max_retries=config.registry_retry_count)

    def _get(self) -> requests.Response:
        response = self.session.get(
            self.config.registry_url,
            headers={"Accept": NPM_ABBREVIATED_METADATA},
            timeout=self.config.registry_timeout,
        )
        response.raise_for_status()
        return response

    def fetch_version_names(self) -> List[str]:
        """
        获取注册表中的全部版本号。

        返回:
            版本号列表，保持注册表返回的顺序

        抛出:
            ForestError: 网络失败时抛出 NPM_COMMUNICATION_ERROR，
                响应中没有版本列表时抛出 NO_ELM_VERSIONS
        """
        url = self.config.registry_url
        logger.debug(f"正在从注册表获取版本列表: {url}")
        try:
            response = self.retry_handler.execute(self._get)
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.debug(f"请求注册表失败: {e}")
            raise ForestError(
                ErrorKind.NPM_COMMUNICATION_ERROR,
                f"与 npm 注册表通信失败: {e}"
            ) from e
        except ValueError as e:
            raise ForestError(
                ErrorKind.NPM_COMMUNICATION_ERROR,
                f"npm 注册表返回了无法解析的响应: {e}"
            ) from e

        versions = data.get("versions") if isinstance(data, dict) else None
        if not isinstance(versions, dict):
            raise ForestError(ErrorKind.NO_ELM_VERSIONS, "注册表中没有找到任何版本")

        names = [name for name in versions if isinstance(name, str)]
        logger.debug(f"注册表返回 {len(names)} 个版本")
        return names
