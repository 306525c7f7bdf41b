"""集群索引管理客户端模块.

对 Elasticsearch 索引 API 的薄封装：列出、检查、创建、删除索引。
每个调用都带有调用方指定的超时时间，客户端异常统一转换为本模块的异常。
"""

import logging

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, NotFoundError, TransportError

from .exceptions import (
    IndexAlreadyExistsError,
    IndexManagerError,
    IndexTransportError,
)

logger = logging.getLogger(__name__)


def _validate_index_name(index_name: str) -> bool:
    """验证索引名称是否符合 Elasticsearch 规范.

    Note:
        Elasticsearch 索引名称限制：
        - 不能以 . 、_ 、- 或 + 开头
        - 不能包含 , # / \\ * ? " < > | 空格
        - 不能是 . 或 ..
        - 长度不能超过 255 字节
        - 不能包含大写字母
    """
    if not index_name or not isinstance(index_name, str):
        return False

    if len(index_name.encode("utf-8")) > 255:
        return False

    if index_name[0] in "._-+":
        return False

    if index_name in (".", ".."):
        return False

    if index_name != index_name.lower():
        return False

    invalid_chars = {",", "#", "/", "\\", '"', "<", ">", "|", " ", "*", "?", ":"}
    if any(char in invalid_chars for char in index_name):
        return False

    return True


class ClusterIndexAdmin:
    """集群索引管理客户端.

    本身不持有状态，可在多个执行周期之间复用。

    Args:
        es_client: Elasticsearch 客户端实例

    Examples:
        >>> admin = ClusterIndexAdmin(es_client)
        >>> if not admin.index_exists("logs20240108", timeout=30):
        ...     admin.create_index("logs20240108", timeout=30)
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    def _client(self, timeout: float) -> Elasticsearch:
        return self.es_client.options(request_timeout=timeout)

    def list_indices(self, timeout: float) -> dict[str, str]:
        """列出集群中的全部索引.

        Args:
            timeout: 超时时间（秒）

        Returns:
            索引名称到索引状态（open / close）的映射

        Raises:
            IndexTransportError: 调用超时或连接失败时抛出
            IndexManagerError: 集群返回错误时抛出
        """
        try:
            rows = self._client(timeout).cat.indices(
                format="json", expand_wildcards="all"
            )
        except TransportError as e:
            raise IndexTransportError(f"获取索引列表失败: {e}") from e
        except ApiError as e:
            raise IndexManagerError(f"获取索引列表失败: {e}") from e

        return {row["index"]: row.get("status", "") for row in rows if row.get("index")}

    def index_exists(self, index_name: str, timeout: float) -> bool:
        """检查索引是否存在.

        Raises:
            IndexTransportError: 调用超时或连接失败时抛出
            IndexManagerError: 集群返回错误时抛出
        """
        try:
            return bool(self._client(timeout).indices.exists(index=index_name))
        except TransportError as e:
            raise IndexTransportError(
                f"检查索引 '{index_name}' 是否存在失败: {e}"
            ) from e
        except ApiError as e:
            raise IndexManagerError(f"检查索引 '{index_name}' 是否存在失败: {e}") from e

    def create_index(self, index_name: str, timeout: float) -> bool:
        """创建索引.

        Returns:
            集群是否确认了创建操作

        Raises:
            ValueError: 索引名称不符合 Elasticsearch 规范时抛出
            IndexAlreadyExistsError: 索引已存在时抛出
            IndexTransportError: 调用超时或连接失败时抛出
            IndexManagerError: 集群返回其他错误时抛出
        """
        if not _validate_index_name(index_name):
            raise ValueError(f"索引名称 '{index_name}' 不符合 Elasticsearch 规范")

        try:
            response = self._client(timeout).indices.create(index=index_name)
        except TransportError as e:
            raise IndexTransportError(f"创建索引 '{index_name}' 失败: {e}") from e
        except ApiError as e:
            if "resource_already_exists_exception" in str(e):
                raise IndexAlreadyExistsError(f"索引 '{index_name}' 已存在") from e
            raise IndexManagerError(f"创建索引 '{index_name}' 失败: {e}") from e

        acknowledged = bool(response.get("acknowledged", False))
        if acknowledged:
            logger.info(f"索引 '{index_name}' 创建成功")
        else:
            logger.warning(f"索引 '{index_name}' 创建请求未被确认")
        return acknowledged

    def delete_index(self, index_name: str, timeout: float) -> bool:
        """删除索引.

        索引已不存在时视为删除成功。

        Returns:
            集群是否确认了删除操作

        Raises:
            IndexTransportError: 调用超时或连接失败时抛出
            IndexManagerError: 集群返回其他错误时抛出
        """
        logger.info(f"正在删除索引 '{index_name}'")
        try:
            response = self._client(timeout).indices.delete(index=index_name)
        except NotFoundError:
            logger.warning(f"索引 '{index_name}' 不存在，视为已删除")
            return True
        except TransportError as e:
            raise IndexTransportError(f"删除索引 '{index_name}' 失败: {e}") from e
        except ApiError as e:
            raise IndexManagerError(f"删除索引 '{index_name}' 失败: {e}") from e

        acknowledged = bool(response.get("acknowledged", False))
        if acknowledged:
            logger.info(f"索引 '{index_name}' 删除成功")
        return acknowledged
