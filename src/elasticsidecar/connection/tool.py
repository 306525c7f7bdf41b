"""ES 客户端工厂工具模块.

提供 ESClientFactory 类，用于创建边车访问本地节点的 Elasticsearch 客户端，
并负责客户端的复用与关闭。

使用示例:
    from elasticsidecar.connection import ESClientFactory, ClusterConfig

    with ESClientFactory(ClusterConfig(hosts=["http://localhost:9200"])) as factory:
        client = factory.get_client()
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .models import ClusterConfig, ConnectionConfig

logger = logging.getLogger(__name__)


class ESClientFactory:
    """Elasticsearch 客户端工厂.

    客户端在第一次使用时创建并缓存，之后所有任务共享同一个实例。
    客户端本身无状态且线程安全，可在多个调度任务之间复用。

    Examples:
        >>> factory = ESClientFactory(ClusterConfig())
        >>> client = factory.get_client()
    """

    def __init__(
        self,
        cluster_config: ClusterConfig | None = None,
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        """初始化客户端工厂.

        Args:
            cluster_config: 节点配置，默认连接本机 9200 端口
            connection_config: 连接池配置，默认使用 ConnectionConfig 的默认值
        """
        self._cluster_config = cluster_config or ClusterConfig()
        self._connection_config = connection_config or ConnectionConfig()
        self._client: Elasticsearch | None = None

    def _create_client(self) -> Elasticsearch:
        """根据节点配置创建 Elasticsearch 客户端实例.

        Returns:
            Elasticsearch 客户端实例
        """
        cluster = self._cluster_config
        kwargs: dict = {
            "hosts": cluster.hosts,
            "max_retries": self._connection_config.max_retries,
            "retry_on_timeout": self._connection_config.retry_on_timeout,
            "request_timeout": self._connection_config.request_timeout,
            "http_compress": self._connection_config.http_compress,
        }

        if cluster.username and cluster.password:
            kwargs["basic_auth"] = (cluster.username, cluster.password)

        if cluster.api_key:
            kwargs["api_key"] = cluster.api_key

        if cluster.ca_certs:
            kwargs["ca_certs"] = cluster.ca_certs
        kwargs["verify_certs"] = cluster.verify_certs

        logger.info(f"创建 Elasticsearch 客户端: {cluster.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self) -> Elasticsearch:
        """获取客户端，首次调用时创建.

        Returns:
            Elasticsearch 客户端实例
        """
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def __enter__(self) -> ESClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """关闭已创建的客户端连接.

        关闭后可重新调用 get_client() 创建新的客户端。
        """
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"关闭 Elasticsearch 客户端时出错: {e}")
        self._client = None
