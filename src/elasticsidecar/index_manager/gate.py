"""主节点门控模块.

在执行任何删除或创建操作之前，依次检查：
1. 被管理的 Elasticsearch 进程已启动
2. 本地节点是当前集群选举出的主节点（每次都实时查询，不缓存）
3. 配置中启用了索引自动维护

三个条件都满足时才继续，否则干净地跳过，不视为错误。
"""

import logging
import threading

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError

from ..config import SidecarConfig
from .exceptions import IndexManagerError, IndexTransportError

logger = logging.getLogger(__name__)


class ProcessHealth:
    """被管理进程的启动状态标志.

    由进程探测任务写入，由门控读取，线程安全。
    """

    def __init__(self, started: bool = False) -> None:
        self._started = threading.Event()
        if started:
            self._started.set()

    def mark_started(self) -> None:
        self._started.set()

    def mark_stopped(self) -> None:
        self._started.clear()

    def is_started(self) -> bool:
        return self._started.is_set()


class LeadershipGate:
    """主节点门控.

    Args:
        es_client: 指向本地节点的 Elasticsearch 客户端
        health: 进程启动状态标志

    Examples:
        >>> gate = LeadershipGate(es_client, health)
        >>> reason = gate.check(config)
        >>> if reason is not None:
        ...     print(f"跳过: {reason}")
    """

    def __init__(self, es_client: Elasticsearch, health: ProcessHealth) -> None:
        self.es_client = es_client
        self.health = health

    def is_managed_process_started(self) -> bool:
        return self.health.is_started()

    def is_current_node_leader(self, timeout: float) -> bool:
        """实时查询本地节点是否为集群主节点.

        通过集群状态中的 master_node 与本地节点 ID 比较。

        Args:
            timeout: 超时时间（秒）

        Raises:
            IndexTransportError: 调用超时或连接失败时抛出
            IndexManagerError: 集群返回错误时抛出
        """
        client = self.es_client.options(request_timeout=timeout)
        try:
            state = client.cluster.state(metric="master_node")
            local = client.nodes.info(node_id="_local")
        except TransportError as e:
            raise IndexTransportError(f"查询主节点失败: {e}") from e
        except ApiError as e:
            raise IndexManagerError(f"查询主节点失败: {e}") from e

        master_node = state.get("master_node")
        local_nodes = local.get("nodes", {})
        if not master_node or not local_nodes:
            return False
        return master_node in local_nodes

    def check(self, config: SidecarConfig) -> str | None:
        """按顺序检查三个门控条件.

        Args:
            config: 边车配置

        Returns:
            满足全部条件时返回 None，否则返回跳过原因

        Raises:
            IndexTransportError: 查询主节点超时或连接失败时抛出
            IndexManagerError: 查询主节点时集群返回错误时抛出
        """
        if not self.is_managed_process_started():
            return "Elasticsearch 进程尚未启动"

        if not self.is_current_node_leader(config.request_timeout):
            return "当前节点不是主节点"

        if not config.index_auto_creation_enabled:
            return "索引自动维护未启用"

        return None
