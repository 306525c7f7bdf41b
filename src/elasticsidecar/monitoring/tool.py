"""进程监控任务实现模块.

- ElasticsearchProcessMonitor: 周期性探测本地节点，维护进程启动状态标志
- ProcessStatsMonitor: 周期性采样本地节点的进程统计信息
"""

import logging

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError

from ..config import SidecarConfig
from ..index_manager.gate import ProcessHealth
from ..scheduler.models import FailureKind, TaskResult
from ..scheduler.task import Task
from ..scheduler.timers import FixedIntervalTimer, TaskTimer
from .models import ProcessStats

logger = logging.getLogger(__name__)


class ElasticsearchProcessMonitor(Task):
    """本地节点存活探测任务.

    通过 ping 本地节点判断被管理的 Elasticsearch 进程是否已启动，
    并将结果写入 ProcessHealth，供索引维护和统计采样任务读取。

    Args:
        config: 边车配置
        es_client: 指向本地节点的 Elasticsearch 客户端
        health: 进程启动状态标志
    """

    JOB_NAME = "elasticsearch_process_monitor"

    def __init__(
        self, config: SidecarConfig, es_client: Elasticsearch, health: ProcessHealth
    ) -> None:
        self.config = config
        self.es_client = es_client
        self.health = health

    @property
    def name(self) -> str:
        return self.JOB_NAME

    def create_timer(self) -> TaskTimer:
        return FixedIntervalTimer(self.config.process_monitor_interval)

    def execute(self) -> TaskResult:
        was_started = self.health.is_started()
        # ping 在连接失败时返回 False 而不是抛出异常
        started = bool(
            self.es_client.options(request_timeout=self.config.request_timeout).ping()
        )

        if started:
            self.health.mark_started()
        else:
            self.health.mark_stopped()

        if started != was_started:
            state = "已启动" if started else "已停止"
            logger.info(f"Elasticsearch 进程状态变化: {state}")
        return TaskResult.succeeded()


class ProcessStatsMonitor(Task):
    """进程统计采样任务.

    进程启动后，周期性读取本地节点的进程统计并原子替换快照。
    采样失败时保留上一次的快照。

    Args:
        config: 边车配置
        es_client: 指向本地节点的 Elasticsearch 客户端
        health: 进程启动状态标志

    Examples:
        >>> monitor = ProcessStatsMonitor(config, es_client, health)
        >>> monitor.execute()
        >>> print(monitor.snapshot.open_file_descriptors)
    """

    JOB_NAME = "process_stats_monitor"

    def __init__(
        self, config: SidecarConfig, es_client: Elasticsearch, health: ProcessHealth
    ) -> None:
        self.config = config
        self.es_client = es_client
        self.health = health
        self._snapshot = ProcessStats()

    @property
    def name(self) -> str:
        return self.JOB_NAME

    @property
    def snapshot(self) -> ProcessStats:
        """最近一次成功采样的统计快照."""
        return self._snapshot

    def create_timer(self) -> TaskTimer:
        return FixedIntervalTimer(self.config.process_stats_interval)

    def execute(self) -> TaskResult:
        if not self.health.is_started():
            return TaskResult.skipped("Elasticsearch 进程尚未启动，稍后再采样")

        client = self.es_client.options(request_timeout=self.config.request_timeout)
        try:
            response = client.nodes.stats(node_id="_local", metric="process")
        except (TransportError, ApiError) as e:
            logger.warning(f"获取进程统计信息失败: {e}")
            return TaskResult.failed(FailureKind.TRANSPORT, str(e))

        nodes = response.get("nodes", {})
        if not nodes:
            return TaskResult.skipped("节点统计信息为空")

        process = next(iter(nodes.values())).get("process")
        if not process:
            return TaskResult.skipped("进程统计信息为空")

        # 整体替换不可变快照，读取方总能拿到一致的数据
        self._snapshot = ProcessStats.from_response(process)
        return TaskResult.succeeded()
