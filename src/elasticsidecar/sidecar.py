"""边车任务装配模块.

将索引维护、进程探测和统计采样任务注册到同一个调度器中。
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from elasticsearch import Elasticsearch

from .config import SidecarConfig
from .index_manager import (
    ClusterIndexAdmin,
    IndexLifecycleManager,
    LeadershipGate,
    ProcessHealth,
)
from .monitoring import ElasticsearchProcessMonitor, ProcessStatsMonitor
from .scheduler import TaskScheduler

logger = logging.getLogger(__name__)


def create_scheduler(
    config: SidecarConfig,
    es_client: Elasticsearch,
    health: ProcessHealth | None = None,
    clock: Callable[[], datetime] | None = None,
    today_func: Callable[[], date] | None = None,
) -> TaskScheduler:
    """创建并注册边车的全部周期任务.

    调度器尚未启动，调用方负责 start() 和 stop()。

    Args:
        config: 边车配置
        es_client: 指向本地节点的 Elasticsearch 客户端
        health: 进程启动状态标志，默认新建（初始为未启动）
        clock: 调度器使用的时钟函数，默认 datetime.now
        today_func: 索引维护使用的当天日期函数，默认 date.today

    Returns:
        已注册任务的调度器

    Examples:
        >>> with ESClientFactory() as factory:
        ...     scheduler = create_scheduler(config, factory.get_client())
        ...     scheduler.start()
    """
    health = health or ProcessHealth()
    scheduler = TaskScheduler(clock=clock)
    scheduler.register(ElasticsearchProcessMonitor(config, es_client, health))
    scheduler.register(ProcessStatsMonitor(config, es_client, health))
    scheduler.register(
        IndexLifecycleManager(
            config,
            ClusterIndexAdmin(es_client),
            LeadershipGate(es_client, health),
            today_func=today_func,
        )
    )
    logger.info(f"已注册边车任务: {scheduler.list_jobs()}")
    return scheduler
