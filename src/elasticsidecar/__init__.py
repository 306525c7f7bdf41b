"""Elastic Sidecar - Elasticsearch 时间分区索引维护边车.

与每个 Elasticsearch 节点一起部署，仅在集群主节点上执行索引维护。

主要功能:
    - IndexLifecycleManager: 按保留策略删除过期索引、预创建未来索引
    - TaskScheduler: 带名称的周期任务调度（固定间隔与每日定点）
    - ProcessStatsMonitor: 本地节点进程统计采样

使用示例:
    from elasticsidecar import ESClientFactory, SidecarConfig, create_scheduler

    config = SidecarConfig(
        index_auto_creation_enabled=True,
        index_metadata='[{"indexName": "logs", "retentionType": "DAILY", '
        '"retentionPeriod": 7, "preCreate": true}]',
    )
    factory = ESClientFactory()
    scheduler = create_scheduler(config, factory.get_client())
    scheduler.start()
"""

__version__ = "0.1.0"

from elasticsidecar.config import SidecarConfig
from elasticsidecar.connection import ClusterConfig, ConnectionConfig, ESClientFactory

# 导出异常
from elasticsidecar.exceptions import ConfigurationError, ElasticSidecarError
from elasticsidecar.index_manager import (
    AcknowledgmentError,
    CivilDate,
    ClusterIndexAdmin,
    CycleResult,
    IndexLifecycleManager,
    IndexManagerError,
    IndexNameFilter,
    IndexPolicy,
    IndexTransportError,
    LeadershipGate,
    ProcessHealth,
    RetentionType,
)
from elasticsidecar.monitoring import (
    ElasticsearchProcessMonitor,
    ProcessStats,
    ProcessStatsMonitor,
)
from elasticsidecar.scheduler import (
    CronTimer,
    FailureKind,
    FixedIntervalTimer,
    Task,
    TaskResult,
    TaskScheduler,
    TaskStatus,
    TaskTimer,
)
from elasticsidecar.sidecar import create_scheduler

__all__ = [
    # 版本
    "__version__",
    # 配置与连接
    "SidecarConfig",
    "ESClientFactory",
    "ClusterConfig",
    "ConnectionConfig",
    # 调度
    "TaskScheduler",
    "Task",
    "TaskTimer",
    "FixedIntervalTimer",
    "CronTimer",
    "TaskResult",
    "TaskStatus",
    "FailureKind",
    "create_scheduler",
    # 索引维护
    "IndexLifecycleManager",
    "ClusterIndexAdmin",
    "LeadershipGate",
    "ProcessHealth",
    "CivilDate",
    "RetentionType",
    "IndexNameFilter",
    "IndexPolicy",
    "CycleResult",
    # 监控
    "ElasticsearchProcessMonitor",
    "ProcessStatsMonitor",
    "ProcessStats",
    # 异常
    "ElasticSidecarError",
    "ConfigurationError",
    "IndexManagerError",
    "IndexTransportError",
    "AcknowledgmentError",
]
