"""索引生命周期管理模块.

该模块负责按策略维护时间分区索引，包括：
- 删除超过保留期的索引（按天、按月、按年）
- 预创建未来需要的索引
- 通过主节点门控保证只有集群主节点执行维护

示例用法:
    >>> from elasticsidecar.index_manager import (
    ...     ClusterIndexAdmin,
    ...     IndexLifecycleManager,
    ...     LeadershipGate,
    ...     ProcessHealth,
    ... )
    >>> health = ProcessHealth(started=True)
    >>> manager = IndexLifecycleManager(
    ...     config, ClusterIndexAdmin(es_client), LeadershipGate(es_client, health)
    ... )
    >>> result = manager.execute()
"""

from .admin import ClusterIndexAdmin
from .civil_date import CivilDate
from .exceptions import (
    AcknowledgmentError,
    IndexAlreadyExistsError,
    IndexManagerError,
    IndexTransportError,
)
from .gate import LeadershipGate, ProcessHealth
from .models import (
    CycleResult,
    IndexNameFilter,
    IndexPolicy,
    PolicyResult,
    RetentionType,
)
from .tool import IndexLifecycleManager
from .utils import future_dates, parse_policies, retention_cutoff

__all__ = [
    # 核心类
    "IndexLifecycleManager",
    "ClusterIndexAdmin",
    "LeadershipGate",
    "ProcessHealth",
    # 数据模型
    "CivilDate",
    "RetentionType",
    "IndexNameFilter",
    "IndexPolicy",
    "PolicyResult",
    "CycleResult",
    # 异常类
    "IndexManagerError",
    "IndexTransportError",
    "IndexAlreadyExistsError",
    "AcknowledgmentError",
    # 工具函数
    "parse_policies",
    "retention_cutoff",
    "future_dates",
]
