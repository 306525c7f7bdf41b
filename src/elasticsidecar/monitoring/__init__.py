"""进程监控模块.

主要组件:
    - ElasticsearchProcessMonitor: 本地节点存活探测任务
    - ProcessStatsMonitor: 进程统计采样任务
    - ProcessStats: 进程统计快照
"""

from .models import ProcessStats
from .tool import ElasticsearchProcessMonitor, ProcessStatsMonitor

__all__ = [
    "ElasticsearchProcessMonitor",
    "ProcessStatsMonitor",
    "ProcessStats",
]
