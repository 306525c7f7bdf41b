"""周期任务调度模块.

主要组件:
    - Task: 周期任务抽象基类
    - TaskTimer: 定时器抽象基类
    - FixedIntervalTimer: 固定间隔定时器
    - CronTimer: 每日定点定时器
    - TaskScheduler: 任务调度器
    - TaskResult / TaskStatus / FailureKind: 带标签的执行结果

使用示例:
    from elasticsidecar.scheduler import TaskScheduler, FixedIntervalTimer

    scheduler = TaskScheduler()
    scheduler.register(task, FixedIntervalTimer(60))
    scheduler.start()
"""

from .exceptions import JobAlreadyRegisteredError, JobNotFoundError, SchedulerError
from .models import FailureKind, JobInfo, TaskResult, TaskStatus
from .task import Task
from .timers import CronTimer, FixedIntervalTimer, TaskTimer
from .tool import TaskScheduler

__all__ = [
    # 调度器
    "TaskScheduler",
    # 任务与定时器
    "Task",
    "TaskTimer",
    "FixedIntervalTimer",
    "CronTimer",
    # 数据模型
    "TaskResult",
    "TaskStatus",
    "FailureKind",
    "JobInfo",
    # 异常
    "SchedulerError",
    "JobAlreadyRegisteredError",
    "JobNotFoundError",
]
