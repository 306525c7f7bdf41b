"""调度器数据模型定义模块.

提供任务执行结果和任务运行状态的数据模型，包括：
- TaskStatus: 执行结果标签
- FailureKind: 失败类别
- TaskResult: 单次执行结果
- JobInfo: 已注册任务的运行状态快照
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TaskStatus(str, Enum):
    """任务执行结果标签."""

    SKIPPED = "skipped"  # 前置条件不满足，未做任何操作
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, Enum):
    """任务失败类别.

    Attributes:
        CONFIGURATION: 配置错误（策略 JSON 格式错误、不支持的保留粒度）
        TRANSPORT: 集群调用超时或连接失败，下一个周期重试
        ACKNOWLEDGMENT: 集群未确认删除操作或创建操作直接失败
        UNEXPECTED: 任务抛出了未预期的异常
    """

    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    ACKNOWLEDGMENT = "acknowledgment"
    UNEXPECTED = "unexpected"


@dataclass
class TaskResult:
    """单次任务执行结果.

    Attributes:
        status: 执行结果标签
        reason: 跳过原因或失败信息
        failure_kind: 失败类别，仅 status 为 FAILED 时有值
    """

    status: TaskStatus
    reason: str = ""
    failure_kind: FailureKind | None = None

    @classmethod
    def skipped(cls, reason: str, **kwargs) -> "TaskResult":
        return cls(status=TaskStatus.SKIPPED, reason=reason, **kwargs)

    @classmethod
    def succeeded(cls, **kwargs) -> "TaskResult":
        return cls(status=TaskStatus.SUCCEEDED, **kwargs)

    @classmethod
    def failed(cls, kind: FailureKind, reason: str, **kwargs) -> "TaskResult":
        return cls(status=TaskStatus.FAILED, reason=reason, failure_kind=kind, **kwargs)

    @property
    def ok(self) -> bool:
        """是否未失败（跳过也视为正常）."""
        return self.status != TaskStatus.FAILED


@dataclass
class JobInfo:
    """已注册任务的运行状态快照.

    Attributes:
        name: 任务名称
        run_count: 已完成的执行次数
        running: 当前是否正在执行
        last_started: 最近一次开始执行的时间
        last_finished: 最近一次执行完成的时间
        last_result: 最近一次执行结果
        next_run: 下一次计划执行的时间
    """

    name: str
    run_count: int = 0
    running: bool = False
    last_started: datetime | None = None
    last_finished: datetime | None = None
    last_result: TaskResult | None = None
    next_run: datetime | None = None
