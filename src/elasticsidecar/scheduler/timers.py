"""任务定时器定义模块.

定时器根据当前时间和上一次执行结果计算距离下一次执行的等待秒数：
- FixedIntervalTimer: 上一次执行完成后间隔固定周期再执行
- CronTimer: 每天在固定的时:分:秒执行
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TaskResult


class TaskTimer(ABC):
    """定时器抽象基类."""

    @abstractmethod
    def next_delay(self, now: datetime, last_result: TaskResult | None) -> float:
        """计算距离下一次执行的等待秒数.

        Args:
            now: 当前时间
            last_result: 上一次执行结果，尚未执行过时为 None

        Returns:
            等待秒数，0 表示立即执行
        """


class FixedIntervalTimer(TaskTimer):
    """固定间隔定时器.

    下一次执行时间 = 上一次执行完成时间 + period，允许挂钟漂移。
    适用于轻量级的采样任务。

    Args:
        period: 执行间隔（秒），必须 > 0
        run_immediately: 首次是否立即执行，默认 True

    Raises:
        ValueError: 当 period 不大于 0 时抛出
    """

    def __init__(self, period: float, run_immediately: bool = True) -> None:
        if period <= 0:
            raise ValueError(f"period 必须 > 0，当前值: {period}")
        self.period = period
        self.run_immediately = run_immediately

    def next_delay(self, now: datetime, last_result: TaskResult | None) -> float:
        if last_result is None and self.run_immediately:
            return 0.0
        return float(self.period)

    def __repr__(self) -> str:
        return f"FixedIntervalTimer(period={self.period})"


class CronTimer(TaskTimer):
    """每日定点定时器.

    计算严格晚于当前时间、且时分秒与配置一致的下一个时间点；
    若今天的该时间已过（或恰好为当前时间），则顺延到明天同一时间。

    Args:
        hour: 小时（0-23）
        minute: 分钟（0-59）
        second: 秒（0-59）

    Raises:
        ValueError: 当时间参数越界时抛出

    Examples:
        >>> timer = CronTimer(hour=2, minute=1)
        >>> timer.next_fire_time(datetime(2024, 1, 8, 3, 0))
        datetime.datetime(2024, 1, 9, 2, 1)
    """

    def __init__(self, hour: int, minute: int = 0, second: int = 0) -> None:
        if not 0 <= hour <= 23:
            raise ValueError(f"hour 必须在 0-23 之间，当前值: {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"minute 必须在 0-59 之间，当前值: {minute}")
        if not 0 <= second <= 59:
            raise ValueError(f"second 必须在 0-59 之间，当前值: {second}")
        self.hour = hour
        self.minute = minute
        self.second = second

    def next_fire_time(self, now: datetime) -> datetime:
        """计算下一次触发时间."""
        candidate = now.replace(
            hour=self.hour, minute=self.minute, second=self.second, microsecond=0
        )
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    def next_delay(self, now: datetime, last_result: TaskResult | None) -> float:
        return (self.next_fire_time(now) - now).total_seconds()

    def __repr__(self) -> str:
        return f"CronTimer({self.hour:02d}:{self.minute:02d}:{self.second:02d})"
