"""周期任务抽象定义模块."""

from abc import ABC, abstractmethod

from .models import TaskResult
from .timers import TaskTimer


class Task(ABC):
    """周期任务抽象基类.

    具体任务（索引生命周期管理、进程统计采样等）实现 execute()，
    返回带标签的 TaskResult 而不是依赖异常表达跳过或失败。
    同一任务名称在调度器中只会存在一个实例，且不会被并发执行。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """任务名称，在调度器中唯一."""

    @abstractmethod
    def execute(self) -> TaskResult:
        """执行一次任务.

        Returns:
            本次执行结果
        """

    @abstractmethod
    def create_timer(self) -> TaskTimer:
        """创建该任务默认使用的定时器."""
