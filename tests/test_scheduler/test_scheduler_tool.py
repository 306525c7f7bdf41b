"""TaskScheduler 单元测试."""

import threading
import time
from datetime import datetime

import pytest

from elasticsidecar.scheduler.exceptions import (
    JobAlreadyRegisteredError,
    JobNotFoundError,
)
from elasticsidecar.scheduler.models import FailureKind, TaskResult, TaskStatus
from elasticsidecar.scheduler.task import Task
from elasticsidecar.scheduler.timers import CronTimer, FixedIntervalTimer, TaskTimer
from elasticsidecar.scheduler.tool import TaskScheduler

# 等待后台线程的最长时间
WAIT_TIMEOUT = 5.0


class CountingTask(Task):
    """记录执行次数的任务."""

    def __init__(self, name: str = "counting", period: float = 0.01, target: int = 3):
        self._name = name
        self.period = period
        self.target = target
        self.calls = 0
        self.reached = threading.Event()

    @property
    def name(self) -> str:
        return self._name

    def create_timer(self) -> TaskTimer:
        return FixedIntervalTimer(self.period)

    def execute(self) -> TaskResult:
        self.calls += 1
        if self.calls >= self.target:
            self.reached.set()
        return TaskResult.succeeded()


class FlakyTask(CountingTask):
    """第一次执行抛出异常的任务."""

    def execute(self) -> TaskResult:
        result = super().execute()
        if self.calls == 1:
            raise RuntimeError("first run fails")
        return result


class SlowTask(CountingTask):
    """记录最大并发数的慢任务."""

    def __init__(self, duration: float = 0.05, **kwargs):
        super().__init__(**kwargs)
        self.duration = duration
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def execute(self) -> TaskResult:
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(self.duration)
        with self._guard:
            self.active -= 1
        return super().execute()


@pytest.fixture
def scheduler():
    """创建调度器，测试结束后停止."""
    scheduler = TaskScheduler()
    yield scheduler
    scheduler.stop(timeout=WAIT_TIMEOUT)


class TestRegistration:
    """任务注册测试."""

    def test_register_uses_task_timer(self, scheduler: TaskScheduler) -> None:
        """测试默认使用任务自身的定时器."""
        result = scheduler.register(CountingTask())
        assert result is scheduler  # 链式调用
        assert scheduler.list_jobs() == ["counting"]

    def test_register_duplicate_raises_error(self, scheduler: TaskScheduler) -> None:
        """测试同名任务只能注册一次."""
        scheduler.register(CountingTask())
        with pytest.raises(JobAlreadyRegisteredError, match="counting"):
            scheduler.register(CountingTask())

    def test_unregister(self, scheduler: TaskScheduler) -> None:
        """测试移除任务."""
        scheduler.register(CountingTask()).unregister("counting")
        assert scheduler.list_jobs() == []

    def test_unregister_missing_raises_error(self, scheduler: TaskScheduler) -> None:
        """测试移除不存在的任务."""
        with pytest.raises(JobNotFoundError):
            scheduler.unregister("missing")

    def test_get_job_missing_raises_error(self, scheduler: TaskScheduler) -> None:
        """测试获取不存在的任务."""
        with pytest.raises(JobNotFoundError):
            scheduler.get_job("missing")


class TestRunNow:
    """手动触发测试."""

    def test_run_now_records_result(self) -> None:
        """测试执行结果与运行状态."""
        fixed = datetime(2024, 1, 8, 2, 1)
        scheduler = TaskScheduler(clock=lambda: fixed)
        scheduler.register(CountingTask())

        result = scheduler.run_now("counting")

        assert result.status == TaskStatus.SUCCEEDED
        info = scheduler.get_job("counting")
        assert info.run_count == 1
        assert info.running is False
        assert info.last_started == fixed
        assert info.last_finished == fixed
        assert info.last_result is result

    def test_exception_is_isolated(self, scheduler: TaskScheduler) -> None:
        """测试任务异常被转换为 FAILED 结果."""
        scheduler.register(FlakyTask())

        result = scheduler.run_now("counting")

        assert result.status == TaskStatus.FAILED
        assert result.failure_kind == FailureKind.UNEXPECTED
        assert "first run fails" in result.reason
        assert scheduler.run_now("counting").status == TaskStatus.SUCCEEDED

    def test_none_result_treated_as_success(self, scheduler: TaskScheduler) -> None:
        """测试任务返回 None 视为成功."""

        class NoneTask(CountingTask):
            def execute(self):
                return None

        scheduler.register(NoneTask())
        assert scheduler.run_now("counting").status == TaskStatus.SUCCEEDED

    def test_get_job_returns_snapshot(self, scheduler: TaskScheduler) -> None:
        """测试运行状态是快照，不随后续执行变化."""
        scheduler.register(CountingTask())
        scheduler.run_now("counting")
        info = scheduler.get_job("counting")
        scheduler.run_now("counting")
        assert info.run_count == 1
        assert scheduler.get_job("counting").run_count == 2


class TestSchedulingLoop:
    """调度循环测试."""

    def test_runs_repeatedly(self, scheduler: TaskScheduler) -> None:
        """测试按固定间隔重复执行."""
        task = CountingTask(target=3)
        scheduler.register(task)
        scheduler.start()

        assert task.reached.wait(WAIT_TIMEOUT)
        assert scheduler.is_running
        assert scheduler.get_job("counting").next_run is not None

    def test_failure_does_not_stop_schedule(self, scheduler: TaskScheduler) -> None:
        """测试执行失败后仍继续调度下一个周期."""
        task = FlakyTask(target=3)
        scheduler.register(task)
        scheduler.start()

        assert task.reached.wait(WAIT_TIMEOUT)

    def test_register_after_start(self, scheduler: TaskScheduler) -> None:
        """测试启动后注册的任务立即开始调度."""
        scheduler.start()
        task = CountingTask(target=2)
        scheduler.register(task)

        assert task.reached.wait(WAIT_TIMEOUT)

    def test_jobs_run_independently(self, scheduler: TaskScheduler) -> None:
        """测试不同任务互不阻塞."""
        slow = SlowTask(name="slow", duration=0.2, target=1)
        fast = CountingTask(name="fast", target=3)
        scheduler.register(slow).register(fast)
        scheduler.start()

        assert fast.reached.wait(WAIT_TIMEOUT)
        assert slow.reached.wait(WAIT_TIMEOUT)

    def test_same_job_never_runs_concurrently(self, scheduler: TaskScheduler) -> None:
        """测试同一任务的定时执行与手动触发不会并发."""
        task = SlowTask(duration=0.02, period=0.001, target=10)
        scheduler.register(task)
        scheduler.start()

        threads = [
            threading.Thread(target=scheduler.run_now, args=("counting",))
            for _ in range(3)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(WAIT_TIMEOUT)

        assert task.reached.wait(WAIT_TIMEOUT)
        assert task.max_active == 1

    def test_stop_interrupts_wait(self) -> None:
        """测试停止调度器会打断等待."""
        scheduler = TaskScheduler()
        task = CountingTask(period=3600)
        scheduler.register(task, FixedIntervalTimer(3600, run_immediately=False))
        scheduler.start()

        started = time.monotonic()
        scheduler.stop(timeout=WAIT_TIMEOUT)

        assert time.monotonic() - started < WAIT_TIMEOUT
        assert task.calls == 0
        assert not scheduler.is_running

    def test_unregister_stops_worker(self, scheduler: TaskScheduler) -> None:
        """测试移除任务后不再执行."""
        task = CountingTask(target=1)
        scheduler.register(task)
        scheduler.start()
        assert task.reached.wait(WAIT_TIMEOUT)

        scheduler.unregister("counting")
        time.sleep(0.05)
        calls = task.calls
        time.sleep(0.05)
        assert task.calls == calls

    def test_reregister_waits_for_running_invocation(
        self, scheduler: TaskScheduler
    ) -> None:
        """测试移除后立即以同名重新注册，新旧实例不会并发执行."""
        task = SlowTask(duration=0.3, period=3600, target=2)
        scheduler.register(task)
        scheduler.start()

        deadline = time.monotonic() + WAIT_TIMEOUT
        while task.active == 0 and time.monotonic() < deadline:
            time.sleep(0.005)
        assert task.active == 1

        scheduler.unregister("counting")
        scheduler.register(task)

        assert task.reached.wait(WAIT_TIMEOUT)
        assert task.max_active == 1

    def test_cron_not_fired_twice_when_woken_early(self) -> None:
        """测试等待比墙上时钟提前结束时，每日任务不会在同一天再次触发."""
        early = datetime(2024, 1, 8, 2, 0, 59, 999000)
        scheduler = TaskScheduler(clock=lambda: early)
        task = CountingTask(name="daily", target=1)
        scheduler.register(task, CronTimer(hour=2, minute=1))
        scheduler.start()
        try:
            assert task.reached.wait(WAIT_TIMEOUT)
            next_day = datetime(2024, 1, 9, 2, 1)
            deadline = time.monotonic() + WAIT_TIMEOUT
            while (
                scheduler.get_job("daily").next_run != next_day
                and time.monotonic() < deadline
            ):
                time.sleep(0.005)
            time.sleep(0.05)

            assert task.calls == 1
            assert scheduler.get_job("daily").next_run == next_day
        finally:
            scheduler.stop(timeout=WAIT_TIMEOUT)
