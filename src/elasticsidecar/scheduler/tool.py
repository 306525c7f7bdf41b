"""任务调度器核心实现模块.

提供 TaskScheduler 类：显式持有 “任务名 -> (任务, 定时器)” 注册表，
为每个任务启动独立的工作线程，按定时器计算的间隔循环执行任务。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from .exceptions import JobAlreadyRegisteredError, JobNotFoundError
from .models import FailureKind, JobInfo, TaskResult, TaskStatus
from .task import Task
from .timers import TaskTimer

logger = logging.getLogger(__name__)


@dataclass
class _Registration:
    """单个任务的注册信息."""

    task: Task
    timer: TaskTimer
    info: JobInfo
    # 同名任务共享同一把锁，移除后重新注册也不会与旧实例并发执行
    run_lock: threading.Lock = field(default_factory=threading.Lock)
    stop_event: threading.Event = field(default_factory=threading.Event)
    thread: threading.Thread | None = None


class TaskScheduler:
    """周期任务调度器.

    每个注册的任务拥有一个工作线程：计算等待时间 -> 等待 -> 执行 -> 重复，
    直到调用 stop()。同一任务不会被并发执行，执行超时只会推迟下一次触发，
    不会跳过或重复排队。任务抛出的异常在调度器边界被记录并转换为
    FAILED 结果，不影响该任务的后续调度，也不影响其他任务。

    Args:
        clock: 获取当前时间的函数，主要用于测试，默认为 datetime.now

    Examples:
        >>> scheduler = TaskScheduler()
        >>> scheduler.register(lifecycle_manager).register(stats_monitor)
        >>> scheduler.start()
        >>> ...
        >>> scheduler.stop()
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or datetime.now
        self._jobs: dict[str, _Registration] = {}
        self._lock = threading.Lock()
        self._run_locks: dict[str, threading.Lock] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def register(self, task: Task, timer: TaskTimer | None = None) -> TaskScheduler:
        """注册任务.

        Args:
            task: 任务实例
            timer: 定时器，默认使用 task.create_timer()

        Returns:
            自身实例，支持链式调用

        Raises:
            JobAlreadyRegisteredError: 当同名任务已注册时抛出
        """
        name = task.name
        with self._lock:
            if name in self._jobs:
                raise JobAlreadyRegisteredError(f"任务 '{name}' 已注册")
            registration = _Registration(
                task=task,
                timer=timer if timer is not None else task.create_timer(),
                info=JobInfo(name=name),
                run_lock=self._run_locks.setdefault(name, threading.Lock()),
            )
            self._jobs[name] = registration
            if self._running:
                self._start_worker(registration)

        logger.info(f"注册任务: {name} (定时器: {registration.timer!r})")
        return self

    def unregister(self, name: str) -> TaskScheduler:
        """移除任务，正在运行的工作线程会在当前周期结束后退出.

        之后以同名重新注册的任务会等待旧实例的本次执行完成后才会执行。

        Raises:
            JobNotFoundError: 当任务不存在时抛出
        """
        with self._lock:
            registration = self._jobs.pop(name, None)
        if registration is None:
            raise JobNotFoundError(f"任务 '{name}' 不存在")
        registration.stop_event.set()
        logger.info(f"移除任务: {name}")
        return self

    def list_jobs(self) -> list[str]:
        """列出所有已注册任务的名称."""
        with self._lock:
            return list(self._jobs.keys())

    def get_job(self, name: str) -> JobInfo:
        """获取任务运行状态快照.

        Raises:
            JobNotFoundError: 当任务不存在时抛出
        """
        return replace(self._get_registration(name).info)

    def start(self) -> None:
        """为所有已注册任务启动工作线程."""
        with self._lock:
            if self._running:
                logger.warning("调度器已在运行")
                return
            self._running = True
            for registration in self._jobs.values():
                self._start_worker(registration)
        logger.info(f"调度器已启动，共 {len(self._jobs)} 个任务")

    def stop(self, timeout: float | None = None) -> None:
        """停止调度器.

        在两次执行之间打断等待；正在进行的远程调用依赖其自身的超时结束。

        Args:
            timeout: 等待每个工作线程退出的最长秒数，None 表示一直等待
        """
        with self._lock:
            self._running = False
            registrations = list(self._jobs.values())
            for registration in registrations:
                registration.stop_event.set()

        for registration in registrations:
            thread = registration.thread
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout)
            registration.thread = None
            registration.stop_event = threading.Event()
        logger.info("调度器已停止")

    def run_now(self, name: str) -> TaskResult:
        """立即同步执行一次任务.

        若该任务正在执行，会等待其完成后再执行，保证不会并发。

        Raises:
            JobNotFoundError: 当任务不存在时抛出
        """
        return self._invoke(self._get_registration(name))

    # ========== 内部方法 ==========

    def _get_registration(self, name: str) -> _Registration:
        with self._lock:
            registration = self._jobs.get(name)
        if registration is None:
            raise JobNotFoundError(f"任务 '{name}' 不存在")
        return registration

    def _start_worker(self, registration: _Registration) -> None:
        thread = threading.Thread(
            target=self._run_loop,
            args=(registration,),
            name=f"task-{registration.info.name}",
            daemon=True,
        )
        registration.thread = thread
        thread.start()

    def _run_loop(self, registration: _Registration) -> None:
        name = registration.info.name
        stop_event = registration.stop_event
        scheduled: datetime | None = None
        while not stop_event.is_set():
            now = self._clock()
            # 等待可能早于墙上时钟结束，计算下一次触发时不早于本次计划时间
            if scheduled is not None and now < scheduled:
                now = scheduled
            delay = max(
                0.0, registration.timer.next_delay(now, registration.info.last_result)
            )
            scheduled = now + timedelta(seconds=delay)
            registration.info.next_run = scheduled
            logger.debug(f"任务 '{name}' 将在 {delay:.1f} 秒后执行")

            if stop_event.wait(delay):
                break
            self._invoke(registration)
        logger.debug(f"任务 '{name}' 的工作线程退出")

    def _invoke(self, registration: _Registration) -> TaskResult:
        info = registration.info
        with registration.run_lock:
            info.running = True
            info.last_started = self._clock()
            try:
                result = registration.task.execute()
                if result is None:
                    result = TaskResult.succeeded()
            except Exception as e:
                logger.exception(f"任务 '{info.name}' 执行异常")
                result = TaskResult.failed(FailureKind.UNEXPECTED, str(e))
            finally:
                info.running = False

            info.last_finished = self._clock()
            info.last_result = result
            info.run_count += 1

        self._log_result(info.name, result)
        return result

    @staticmethod
    def _log_result(name: str, result: TaskResult) -> None:
        if result.status == TaskStatus.FAILED:
            kind = result.failure_kind.value if result.failure_kind else "unknown"
            logger.error(f"任务 '{name}' 执行失败 ({kind}): {result.reason}")
        elif result.status == TaskStatus.SKIPPED:
            logger.info(f"任务 '{name}' 已跳过: {result.reason}")
        else:
            logger.info(f"任务 '{name}' 执行完成")
