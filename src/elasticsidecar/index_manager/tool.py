"""索引生命周期管理器核心实现模块."""

import logging
from collections.abc import Callable
from datetime import date

from ..config import SidecarConfig
from ..exceptions import ConfigurationError
from ..scheduler.models import FailureKind, TaskStatus
from ..scheduler.task import Task
from ..scheduler.timers import CronTimer, TaskTimer
from .admin import ClusterIndexAdmin
from .civil_date import CivilDate
from .exceptions import (
    AcknowledgmentError,
    IndexAlreadyExistsError,
    IndexManagerError,
    IndexTransportError,
)
from .gate import LeadershipGate
from .models import CycleResult, IndexPolicy, PolicyResult
from .utils import future_dates, parse_policies, retention_cutoff

logger = logging.getLogger(__name__)


class IndexLifecycleManager(Task):
    """索引生命周期管理器.

    每天在配置的时间执行一次：通过主节点门控后，从配置重新解析索引策略，
    对每条策略依次执行保留清理和（可选的）预创建。

    - 保留清理：删除日期后缀小于或等于保留截止日期的索引，删除必须被集群确认
    - 预创建：确保从今天起 retention_period 个周期的索引存在，已存在的跳过

    默认情况下，一条策略失败会中止本周期内剩余策略的处理；
    配置 isolate_policy_failures=True 时各策略独立处理，失败汇总到结果中。

    Args:
        config: 边车配置，每个周期都会重新读取 index_metadata
        admin: 集群索引管理客户端
        gate: 主节点门控
        today_func: 自定义获取当天日期的函数，主要用于测试，默认 date.today

    Examples:
        >>> manager = IndexLifecycleManager(config, ClusterIndexAdmin(es), gate)
        >>> result = manager.execute()
        >>> print(result.status, result.deleted, result.created)
    """

    JOB_NAME = "index_lifecycle_manager"

    def __init__(
        self,
        config: SidecarConfig,
        admin: ClusterIndexAdmin,
        gate: LeadershipGate,
        today_func: Callable[[], date] | None = None,
    ) -> None:
        self.config = config
        self._admin = admin
        self._gate = gate
        self._today_func = today_func
        logger.info("初始化索引生命周期管理器")

    @property
    def name(self) -> str:
        return self.JOB_NAME

    def create_timer(self) -> TaskTimer:
        return CronTimer(hour=self.config.auto_create_index_scheduled_hour, minute=1)

    def execute(self) -> CycleResult:
        """执行一次索引维护周期.

        Returns:
            周期执行结果：门控不满足时为 SKIPPED，任一策略失败时为 FAILED
        """
        config = self.config

        try:
            skip_reason = self._gate.check(config)
        except IndexManagerError as e:
            logger.error(f"查询主节点状态失败: {e}")
            return CycleResult.failed(FailureKind.TRANSPORT, str(e))

        if skip_reason is not None:
            if config.debug_logging_enabled:
                logger.debug(f"跳过索引维护: {skip_reason}")
            return CycleResult.skipped(skip_reason)

        logger.info("当前节点是主节点，开始索引维护 ...")

        try:
            policies = parse_policies(config.index_metadata)
        except ConfigurationError as e:
            logger.error(f"从配置构建索引策略失败: {e}")
            return CycleResult.failed(FailureKind.CONFIGURATION, str(e))

        today = CivilDate.today(self._today_func)
        results: list[PolicyResult] = []
        for policy in policies:
            policy_result = self.process_policy(policy, today)
            results.append(policy_result)
            if policy_result.failed and not config.isolate_policy_failures:
                remaining = len(policies) - len(results)
                if remaining:
                    logger.error(
                        f"策略 '{policy.base_name}' 处理失败，中止剩余 {remaining} 条策略"
                    )
                break

        failures = [result for result in results if result.failed]
        if failures:
            first = failures[0]
            return CycleResult(
                status=TaskStatus.FAILED,
                reason=f"策略 '{first.index_name}' 处理失败: {first.error}",
                failure_kind=first.failure_kind,
                policies=results,
            )
        return CycleResult.succeeded(policies=results)

    def process_policy(
        self, policy: IndexPolicy, today: CivilDate | None = None
    ) -> PolicyResult:
        """处理单条策略：先保留清理，再按需预创建.

        配置、连接和确认类错误会记录到返回结果中，不会向外抛出。
        """
        today = today or CivilDate.today(self._today_func)
        result = PolicyResult(index_name=policy.base_name)
        try:
            self.check_index_retention(policy, today, result)
            if policy.pre_create:
                self.pre_create_indices(policy, today, result)
        except ConfigurationError as e:
            self._record_failure(result, FailureKind.CONFIGURATION, e)
        except IndexTransportError as e:
            self._record_failure(result, FailureKind.TRANSPORT, e)
        except AcknowledgmentError as e:
            self._record_failure(result, FailureKind.ACKNOWLEDGMENT, e)
        return result

    def check_index_retention(
        self,
        policy: IndexPolicy,
        today: CivilDate,
        result: PolicyResult | None = None,
    ) -> PolicyResult:
        """删除超过保留期的索引.

        只处理名称匹配过滤器且基础名与策略一致（不区分大小写）的索引，
        其他索引（属于其他策略、无关索引或联邦视图中的索引）静默跳过。

        Raises:
            ConfigurationError: 保留粒度不受支持时抛出
            IndexTransportError: 集群调用超时或连接失败时抛出
            AcknowledgmentError: 删除未被集群确认时抛出
        """
        result = result or PolicyResult(index_name=policy.base_name)
        debug = self.config.debug_logging_enabled
        timeout = self.config.request_timeout

        cutoff = retention_cutoff(policy.retention_type, policy.retention_period, today)
        result.cutoff = cutoff
        if debug:
            logger.debug(f"策略 '{policy.base_name}' 的保留截止日期: {cutoff}")

        indices = self._list_indices(timeout)
        if not indices and debug:
            logger.debug("集群中未找到任何索引")

        name_filter = policy.name_filter
        for index_name in sorted(indices):
            if not name_filter.matches(index_name):
                continue
            if name_filter.base_part(index_name).lower() != policy.base_name.lower():
                continue

            index_date = name_filter.date_part(index_name)
            if debug:
                logger.debug(f"索引 '{index_name}' 的日期后缀: {index_date}")

            if index_date <= cutoff:
                if debug:
                    logger.debug(
                        f"索引 '{index_name}' 的日期 {index_date} 已超过保留截止日期 {cutoff}，删除"
                    )
                self._delete_index(index_name, timeout)
                result.deleted.append(index_name)

        return result

    def pre_create_indices(
        self,
        policy: IndexPolicy,
        today: CivilDate,
        result: PolicyResult | None = None,
    ) -> PolicyResult:
        """预创建从今天起 retention_period 个周期的索引.

        按日期升序逐个检查，已存在的索引跳过，因此重复执行是幂等的。

        Raises:
            ConfigurationError: 保留粒度不受支持时抛出
            IndexTransportError: 集群调用超时或连接失败时抛出
            AcknowledgmentError: 创建请求失败时抛出
        """
        result = result or PolicyResult(index_name=policy.base_name)
        debug = self.config.debug_logging_enabled
        timeout = self.config.request_timeout

        for target in future_dates(policy.retention_type, policy.retention_period, today):
            index_name = policy.name_filter.build_name(target)
            if debug:
                logger.debug(f"预创建目标索引: {index_name}")

            if self._index_exists(index_name, timeout):
                logger.debug(f"索引 '{index_name}' 已存在")
                result.existing.append(index_name)
                continue

            if self._create_index(index_name, timeout):
                result.created.append(index_name)
            else:
                result.existing.append(index_name)

        return result

    # ========== 内部方法 ==========

    @staticmethod
    def _record_failure(result: PolicyResult, kind: FailureKind, error: Exception) -> None:
        logger.error(f"策略 '{result.index_name}' 处理失败 ({kind.value}): {error}")
        result.failure_kind = kind
        result.error = str(error)

    def _list_indices(self, timeout: float) -> dict[str, str]:
        try:
            return self._admin.list_indices(timeout)
        except IndexTransportError:
            raise
        except IndexManagerError as e:
            raise IndexTransportError(str(e)) from e

    def _index_exists(self, index_name: str, timeout: float) -> bool:
        try:
            return self._admin.index_exists(index_name, timeout)
        except IndexTransportError:
            raise
        except IndexManagerError as e:
            raise IndexTransportError(str(e)) from e

    def _delete_index(self, index_name: str, timeout: float) -> None:
        try:
            acknowledged = self._admin.delete_index(index_name, timeout)
        except IndexTransportError:
            raise
        except IndexManagerError as e:
            raise AcknowledgmentError(f"删除索引 '{index_name}' 失败: {e}") from e
        if not acknowledged:
            raise AcknowledgmentError(f"删除索引 '{index_name}' 未被集群确认")

    def _create_index(self, index_name: str, timeout: float) -> bool:
        """创建索引，返回 False 表示索引已被其他写入方抢先创建."""
        try:
            self._admin.create_index(index_name, timeout)
        except IndexAlreadyExistsError:
            logger.debug(f"索引 '{index_name}' 已被并发创建")
            return False
        except IndexTransportError:
            raise
        except (IndexManagerError, ValueError) as e:
            raise AcknowledgmentError(f"创建索引 '{index_name}' 失败: {e}") from e
        logger.info(f"索引 '{index_name}' 已预创建")
        return True
