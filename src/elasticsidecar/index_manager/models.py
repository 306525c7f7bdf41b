"""索引管理器数据模型定义模块.

提供索引维护相关的数据模型，包括：
- RetentionType: 保留粒度（按天、按月、按年）
- IndexNameFilter: 索引名称过滤器（基础名 + 分隔符 + 日期后缀）
- IndexPolicy: 单条保留/预创建策略
- PolicyResult: 单条策略的处理结果
- CycleResult: 一次索引维护周期的执行结果
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any

from ..exceptions import ConfigurationError
from ..scheduler.models import FailureKind, TaskResult


class RetentionType(str, Enum):
    """保留粒度."""

    DAILY = "DAILY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @classmethod
    def parse(cls, value: Any) -> "RetentionType":
        """解析保留粒度（不区分大小写）.

        Raises:
            ConfigurationError: 当值不是 DAILY、MONTHLY、YEARLY 之一时抛出
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ConfigurationError(
            f"不支持的保留粒度: {value!r}，应为 DAILY、MONTHLY 或 YEARLY"
        )

    @property
    def date_pattern(self) -> str:
        """该粒度对应的索引日期后缀格式."""
        return _DEFAULT_DATE_PATTERNS[self]


_DEFAULT_DATE_PATTERNS: dict[RetentionType, str] = {
    RetentionType.DAILY: "YYYYMMDD",
    RetentionType.MONTHLY: "YYYYMM",
    RetentionType.YEARLY: "YYYY",
}

# 日期后缀格式到数字位数的映射
DATE_PATTERN_DIGITS: dict[str, int] = {
    "YYYYMMDD": 8,
    "YYYYMM": 6,
    "YYYY": 4,
}


@dataclass(frozen=True)
class IndexNameFilter:
    """索引名称过滤器.

    匹配形如 ``<base_name><separator><日期后缀>`` 的索引名称，基础名不区分大小写。
    过滤器无状态，完全由策略的基础名和后缀格式决定。

    Attributes:
        base_name: 索引基础名
        date_pattern: 日期后缀格式（YYYYMMDD、YYYYMM、YYYY）
        separator: 基础名与日期后缀之间的分隔符，默认为空

    Raises:
        ConfigurationError: 当日期后缀格式不受支持时抛出

    Examples:
        >>> name_filter = IndexNameFilter("logs", "YYYYMMDD")
        >>> name_filter.matches("logs20240101")
        True
        >>> name_filter.base_part("logs20240101")
        'logs'
        >>> name_filter.matches("otherindex20240101")
        False
    """

    base_name: str
    date_pattern: str = "YYYYMMDD"
    separator: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.separator, str):
            raise ConfigurationError(f"分隔符必须为字符串: {self.separator!r}")
        if not isinstance(self.date_pattern, str) or (
            self.date_pattern not in DATE_PATTERN_DIGITS
        ):
            raise ConfigurationError(
                f"不支持的日期后缀格式: {self.date_pattern!r}，"
                f"应为 {', '.join(DATE_PATTERN_DIGITS)} 之一"
            )

    @cached_property
    def _suffix_regex(self) -> str:
        digits = DATE_PATTERN_DIGITS[self.date_pattern]
        return rf"{re.escape(self.separator)}(?P<date>\d{{{digits}}})"

    @cached_property
    def _name_pattern(self) -> re.Pattern[str]:
        return re.compile(
            rf"^{re.escape(self.base_name)}{self._suffix_regex}$", re.IGNORECASE
        )

    @cached_property
    def _any_base_pattern(self) -> re.Pattern[str]:
        return re.compile(rf"^(?P<base>.+?){self._suffix_regex}$")

    def matches(self, index_name: str) -> bool:
        """判断索引名称是否属于该过滤器."""
        return self._name_pattern.match(index_name) is not None

    def base_part(self, index_name: str) -> str:
        """提取索引名称中日期后缀之前的基础名部分.

        没有符合格式的日期后缀时原样返回索引名称。
        """
        match = self._any_base_pattern.match(index_name)
        return match.group("base") if match else index_name

    def date_part(self, index_name: str) -> int:
        """提取索引名称中的日期后缀整数.

        Raises:
            ValueError: 当索引名称不含符合格式的日期后缀时抛出
        """
        match = self._any_base_pattern.match(index_name)
        if match is None:
            raise ValueError(f"索引 '{index_name}' 不含 {self.date_pattern} 日期后缀")
        return int(match.group("date"))

    def build_name(self, date_value: int) -> str:
        """根据日期后缀整数构造索引名称."""
        digits = DATE_PATTERN_DIGITS[self.date_pattern]
        return f"{self.base_name}{self.separator}{date_value:0{digits}d}"


@dataclass
class IndexPolicy:
    """索引保留/预创建策略.

    每个执行周期都会从配置文本重新解析，不在周期之间缓存。

    Attributes:
        base_name: 索引基础名
        name_filter: 索引名称过滤器
        retention_period: 保留周期数（单位由 retention_type 决定），必须 >= 0
        retention_type: 保留粒度
        pre_create: 是否预创建未来的索引

    Raises:
        ConfigurationError: 当参数不合法时抛出
    """

    base_name: str
    name_filter: IndexNameFilter
    retention_period: int
    retention_type: RetentionType
    pre_create: bool = False

    def __post_init__(self) -> None:
        """校验策略参数合法性."""
        if not self.base_name:
            raise ConfigurationError("indexName 不能为空")
        if not isinstance(self.retention_type, RetentionType):
            raise ConfigurationError(f"不支持的保留粒度: {self.retention_type!r}")
        # 日期后缀与截止日期必须是同一宽度的整数才能比较
        if self.name_filter.date_pattern != self.retention_type.date_pattern:
            raise ConfigurationError(
                f"索引 '{self.base_name}' 的日期后缀格式 {self.name_filter.date_pattern} "
                f"与保留粒度 {self.retention_type.value} 不一致，"
                f"应为 {self.retention_type.date_pattern}"
            )
        if isinstance(self.retention_period, bool) or not isinstance(
            self.retention_period, int
        ):
            raise ConfigurationError(
                f"retentionPeriod 必须为整数，当前值: {self.retention_period!r}"
            )
        if self.retention_period < 0:
            raise ConfigurationError(
                f"retentionPeriod 必须 >= 0，当前值: {self.retention_period}"
            )


@dataclass
class PolicyResult:
    """单条策略的处理结果.

    Attributes:
        index_name: 策略的索引基础名
        cutoff: 保留截止日期（整数形式），未计算时为 None
        deleted: 已删除的索引
        created: 已创建的索引
        existing: 预创建时已存在而跳过的索引
        failure_kind: 失败类别，成功时为 None
        error: 失败信息
    """

    index_name: str
    cutoff: int | None = None
    deleted: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)
    failure_kind: FailureKind | None = None
    error: str = ""

    @property
    def failed(self) -> bool:
        return self.failure_kind is not None


@dataclass
class CycleResult(TaskResult):
    """一次索引维护周期的执行结果.

    Attributes:
        policies: 各策略的处理结果（按处理顺序）
    """

    policies: list[PolicyResult] = field(default_factory=list)

    @property
    def deleted(self) -> list[str]:
        return [name for result in self.policies for name in result.deleted]

    @property
    def created(self) -> list[str]:
        return [name for result in self.policies for name in result.created]
