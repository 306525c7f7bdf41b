"""不可变日历日期模块.

索引名称中的日期后缀只关心年、月、日，不涉及时区（以进程所在机器的时钟为准）。
CivilDate 的所有运算都返回新实例，不修改自身。
"""

from __future__ import annotations

import calendar
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from ..exceptions import ConfigurationError
from .models import RetentionType


@dataclass(frozen=True, order=True)
class CivilDate:
    """不可变的 (年, 月, 日) 日期值.

    Attributes:
        year: 年
        month: 月（1-12）
        day: 日

    Raises:
        ValueError: 当日期不存在时抛出（如 2023-02-29）

    Examples:
        >>> CivilDate(2024, 1, 31).add_months(1)
        CivilDate(year=2024, month=2, day=29)
        >>> CivilDate(2024, 1, 8).add_days(-7).to_int(RetentionType.DAILY)
        20240101
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # 借助 date 校验日期是否存在
        date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: date) -> CivilDate:
        return cls(value.year, value.month, value.day)

    @classmethod
    def today(cls, today_func: Callable[[], date] | None = None) -> CivilDate:
        """获取今天的日期.

        Args:
            today_func: 自定义获取当天日期的函数，主要用于测试，默认 date.today
        """
        return cls.from_date((today_func or date.today)())

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def add_days(self, days: int) -> CivilDate:
        return CivilDate.from_date(self.to_date() + timedelta(days=days))

    def add_months(self, months: int) -> CivilDate:
        """加减月份，日超出目标月份天数时取该月最后一天."""
        total = self.year * 12 + (self.month - 1) + months
        year, month_index = divmod(total, 12)
        month = month_index + 1
        day = min(self.day, calendar.monthrange(year, month)[1])
        return CivilDate(year, month, day)

    def add_years(self, years: int) -> CivilDate:
        """加减年份，2 月 29 日落在平年时取 2 月 28 日."""
        year = self.year + years
        day = min(self.day, calendar.monthrange(year, self.month)[1])
        return CivilDate(year, self.month, day)

    def add(self, amount: int, granularity: RetentionType) -> CivilDate:
        """按保留粒度加减.

        Raises:
            ConfigurationError: 当保留粒度不受支持时抛出
        """
        if granularity == RetentionType.DAILY:
            return self.add_days(amount)
        if granularity == RetentionType.MONTHLY:
            return self.add_months(amount)
        if granularity == RetentionType.YEARLY:
            return self.add_years(amount)
        raise ConfigurationError(
            f"不支持的保留粒度: {granularity!r}，应为 DAILY、MONTHLY 或 YEARLY"
        )

    def to_int(self, granularity: RetentionType) -> int:
        """按保留粒度格式化为整数（YYYYMMDD / YYYYMM / YYYY）.

        Raises:
            ConfigurationError: 当保留粒度不受支持时抛出
        """
        if granularity == RetentionType.DAILY:
            return self.year * 10000 + self.month * 100 + self.day
        if granularity == RetentionType.MONTHLY:
            return self.year * 100 + self.month
        if granularity == RetentionType.YEARLY:
            return self.year
        raise ConfigurationError(
            f"不支持的保留粒度: {granularity!r}，应为 DAILY、MONTHLY 或 YEARLY"
        )

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
