"""索引维护工具函数模块.

提供策略配置解析和保留日期计算功能。
"""

import json
from typing import Any

from ..exceptions import ConfigurationError
from .civil_date import CivilDate
from .models import IndexNameFilter, IndexPolicy, RetentionType

# 策略 JSON 中的必需字段
_REQUIRED_KEYS = ("indexName", "retentionType", "retentionPeriod")


def parse_policies(text: str) -> list[IndexPolicy]:
    """将 JSON 数组文本解析为策略列表.

    每个元素的格式::

        {
            "indexName": "logs",
            "retentionType": "DAILY",
            "retentionPeriod": 7,
            "preCreate": true,
            "indexNameFilter": {"separator": "", "datePattern": "YYYYMMDD"}
        }

    indexNameFilter 可省略，省略时分隔符为空、日期后缀格式由 retentionType 决定。
    显式指定的 datePattern 必须与 retentionType 对应的格式一致。

    Args:
        text: 策略 JSON 数组文本

    Returns:
        策略列表

    Raises:
        ConfigurationError: 当 JSON 格式错误或策略字段不合法时抛出

    Examples:
        >>> policies = parse_policies(
        ...     '[{"indexName": "logs", "retentionType": "daily", "retentionPeriod": 7}]'
        ... )
        >>> policies[0].retention_type
        <RetentionType.DAILY: 'DAILY'>
    """
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"索引策略 JSON 解析失败: {e}") from e

    if not isinstance(raw, list):
        raise ConfigurationError(
            f"索引策略必须为 JSON 数组，当前类型: {type(raw).__name__}"
        )

    return [_parse_policy(item, position) for position, item in enumerate(raw)]


def _parse_policy(item: Any, position: int) -> IndexPolicy:
    if not isinstance(item, dict):
        raise ConfigurationError(f"第 {position} 条索引策略必须为 JSON 对象")

    missing = [key for key in _REQUIRED_KEYS if key not in item]
    if missing:
        raise ConfigurationError(f"第 {position} 条索引策略缺少字段: {missing}")

    base_name = item["indexName"]
    if not isinstance(base_name, str):
        raise ConfigurationError(f"第 {position} 条索引策略的 indexName 必须为字符串")

    retention_type = RetentionType.parse(item["retentionType"])

    pre_create = item.get("preCreate", False)
    if not isinstance(pre_create, bool):
        raise ConfigurationError(f"第 {position} 条索引策略的 preCreate 必须为布尔值")

    filter_spec = item.get("indexNameFilter") or {}
    if not isinstance(filter_spec, dict):
        raise ConfigurationError(
            f"第 {position} 条索引策略的 indexNameFilter 必须为 JSON 对象"
        )

    name_filter = IndexNameFilter(
        base_name=base_name,
        date_pattern=filter_spec.get("datePattern", retention_type.date_pattern),
        separator=filter_spec.get("separator", ""),
    )

    return IndexPolicy(
        base_name=base_name,
        name_filter=name_filter,
        retention_period=item["retentionPeriod"],
        retention_type=retention_type,
        pre_create=pre_create,
    )


def retention_cutoff(
    retention_type: RetentionType, retention_period: int, today: CivilDate
) -> int:
    """计算保留截止日期.

    日期后缀小于或等于截止日期的索引会被删除。

    Args:
        retention_type: 保留粒度
        retention_period: 保留周期数
        today: 今天的日期

    Returns:
        截止日期整数（YYYYMMDD / YYYYMM / YYYY）

    Raises:
        ConfigurationError: 当保留粒度不受支持时抛出

    Examples:
        >>> retention_cutoff(RetentionType.DAILY, 7, CivilDate(2024, 1, 8))
        20240101
    """
    return today.add(-retention_period, retention_type).to_int(retention_type)


def future_dates(
    retention_type: RetentionType, retention_period: int, today: CivilDate
) -> list[int]:
    """计算需要预创建的日期后缀，按时间升序排列.

    包含今天在内的 retention_period 个周期：偏移量 0 .. retention_period - 1。

    Raises:
        ConfigurationError: 当保留粒度不受支持时抛出

    Examples:
        >>> future_dates(RetentionType.MONTHLY, 3, CivilDate(2024, 11, 30))
        [202411, 202412, 202501]
    """
    return [
        today.add(offset, retention_type).to_int(retention_type)
        for offset in range(retention_period)
    ]
