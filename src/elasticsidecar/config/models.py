"""边车配置数据模型定义模块."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from ..exceptions import ConfigurationError

# 外部属性名（camelCase）到配置字段名的映射
_PROPERTY_NAMES: dict[str, str] = {
    "indexAutoCreationEnabled": "index_auto_creation_enabled",
    "indexMetadata": "index_metadata",
    "autoCreateIndexScheduledHour": "auto_create_index_scheduled_hour",
    "autoCreateIndexTimeout": "auto_create_index_timeout",
    "debugLoggingEnabled": "debug_logging_enabled",
    "processStatsInterval": "process_stats_interval",
    "processMonitorInterval": "process_monitor_interval",
    "isolatePolicyFailures": "isolate_policy_failures",
}


@dataclass
class SidecarConfig:
    """边车配置模型.

    索引生命周期管理器每个周期都会重新读取 index_metadata，
    因此修改该字段会在下一次执行时生效。

    Attributes:
        index_auto_creation_enabled: 是否启用索引自动维护（清理与预创建）
        index_metadata: 索引策略的 JSON 数组文本
        auto_create_index_scheduled_hour: 每日执行索引维护的小时（0-23）
        auto_create_index_timeout: 每次集群调用的超时时间（毫秒），必须 > 0
        debug_logging_enabled: 是否输出逐索引的调试日志
        process_stats_interval: 进程统计采样周期（秒）
        process_monitor_interval: 进程存活探测周期（秒）
        isolate_policy_failures: 单个策略失败时是否继续处理其余策略

    Raises:
        ConfigurationError: 当参数不合法时抛出

    Examples:
        >>> config = SidecarConfig(
        ...     index_auto_creation_enabled=True,
        ...     index_metadata='[{"indexName": "logs", "retentionType": "DAILY", '
        ...     '"retentionPeriod": 7, "preCreate": true}]',
        ...     auto_create_index_scheduled_hour=2,
        ... )
    """

    index_auto_creation_enabled: bool = False
    index_metadata: str = "[]"
    auto_create_index_scheduled_hour: int = 0
    auto_create_index_timeout: int = 300000
    debug_logging_enabled: bool = False
    process_stats_interval: float = 60.0
    process_monitor_interval: float = 10.0
    isolate_policy_failures: bool = False

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        if not 0 <= self.auto_create_index_scheduled_hour <= 23:
            raise ConfigurationError(
                "auto_create_index_scheduled_hour 必须在 0-23 之间，"
                f"当前值: {self.auto_create_index_scheduled_hour}"
            )
        if self.auto_create_index_timeout <= 0:
            raise ConfigurationError(
                f"auto_create_index_timeout 必须 > 0，当前值: {self.auto_create_index_timeout}"
            )
        if self.process_stats_interval <= 0:
            raise ConfigurationError(
                f"process_stats_interval 必须 > 0，当前值: {self.process_stats_interval}"
            )
        if self.process_monitor_interval <= 0:
            raise ConfigurationError(
                f"process_monitor_interval 必须 > 0，当前值: {self.process_monitor_interval}"
            )

    @property
    def request_timeout(self) -> float:
        """集群调用超时时间（秒），供 Elasticsearch 客户端使用."""
        return self.auto_create_index_timeout / 1000

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "SidecarConfig":
        """根据属性字典构建配置.

        同时接受外部属性名（如 indexAutoCreationEnabled）和字段名
        （如 index_auto_creation_enabled），未知的键会被忽略。

        Args:
            mapping: 属性字典

        Returns:
            配置实例

        Raises:
            ConfigurationError: 当属性值不合法时抛出
        """
        field_types = {f.name: f.type for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _PROPERTY_NAMES.get(key, key)
            if name in field_types:
                kwargs[name] = _coerce(name, value, field_types[name])
        return cls(**kwargs)


def _coerce(name: str, value: Any, target: Any) -> Any:
    """将属性源返回的值（通常为字符串）转换为字段类型.

    Raises:
        ConfigurationError: 当值无法转换时抛出
    """
    if not isinstance(value, str) or target is str:
        return value

    if target is bool:
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no", ""):
            return False
        raise ConfigurationError(f"属性 {name} 不是合法的布尔值: {value!r}")

    try:
        return target(value.strip())
    except ValueError as e:
        raise ConfigurationError(f"属性 {name} 的值不合法: {value!r}") from e
