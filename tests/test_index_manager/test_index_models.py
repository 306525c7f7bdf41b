"""索引名称过滤器与策略模型单元测试."""

import pytest

from elasticsidecar.exceptions import ConfigurationError
from elasticsidecar.index_manager.models import (
    CycleResult,
    IndexNameFilter,
    IndexPolicy,
    PolicyResult,
    RetentionType,
)
from elasticsidecar.scheduler.models import FailureKind, TaskStatus


class TestRetentionType:
    """保留粒度解析测试."""

    @pytest.mark.parametrize("value", ["DAILY", "daily", " Daily "])
    def test_parse_case_insensitive(self, value: str) -> None:
        """测试不区分大小写."""
        assert RetentionType.parse(value) == RetentionType.DAILY

    @pytest.mark.parametrize("value", ["WEEKLY", "", None, 1])
    def test_parse_unknown_raises_error(self, value) -> None:
        """测试未知粒度是配置错误而不是默认值."""
        with pytest.raises(ConfigurationError, match="不支持的保留粒度"):
            RetentionType.parse(value)

    def test_date_pattern(self) -> None:
        """测试各粒度的默认日期后缀格式."""
        assert RetentionType.DAILY.date_pattern == "YYYYMMDD"
        assert RetentionType.MONTHLY.date_pattern == "YYYYMM"
        assert RetentionType.YEARLY.date_pattern == "YYYY"


class TestIndexNameFilter:
    """索引名称过滤器测试."""

    def test_daily_match(self) -> None:
        """测试按天索引匹配与基础名提取."""
        name_filter = IndexNameFilter("logs", "YYYYMMDD")
        assert name_filter.matches("logs20240101")
        assert name_filter.base_part("logs20240101") == "logs"
        assert name_filter.date_part("logs20240101") == 20240101

    def test_other_base_name_does_not_match(self) -> None:
        """测试其他基础名的索引不匹配."""
        name_filter = IndexNameFilter("logs", "YYYYMMDD")
        assert not name_filter.matches("otherindex20240101")
        assert name_filter.base_part("otherindex20240101") == "otherindex"

    def test_missing_separator_does_not_match(self) -> None:
        """测试缺少分隔符的索引不匹配."""
        name_filter = IndexNameFilter("logs", "YYYYMMDD", separator="-")
        assert name_filter.matches("logs-20240101")
        assert not name_filter.matches("logs20240101")
        assert name_filter.base_part("logs-20240101") == "logs"

    def test_wrong_suffix_length_does_not_match(self) -> None:
        """测试日期后缀位数不符."""
        name_filter = IndexNameFilter("logs", "YYYYMMDD")
        assert not name_filter.matches("logs202401")
        assert not name_filter.matches("logs2024010100")
        assert not name_filter.matches("logs")

    def test_case_insensitive_base_name(self) -> None:
        """测试基础名不区分大小写."""
        assert IndexNameFilter("Logs", "YYYYMM").matches("logs202401")

    def test_prefix_of_other_index_does_not_match(self) -> None:
        """测试基础名是其他索引前缀时不误匹配."""
        name_filter = IndexNameFilter("logs", "YYYYMMDD")
        assert not name_filter.matches("logs_archive20240101")

    def test_base_part_without_suffix(self) -> None:
        """测试无日期后缀时原样返回."""
        assert IndexNameFilter("logs").base_part("kibana") == "kibana"

    def test_date_part_without_suffix_raises_error(self) -> None:
        """测试无日期后缀时提取日期失败."""
        with pytest.raises(ValueError):
            IndexNameFilter("logs").date_part("kibana")

    def test_build_name(self) -> None:
        """测试构造索引名称."""
        assert IndexNameFilter("logs").build_name(20240108) == "logs20240108"
        assert IndexNameFilter("logs", "YYYY", separator="_").build_name(2024) == "logs_2024"

    def test_unsupported_pattern_raises_error(self) -> None:
        """测试不支持的日期后缀格式."""
        with pytest.raises(ConfigurationError, match="日期后缀格式"):
            IndexNameFilter("logs", "YYYYWW")

    def test_non_string_separator_raises_error(self) -> None:
        """测试分隔符类型错误."""
        with pytest.raises(ConfigurationError, match="分隔符"):
            IndexNameFilter("logs", separator=1)  # type: ignore[arg-type]


class TestIndexPolicy:
    """索引策略模型测试."""

    def test_valid_policy(self) -> None:
        """测试合法策略."""
        policy = IndexPolicy(
            base_name="logs",
            name_filter=IndexNameFilter("logs"),
            retention_period=7,
            retention_type=RetentionType.DAILY,
            pre_create=True,
        )
        assert policy.pre_create is True

    def test_empty_base_name_raises_error(self) -> None:
        """测试基础名为空."""
        with pytest.raises(ConfigurationError, match="indexName"):
            IndexPolicy("", IndexNameFilter("x"), 1, RetentionType.DAILY)

    def test_negative_period_raises_error(self) -> None:
        """测试负数保留周期."""
        with pytest.raises(ConfigurationError, match="retentionPeriod"):
            IndexPolicy("logs", IndexNameFilter("logs"), -1, RetentionType.DAILY)

    @pytest.mark.parametrize("period", ["7", 7.5, True])
    def test_non_integer_period_raises_error(self, period) -> None:
        """测试非整数保留周期."""
        with pytest.raises(ConfigurationError, match="retentionPeriod"):
            IndexPolicy("logs", IndexNameFilter("logs"), period, RetentionType.DAILY)

    def test_raw_retention_type_raises_error(self) -> None:
        """测试未解析的保留粒度."""
        with pytest.raises(ConfigurationError, match="不支持的保留粒度"):
            IndexPolicy("logs", IndexNameFilter("logs"), 1, "WEEKLY")  # type: ignore[arg-type]

    def test_date_pattern_mismatch_raises_error(self) -> None:
        """测试日期后缀格式与保留粒度不一致."""
        with pytest.raises(ConfigurationError, match="不一致"):
            IndexPolicy("logs", IndexNameFilter("logs", "YYYY"), 7, RetentionType.DAILY)


class TestResults:
    """结果模型测试."""

    def test_cycle_result_aggregates(self) -> None:
        """测试周期结果汇总各策略的删除与创建."""
        result = CycleResult.succeeded(
            policies=[
                PolicyResult("a", deleted=["a1"], created=["a2"]),
                PolicyResult("b", deleted=["b1"]),
            ]
        )
        assert result.status == TaskStatus.SUCCEEDED
        assert result.ok
        assert result.deleted == ["a1", "b1"]
        assert result.created == ["a2"]

    def test_failed_result(self) -> None:
        """测试失败结果."""
        result = CycleResult.failed(FailureKind.TRANSPORT, "timeout")
        assert not result.ok
        assert result.failure_kind == FailureKind.TRANSPORT
        assert result.policies == []

    def test_policy_result_failed(self) -> None:
        """测试策略结果失败标记."""
        assert not PolicyResult("a").failed
        assert PolicyResult("a", failure_kind=FailureKind.ACKNOWLEDGMENT).failed
