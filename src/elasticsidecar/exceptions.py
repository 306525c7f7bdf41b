"""Elastic Sidecar 异常定义模块."""


class ElasticSidecarError(Exception):
    """Elastic Sidecar 基础异常类."""

    pass


class ConfigurationError(ElasticSidecarError):
    """配置异常.

    当索引策略 JSON 格式错误、保留粒度不受支持或配置值不合法时抛出。
    对当前执行周期是致命的，下一个周期会重新加载配置后重试。
    """

    pass
