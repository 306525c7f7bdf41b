"""ES 客户端工厂异常定义模块."""

from ..exceptions import ElasticSidecarError


class ESClientFactoryError(ElasticSidecarError):
    """客户端工厂基础异常类."""

    pass


class ConnectionConfigError(ESClientFactoryError):
    """连接配置校验异常.

    当连接配置参数不合法时抛出，例如 hosts 为空、request_timeout 为负数等。
    """

    pass
