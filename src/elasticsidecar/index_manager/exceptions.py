"""索引管理器异常定义模块."""

from ..exceptions import ElasticSidecarError


class IndexManagerError(ElasticSidecarError):
    """索引管理器基础异常类."""

    pass


class IndexTransportError(IndexManagerError):
    """集群调用超时或连接失败.

    对当前周期是致命的，下一个调度周期会重新尝试，周期内不做重试。
    """

    pass


class IndexAlreadyExistsError(IndexManagerError):
    """索引已存在异常."""

    pass


class AcknowledgmentError(IndexManagerError):
    """集群未确认操作异常.

    集群接受了删除请求但没有确认，或创建请求直接失败时抛出。
    会中止当前策略的处理。
    """

    pass
