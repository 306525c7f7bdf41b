"""调度器异常定义模块."""

from ..exceptions import ElasticSidecarError


class SchedulerError(ElasticSidecarError):
    """调度器基础异常类."""

    pass


class JobAlreadyRegisteredError(SchedulerError):
    """任务重复注册异常.

    同一个任务名称在调度器中只能注册一次。
    """

    pass


class JobNotFoundError(SchedulerError):
    """任务未找到异常."""

    pass
