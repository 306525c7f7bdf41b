"""ES 客户端模块 - 创建并持有边车访问本地 Elasticsearch 节点所用的客户端.

主要组件:
    - ESClientFactory: 客户端工厂，负责惰性创建、复用与关闭客户端
    - ClusterConfig: 本地节点地址与认证配置
    - ConnectionConfig: 连接池与重试配置

使用示例:
    from elasticsidecar.connection import ESClientFactory, ClusterConfig

    with ESClientFactory(ClusterConfig()) as factory:
        client = factory.get_client()
"""

from .exceptions import ConnectionConfigError, ESClientFactoryError
from .models import ClusterConfig, ConnectionConfig
from .tool import ESClientFactory

__all__ = [
    # 工厂
    "ESClientFactory",
    # 模型
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "ESClientFactoryError",
    "ConnectionConfigError",
]
