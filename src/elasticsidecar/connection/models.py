"""ES 客户端工厂数据模型定义模块."""

from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError


@dataclass
class ClusterConfig:
    """本地集群节点连接配置.

    边车与被管理的 Elasticsearch 进程部署在同一台机器上，
    因此默认地址为本机的 9200 端口。

    Attributes:
        hosts: ES 节点地址列表，不可为空
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ConnectionConfigError: 当 hosts 为空时抛出
    """

    hosts: list[str] = field(default_factory=lambda: ["http://localhost:9200"])
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        """校验节点配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")


@dataclass
class ConnectionConfig:
    """连接池配置模型.

    索引维护任务不在周期内重试，失败留给下一个调度周期处理，
    因此默认关闭客户端层面的重试。

    Attributes:
        max_retries: 最大重试次数，默认 0
        retry_on_timeout: 超时是否重试，默认 False
        request_timeout: 默认请求超时时间（秒），必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 False

    Raises:
        ConnectionConfigError: 当参数不合法时抛出
    """

    max_retries: int = 0
    retry_on_timeout: bool = False
    request_timeout: float = 30
    http_compress: bool = False

    def __post_init__(self) -> None:
        """校验连接池配置参数合法性."""
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
