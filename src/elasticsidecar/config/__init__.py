"""边车配置模块.

主要组件:
    - SidecarConfig: 索引维护任务使用的配置项

使用示例:
    from elasticsidecar.config import SidecarConfig

    config = SidecarConfig.from_mapping({"indexAutoCreationEnabled": True})
"""

from .models import SidecarConfig

__all__ = [
    "SidecarConfig",
]
