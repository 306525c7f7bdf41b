"""进程监控数据模型定义模块."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProcessStats:
    """Elasticsearch 进程统计快照.

    未知或尚未采样的值为 -1。

    Attributes:
        timestamp: 采样时间戳（毫秒）
        open_file_descriptors: 已打开的文件描述符数
        max_file_descriptors: 文件描述符上限
        cpu_percent: CPU 使用率
        cpu_total_in_millis: 累计 CPU 时间（毫秒）
        total_virtual_in_bytes: 虚拟内存大小（字节）
    """

    timestamp: int = -1
    open_file_descriptors: int = -1
    max_file_descriptors: int = -1
    cpu_percent: int = -1
    cpu_total_in_millis: int = -1
    total_virtual_in_bytes: int = -1

    @classmethod
    def from_response(cls, process: dict[str, Any]) -> "ProcessStats":
        """从 _nodes/stats/process 响应中的 process 部分构建快照."""
        cpu = process.get("cpu", {})
        mem = process.get("mem", {})
        return cls(
            timestamp=process.get("timestamp", -1),
            open_file_descriptors=process.get("open_file_descriptors", -1),
            max_file_descriptors=process.get("max_file_descriptors", -1),
            cpu_percent=cpu.get("percent", -1),
            cpu_total_in_millis=cpu.get("total_in_millis", -1),
            total_virtual_in_bytes=mem.get("total_virtual_in_bytes", -1),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "timestamp": self.timestamp,
            "open_file_descriptors": self.open_file_descriptors,
            "max_file_descriptors": self.max_file_descriptors,
            "cpu_percent": self.cpu_percent,
            "cpu_total_in_millis": self.cpu_total_in_millis,
            "total_virtual_in_bytes": self.total_virtual_in_bytes,
        }
