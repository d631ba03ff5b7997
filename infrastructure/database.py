"""
内存账本存储 - canonical, already-consistent store for all marketplace ledgers

Rows are plain dicts keyed per table; repositories translate rows to domain
entities. Snapshots are deep copies so a unit of work can restore the exact
pre-operation state.
"""
from __future__ import annotations

import copy
from typing import Any, Dict

TABLES = (
    "processor_state",
    "payments",
    "payments_by_class",
    "disputes",
    "registry_state",
    "classes",
    "classes_by_instructor",
    "tracker_state",
    "attendance",
    "attendance_by_class",
    "attendance_by_participant",
)

STATE_KEY = "singleton"

Snapshot = Dict[str, Dict[Any, Any]]


class InMemoryDatabase:
    """进程内数据库（单写者，由应用层的互斥锁串行化）"""

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[Any, Any]] = {name: {} for name in TABLES}

    def table(self, name: str) -> Dict[Any, Any]:
        try:
            return self._tables[name]
        except KeyError:
            raise ValueError(f"未知的数据表: {name}") from None

    def snapshot(self) -> Snapshot:
        return copy.deepcopy(self._tables)

    def restore(self, snapshot: Snapshot) -> None:
        self._tables = copy.deepcopy(snapshot)

    def reset(self) -> None:
        """
        清空所有表

        警告：仅用于测试与开发环境，会删除所有数据！
        """
        self._tables = {name: {} for name in TABLES}
