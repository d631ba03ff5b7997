"""
应用服务公共部分 - 串行化写操作、事务边界与领域事件日志
"""
from __future__ import annotations

import asyncio
import re
from dataclasses import asdict
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from domain.common.unit_of_work import AbstractUnitOfWork


logger = get_logger(__name__)

S = TypeVar("S")
T = TypeVar("T")

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def event_name(event: Any) -> str:
    """PaymentRecorded -> payment_recorded"""
    return _CAMEL.sub("_", type(event).__name__).lower()


def log_events(events: Iterable[Any]) -> None:
    for event in events:
        fields = {
            k: (v.isoformat() if isinstance(v, datetime) else v)
            for k, v in asdict(event).items()
        }
        logger.info(event_name(event), **fields)


class SerializedService:
    """
    所有写操作都在共享互斥锁内、在一个 Unit of Work 中执行。

    ``domain_factory`` 用本次 UoW 的仓储构造领域服务；失败时 UoW 回滚
    （包括结算转账），领域事件被丢弃。
    """

    component = "marketplace"

    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        lock: asyncio.Lock,
        domain_factory: Callable[[AbstractUnitOfWork], S],
    ) -> None:
        self._uow_factory = uow_factory
        self._lock = lock
        self._domain_factory = domain_factory

    async def _execute(self, action: str, operation: Callable[[S], Awaitable[T]], **context: Any) -> T:
        async with self._lock:
            try:
                async with self._uow_factory() as uow:
                    service = self._domain_factory(uow)
                    result = await operation(service)
                    clear = getattr(service, "clear_events", None)
                    events = clear() if callable(clear) else []
            except BusinessException as exc:
                logger.info(
                    "operation_rejected",
                    component=self.component,
                    action=action,
                    error_type=exc.error_type,
                    code=int(exc.code),
                    **context,
                )
                raise
        logger.info("operation_committed", component=self.component, action=action, **context)
        log_events(events)
        return result

    async def _read(self, operation: Callable[[S], Awaitable[T]]) -> T:
        async with self._uow_factory(readonly=True) as uow:
            return await operation(self._domain_factory(uow))
