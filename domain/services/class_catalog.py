"""
Read-only class lookup consumed by the payment processor and attendance tracker.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.payment.entity import ClassDetails


@runtime_checkable
class ClassCatalog(Protocol):
    async def get_class_details(self, class_id: int) -> ClassDetails:
        """Return the class snapshot or raise ``InvalidClassException``."""
        ...
