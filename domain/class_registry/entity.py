"""Domain entity representing a scheduled class."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.payment.entity import ClassDetails


@dataclass
class ClassRecord:
    """Aggregate root describing a class an instructor offers."""

    id: Optional[int]
    title: str
    description: str
    instructor: str
    price: int
    duration: int
    start_time: int
    capacity: int
    registered_count: int = 0
    active: bool = True
    created_at: int = 0
    updated_at: int = 0

    def has_started(self, block_height: int) -> bool:
        return self.start_time < block_height

    def is_full(self) -> bool:
        return self.registered_count >= self.capacity

    def to_details(self) -> ClassDetails:
        return ClassDetails(
            class_id=self.id if self.id is not None else -1,
            price=self.price,
            instructor=self.instructor,
            active=self.active,
            start_time=self.start_time,
        )


@dataclass
class RegistryState:
    owner: str
    platform_fee_recipient: str
    next_class_id: int = 0
