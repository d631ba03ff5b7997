"""
Class registry DTOs (Pydantic v2).
"""
from __future__ import annotations

from pydantic import Field

from .base import DTOBase


class CreateClassRequest(DTOBase):
    title: str
    description: str = ""
    price: int
    duration: int
    start_time: int
    capacity: int


class UpdateClassRequest(DTOBase):
    title: str
    description: str = ""
    price: int
    duration: int
    capacity: int


class SetRecipientRequest(DTOBase):
    recipient: str


class ClassDTO(DTOBase):
    id: int
    title: str
    description: str
    instructor: str
    price: int
    duration: int
    start_time: int
    capacity: int
    registered_count: int
    active: bool
    created_at: int
    updated_at: int


class ClassIdsDTO(DTOBase):
    class_ids: list[int] = Field(default_factory=list)


class RegistryStatsDTO(DTOBase):
    total_classes: int
    active_classes: int
    platform_fee_recipient: str
