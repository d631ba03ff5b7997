"""
DTO 基类 - 应用层与表现层之间的数据传输
"""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class DTOBase(BaseModel):
    """Base DTO: read straight from domain dataclasses."""

    model_config = ConfigDict(from_attributes=True)


def enum_value(v: Any) -> Any:
    """领域枚举以其线上取值（如 disputed-refunded）输出"""
    return v.value if isinstance(v, Enum) else v
