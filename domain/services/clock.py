"""
External block-height clock. Advanced outside the domain; only read here.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlockClock(Protocol):
    def current_height(self) -> int: ...
