"""Class registry domain exports."""
from .entity import ClassRecord, RegistryState
from .repository import ClassRepository, RegistryStateRepository

__all__ = ["ClassRecord", "RegistryState", "ClassRepository", "RegistryStateRepository"]
