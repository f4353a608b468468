"""Shared base for the repository contracts.

Services receive a repository through their constructor and only ever
talk to these abstract methods, so unit tests can pass a mock in place
of the ORM-backed implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

EntityT = TypeVar("EntityT")


class IRepository(ABC, Generic[EntityT]):
    """Primary-key look-up and persistence for one model type."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[EntityT]:
        """Return the entity with primary key ``id``, or ``None``."""

    @abstractmethod
    def save(self, entity: EntityT) -> EntityT:
        """Insert or update ``entity`` and return it."""
