from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class PersistenceGateway(ABC):
    """Generic record store. Failures surface as ``PersistenceError``."""

    @abstractmethod
    def insert(self, table: str, record: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""

    @abstractmethod
    def update(self, table: str, key: Mapping[str, Any], patch: Mapping[str, Any]) -> None:
        """Apply patch to every row matching key."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Return matching rows. A list, tuple or set filter value means IN."""

    @abstractmethod
    def delete(self, table: str, key: Mapping[str, Any]) -> None:
        """Delete every row matching key."""
