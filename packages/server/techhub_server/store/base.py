"""
Entity store contract.

Business logic only ever talks to an `EntityStore`; the backend (in-memory
or SQL) is chosen at app creation time. Identifier and timestamp assignment
belong to the store, never to the caller.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Protocol

from techhub_server.store.entities import Entity, EntityKind

Predicate = Callable[[Entity], bool]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EntityStore(Protocol):
    """Keyed collections of marketplace entities."""

    def now(self) -> datetime:
        """Current time on the store clock (UTC)."""
        ...

    async def create(self, kind: EntityKind, data: Mapping[str, Any]) -> Entity:
        """Assign an id and created_at, persist, and return a copy."""
        ...

    async def get(self, kind: EntityKind, entity_id: int) -> Entity:
        """Return a copy of the entity or raise NotFoundError."""
        ...

    async def update(
        self, kind: EntityKind, entity_id: int, fields: Mapping[str, Any]
    ) -> Entity:
        """Shallow-merge `fields` into the entity, replacing it in one step."""
        ...

    async def scan(
        self, kind: EntityKind, predicate: Optional[Predicate] = None
    ) -> list[Entity]:
        """Full unordered scan, optionally filtered."""
        ...

    def lock(self, name: str) -> asyncio.Lock:
        """Named lock for read-then-write sequences that must not interleave."""
        ...

    async def close(self) -> None:
        ...
