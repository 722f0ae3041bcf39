"""
In-memory entity store.

Each kind is a dict keyed by integer id with its own counter. Methods never
await, so under a single event loop every operation runs to completion
without interleaving; `update` builds the merged record first and swaps it
in with a single assignment.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Mapping, Optional

import structlog

from techhub_server.core.errors import NotFoundError
from techhub_server.store.base import Clock, Predicate, utc_now
from techhub_server.store.entities import ENTITY_LABELS, ENTITY_TYPES, Entity, EntityKind

log = structlog.get_logger()


class MemoryStore:
    """Dict-backed `EntityStore`."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now
        self._rows: dict[EntityKind, dict[int, Entity]] = {kind: {} for kind in EntityKind}
        self._next_id: dict[EntityKind, int] = {kind: 1 for kind in EntityKind}
        self._locks: dict[str, asyncio.Lock] = {}

    def now(self) -> datetime:
        return self._clock()

    async def create(self, kind: EntityKind, data: Mapping[str, Any]) -> Entity:
        entity_id = self._next_id[kind]
        entity = ENTITY_TYPES[kind].model_validate(
            {**data, "id": entity_id, "created_at": self.now()}
        )
        self._next_id[kind] = entity_id + 1
        self._rows[kind][entity_id] = entity
        log.debug("store.created", kind=kind.value, id=entity_id)
        return entity.model_copy(deep=True)

    async def get(self, kind: EntityKind, entity_id: int) -> Entity:
        entity = self._rows[kind].get(entity_id)
        if entity is None:
            raise NotFoundError(f"{ENTITY_LABELS[kind]} {entity_id} not found")
        return entity.model_copy(deep=True)

    async def update(
        self, kind: EntityKind, entity_id: int, fields: Mapping[str, Any]
    ) -> Entity:
        current = self._rows[kind].get(entity_id)
        if current is None:
            raise NotFoundError(f"{ENTITY_LABELS[kind]} {entity_id} not found")
        merged = {**current.model_dump(), **fields, "id": current.id, "created_at": current.created_at}
        replacement = ENTITY_TYPES[kind].model_validate(merged)
        self._rows[kind][entity_id] = replacement
        log.debug("store.updated", kind=kind.value, id=entity_id, fields=sorted(fields))
        return replacement.model_copy(deep=True)

    async def scan(
        self, kind: EntityKind, predicate: Optional[Predicate] = None
    ) -> list[Entity]:
        rows = list(self._rows[kind].values())
        if predicate is not None:
            rows = [row for row in rows if predicate(row)]
        return [row.model_copy(deep=True) for row in rows]

    def lock(self, name: str) -> asyncio.Lock:
        return self._locks.setdefault(name, asyncio.Lock())

    async def close(self) -> None:
        return None

