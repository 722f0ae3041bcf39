"""
SQL-backed entity store.

Maps each entity kind onto a SQLModel table and runs every operation in its
own session and transaction. Scans load the whole table and filter in Python,
matching the memory backend's semantics.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, select

from techhub_server.core.errors import NotFoundError
from techhub_server.models import (
    PitchRow,
    ProjectRow,
    RatingRow,
    RequestRow,
    UploadRow,
    UserRow,
)
from techhub_server.store.base import Clock, Predicate, utc_now
from techhub_server.store.entities import ENTITY_LABELS, ENTITY_TYPES, Entity, EntityKind

log = structlog.get_logger()

TABLES: dict[EntityKind, type[SQLModel]] = {
    EntityKind.USERS: UserRow,
    EntityKind.PROJECTS: ProjectRow,
    EntityKind.REQUESTS: RequestRow,
    EntityKind.PITCHES: PitchRow,
    EntityKind.RATINGS: RatingRow,
    EntityKind.UPLOADS: UploadRow,
}

_IMMUTABLE = frozenset({"id", "created_at"})


def _column_values(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.items()
    }


class SQLStore:
    """`EntityStore` over an async SQLAlchemy engine."""

    def __init__(self, database_url: str, clock: Optional[Clock] = None, *, echo: bool = False):
        self._clock = clock or utc_now
        self._engine = create_async_engine(database_url, echo=echo, future=True)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._locks: dict[str, asyncio.Lock] = {}

    def now(self) -> datetime:
        return self._clock()

    async def init(self) -> None:
        """Create all tables (development only)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    def lock(self, name: str) -> asyncio.Lock:
        """Process-local lock; one SQLStore per app process is assumed."""
        return self._locks.setdefault(name, asyncio.Lock())

    def _to_entity(self, kind: EntityKind, row: SQLModel) -> Entity:
        return ENTITY_TYPES[kind].model_validate(row, from_attributes=True)

    async def create(self, kind: EntityKind, data: Mapping[str, Any]) -> Entity:
        # Validate through the entity type first so bad data never reaches the table
        values = ENTITY_TYPES[kind].model_validate(
            {**data, "id": 0, "created_at": self.now()}
        ).model_dump(exclude={"id"})
        async with self._session_factory() as session, session.begin():
            row = TABLES[kind](**_column_values(values))
            session.add(row)
            await session.flush()
            entity = self._to_entity(kind, row)
        log.debug("store.created", kind=kind.value, id=entity.id, backend="sql")
        return entity

    async def get(self, kind: EntityKind, entity_id: int) -> Entity:
        async with self._session_factory() as session:
            row = await session.get(TABLES[kind], entity_id)
            if row is None:
                raise NotFoundError(f"{ENTITY_LABELS[kind]} {entity_id} not found")
            return self._to_entity(kind, row)

    async def update(
        self, kind: EntityKind, entity_id: int, fields: Mapping[str, Any]
    ) -> Entity:
        async with self._session_factory() as session, session.begin():
            row = await session.get(TABLES[kind], entity_id)
            if row is None:
                raise NotFoundError(f"{ENTITY_LABELS[kind]} {entity_id} not found")
            current = self._to_entity(kind, row)
            merged = ENTITY_TYPES[kind].model_validate(
                {**current.model_dump(), **fields, "id": current.id, "created_at": current.created_at}
            )
            changes = merged.model_dump(exclude=_IMMUTABLE)
            for key, value in _column_values(changes).items():
                setattr(row, key, value)
            session.add(row)
            await session.flush()
        log.debug("store.updated", kind=kind.value, id=entity_id, fields=sorted(fields), backend="sql")
        return merged

    async def scan(
        self, kind: EntityKind, predicate: Optional[Predicate] = None
    ) -> list[Entity]:
        async with self._session_factory() as session:
            result = await session.execute(select(TABLES[kind]))
            entities = [self._to_entity(kind, row) for row in result.scalars().all()]
        if predicate is not None:
            entities = [entity for entity in entities if predicate(entity)]
        return entities
