"""
Base repository and query utilities.

This module provides the foundational repository pattern used across all
repository implementations in the centralized database layer. Repositories
add and flush; the calling service owns the transaction and commits once per
use case so that counters and rows change together.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import case, delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.util import identity_key
from sqlmodel import SQLModel, select

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Base async repository with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Add a new entity and flush so generated fields are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_id(self, entity_id: Any) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def get_many(self, entity_ids: Iterable[Any]) -> Dict[Any, EntityType]:
        """Load several entities at once, keyed by primary key."""
        ids = list({i for i in entity_ids if i is not None})
        if not ids:
            return {}
        stmt = select(self.model).where(self.model.id.in_(ids))
        result = await self.session.execute(stmt)
        return {row.id: row for row in result.scalars().all()}

    async def update(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, entity: EntityType) -> None:
        await self.session.delete(entity)
        await self.session.flush()

    async def delete_ids(self, entity_ids: Iterable[Any]) -> int:
        """Bulk delete rows by primary key without loading them."""
        ids = list({i for i in entity_ids if i is not None})
        if not ids:
            return 0
        result = await self.session.execute(
            delete(self.model).where(self.model.id.in_(ids)).execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and equality filters.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, stmt=None) -> int:
        """Count rows of ``stmt`` (a select), or of the whole table."""
        if stmt is None:
            stmt = select(self.model)
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        result = await self.session.execute(count_stmt)
        return int(result.scalar_one())

    async def increment(self, entity_id: Any, column: str, amount: int = 1) -> None:
        """Add ``amount`` to a counter column in SQL, never going below zero.

        A loaded instance of the row has the column reloaded so responses see
        the new value.
        """
        col = getattr(self.model, column)
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values({column: case((col + amount < 0, 0), else_=col + amount)})
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        instance = self.session.identity_map.get(identity_key(self.model, entity_id))
        if instance is not None:
            await self.session.refresh(instance, attribute_names=[column])

    async def paginate(self, stmt, limit: int, offset: int) -> List[EntityType]:
        result = await self.session.execute(QueryBuilder.apply_pagination(stmt, limit, offset))
        return list(result.scalars().all())


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
