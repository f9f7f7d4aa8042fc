"""Storage access interface over a single async session.

Services receive a :class:`Repository` instead of touching the session
directly, so every persistence failure is translated in one place.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from remote_orchestration.errors import ConflictError, StorageError
from remote_orchestration.utils.logging import get_logger

log = get_logger("repository")

ModelT = TypeVar("ModelT")


class Repository:
    """find / insert / update / delete / list_where for any mapped model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, model: type[ModelT], ident: Any) -> ModelT | None:
        try:
            return await self.session.get(model, ident)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load {model.__name__} {ident}") from exc

    async def insert(self, obj: ModelT) -> ModelT:
        """Persist *obj* inside a savepoint.

        A unique / FK violation rolls back only the savepoint and is raised as
        :class:`ConflictError`; the caller's transaction stays usable.
        """
        try:
            async with self.session.begin_nested():
                self.session.add(obj)
        except IntegrityError as exc:
            log.info("insert_conflict", model=type(obj).__name__, error=str(exc.orig))
            raise ConflictError(f"{type(obj).__name__} violates a uniqueness or reference constraint") from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to insert {type(obj).__name__}") from exc
        return obj

    async def update(self, obj: ModelT) -> ModelT:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"{type(obj).__name__} violates a uniqueness or reference constraint") from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to update {type(obj).__name__}") from exc
        return obj

    async def refresh(self, obj: Any, *attributes: str) -> None:
        """Reload *attributes* (all when omitted) of *obj* from the database."""
        try:
            await self.session.refresh(obj, attribute_names=list(attributes) or None)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to reload {type(obj).__name__}") from exc

    async def delete(self, obj: Any) -> None:
        try:
            await self.session.delete(obj)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to delete {type(obj).__name__}") from exc

    async def list_where(self, model: type[ModelT], *criteria: Any, order_by: Any = None) -> list[ModelT]:
        stmt = select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list {model.__name__}") from exc
        return list(result.scalars().unique().all())

    async def first_where(self, model: type[ModelT], *criteria: Any) -> ModelT | None:
        rows = await self.list_where(model, *criteria)
        return rows[0] if rows else None

    async def delete_where(self, model: type, *criteria: Any) -> int:
        """Bulk delete; returns the number of rows removed."""
        try:
            result = await self.session.execute(
                delete(model).where(*criteria).execution_options(synchronize_session="fetch")
            )
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to delete {model.__name__} rows") from exc
        return result.rowcount or 0

    async def count_by(self, key_column: Any, fk_column: Any) -> dict[Any, int]:
        """``{key: number of rows whose fk_column points at key}``, zero included."""
        stmt = (
            select(key_column, func.count(fk_column))
            .select_from(key_column.class_)
            .outerjoin(fk_column.class_, fk_column == key_column)
            .group_by(key_column)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to aggregate counts") from exc
        return {row[0]: row[1] for row in result.all()}

    async def select_joined(self, model: type[ModelT], join_model: type, onclause: Any,
                            *criteria: Any, order_by: Any = None) -> Sequence[ModelT]:
        """Rows of *model* reachable through *join_model* matching *criteria*."""
        stmt = select(model).join(join_model, onclause).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list {model.__name__}") from exc
        return list(result.scalars().unique().all())
