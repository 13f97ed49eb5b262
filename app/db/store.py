"""
Entity store over one AsyncSession.

Every query here is scoped to active rows (deleted_at IS NULL) unless the method
name says otherwise. Writes are not committed; the calling service commits once
at the end of its operation so multi-row changes land together.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession


def parse_id(value: Any) -> Optional[UUID]:
    """UUID for a well-formed id, None otherwise (malformed ids never match a row)."""
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        return None


def build_update_object(payload: Dict[str, Any], allowed_fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Keep only explicitly supplied (non-None) keys, optionally restricted to allowed_fields."""
    allowed = set(allowed_fields) if allowed_fields is not None else None
    return {
        key: value
        for key, value in payload.items()
        if value is not None and (allowed is None or key in allowed)
    }


class EntityStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _active(model: Type[Any], criteria: Iterable[Any], filters: Dict[str, Any]) -> List[Any]:
        clauses = [model.deleted_at.is_(None), *criteria]
        clauses.extend(getattr(model, key) == value for key, value in filters.items())
        return clauses

    async def find_active_by_id(self, model: Type[Any], entity_id: Any) -> Optional[Any]:
        pk = parse_id(entity_id)
        if pk is None:
            return None
        result = await self.session.execute(
            select(model)
            .where(model.id == pk, model.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, model: Type[Any], entity_id: Any) -> Optional[Any]:
        """Unfiltered lookup; soft-deleted rows are returned too."""
        pk = parse_id(entity_id)
        if pk is None:
            return None
        result = await self.session.execute(
            select(model).where(model.id == pk).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_one_active(self, model: Type[Any], *criteria: Any, **filters: Any) -> Optional[Any]:
        result = await self.session.execute(
            select(model).where(*self._active(model, criteria, filters)).limit(1)
        )
        return result.scalars().first()

    async def exists_active(self, model: Type[Any], *criteria: Any, **filters: Any) -> bool:
        result = await self.session.execute(
            select(model.id).where(*self._active(model, criteria, filters)).limit(1)
        )
        return result.first() is not None

    async def count_active(self, model: Type[Any], *criteria: Any, **filters: Any) -> int:
        result = await self.session.execute(
            select(func.count(model.id)).where(*self._active(model, criteria, filters))
        )
        return result.scalar() or 0

    async def list_active(
        self,
        model: Type[Any],
        *criteria: Any,
        order_by: Any = None,
        **filters: Any,
    ) -> List[Any]:
        stmt = select(model).where(*self._active(model, criteria, filters))
        stmt = stmt.order_by(order_by if order_by is not None else model.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, model: Type[Any], **values: Any) -> Any:
        obj = model(**values)
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def update_active_by_id(
        self,
        model: Type[Any],
        entity_id: Any,
        values: Dict[str, Any],
        *criteria: Any,
    ) -> Optional[Any]:
        """
        Single conditional UPDATE matched on id, deleted_at IS NULL and any extra criteria.
        Returns the fresh row, or None when no active row matched (missing or soft-deleted meanwhile).
        """
        pk = parse_id(entity_id)
        if pk is None:
            return None
        if not values:
            return await self.find_active_by_id(model, pk)
        result = await self.session.execute(
            update(model)
            .where(model.id == pk, model.deleted_at.is_(None), *criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.find_by_id(model, pk)

    async def soft_delete_by_id(self, model: Type[Any], entity_id: Any) -> Optional[Any]:
        return await self.update_active_by_id(model, entity_id, {"deleted_at": datetime.now(timezone.utc)})

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
