from typing import Any, Optional, Sequence, Tuple, Type, TypeVar, Generic, Protocol, runtime_checkable
from sqlalchemy import Select, delete, select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

# --- models must expose .id ---
@runtime_checkable
class HasId(Protocol):
    id: Any  # PK column

ModelT = TypeVar("ModelT", bound=HasId)

WhereExpr = ColumnElement[bool]


class BaseRepository(Generic[ModelT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def add(self, entity: ModelT, session: AsyncSession) -> ModelT:
        session.add(entity)
        await session.flush([entity])
        await session.refresh(entity)
        return entity

    async def get_one(
        self,
        session: AsyncSession,
        *where: WhereExpr,
        for_update: bool = False,
    ) -> Optional[ModelT]:
        stmt: Select = (
            select(self.model)
            .where(*where)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        res = await session.execute(stmt)
        return res.scalars().first()

    async def list_all(
        self,
        session: AsyncSession,
        *where: WhereExpr,
        order_by: Any | None = None,
    ) -> list[ModelT]:
        if order_by is None:
            order_by = self.model.id.asc()
        stmt: Select = select(self.model).where(*where).order_by(order_by)
        res = await session.execute(stmt)
        return list(res.scalars().all())

    async def list_paginated(
        self,
        session: AsyncSession,
        offset: int,
        limit: int,
        *where: WhereExpr,
        order_by: Any | None = None,
    ) -> Tuple[list[ModelT], int]:
        if order_by is None:
            order_by = self.model.id.asc()

        page_q: Select = select(self.model).where(*where).order_by(order_by).offset(offset).limit(limit)
        items = list((await session.execute(page_q)).scalars().all())
        total = int(await session.scalar(select(func.count(self.model.id)).where(*where)) or 0)
        return items, total

    async def update_where(
        self,
        data: dict[str, Any],
        session: AsyncSession,
        *where: WhereExpr,
        allow: set[str] | None = None,
    ) -> int:
        """
        Single UPDATE statement writing only the given columns.
        Returns the number of matched rows.
        """
        values = {k: v for k, v in data.items() if allow is None or k in allow}
        if not values:
            return 0
        stmt = (
            update(self.model)
            .where(*where)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        return int(res.rowcount or 0)

    async def delete_where(self, session: AsyncSession, *where: WhereExpr) -> int:
        stmt = delete(self.model).where(*where).execution_options(synchronize_session=False)
        res = await session.execute(stmt)
        return int(res.rowcount or 0)
