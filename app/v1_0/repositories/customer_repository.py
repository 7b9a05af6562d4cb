from typing import Any, Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from app.v1_0.models import Customer, H1bStatus
from .base_repository import BaseRepository

# Columns a merge-update may touch. `email` is the identifier and stays fixed.
MUTABLE_FIELDS = frozenset(
    c.name
    for c in Customer.__table__.columns
    if c.name not in {"id", "email", "created_at", "updated_at"}
)


class CustomerRepository(BaseRepository[Customer]):
    def __init__(self):
        super().__init__(Customer)

    async def create_customer(self, data: dict[str, Any], session: AsyncSession) -> Customer:
        c = Customer(**data)
        await self.add(c, session)
        return c

    async def get_by_email(
        self, email: str, session: AsyncSession, *, for_update: bool = False
    ) -> Optional[Customer]:
        return await self.get_one(session, Customer.email == email, for_update=for_update)

    async def list_customers(
        self, session: AsyncSession, *, status: Optional[H1bStatus] = None
    ) -> List[Customer]:
        where = [Customer.h1b_status == status] if status is not None else []
        return await self.list_all(session, *where)

    async def list_page(
        self, offset: int, limit: int, session: AsyncSession
    ) -> Tuple[List[Customer], int]:
        return await self.list_paginated(session, offset, limit)

    async def update_fields_by_email(
        self, email: str, data: dict[str, Any], session: AsyncSession
    ) -> int:
        return await self.update_where(
            data, session, Customer.email == email, allow=set(MUTABLE_FIELDS)
        )

    async def soft_delete(self, email: str, session: AsyncSession) -> int:
        """
        Flip h1b_status to Inactive. Rows that are already inactive do not
        match, so a second soft delete reports zero rows.
        """
        return await self.update_where(
            {"h1b_status": H1bStatus.INACTIVE},
            session,
            Customer.email == email,
            Customer.h1b_status != H1bStatus.INACTIVE,
        )

    async def delete_by_email(self, email: str, session: AsyncSession) -> int:
        return await self.delete_where(session, Customer.email == email)
