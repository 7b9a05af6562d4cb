from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logger import logger


@asynccontextmanager
async def maybe_begin(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run the block as one unit of work on `session`.

    An already open transaction is joined and left to its owner. Otherwise a
    new one is started; it commits when the block exits cleanly and is rolled
    back if anything inside raises.
    """
    if session.in_transaction():
        yield session
        return

    async with session.begin():
        try:
            yield session
        except Exception as e:
            logger.debug("[tx] rollback after %s", type(e).__name__)
            raise
