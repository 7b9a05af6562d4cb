from app.core.errors import StoreError
from app.core.logger import logger
from app.storage.database import Database


class HealthService:
    """Liveness and database connectivity checks."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def health(self) -> dict:
        return {"status": "OK", "message": "API is running"}

    async def check_database(self) -> dict:
        """
        Run `SELECT 1` against the pool.

        Raises:
            StoreError: if the database cannot be reached.
        """
        try:
            await self.database.ping()
        except Exception as e:
            logger.error("[HealthService] Database probe failed: %s", e, exc_info=True)
            raise StoreError("Database connection failed")
        return {"status": "Database connected successfully"}
