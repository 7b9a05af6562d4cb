from .db_connector import Database, get_database, get_db

__all__ = ["Database", "get_database", "get_db"]
