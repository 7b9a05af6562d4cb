from .base_repository import BaseRepository
from .customer_repository import CustomerRepository, MUTABLE_FIELDS
__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "MUTABLE_FIELDS",
]
