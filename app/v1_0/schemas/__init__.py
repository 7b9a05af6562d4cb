from .customer_schema import (
    CustomerCreate,
    CustomerPersonalCreate,
    CustomerUpdate,
    AddressUpdate,
    H1bUpdate,
    normalize_email,
)

__all__ = [
    "CustomerCreate",
    "CustomerPersonalCreate",
    "CustomerUpdate",
    "AddressUpdate",
    "H1bUpdate",
    "normalize_email",
]
