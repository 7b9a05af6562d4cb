from .base import Base
from .customer import Customer
from .enums import EmailVerification, H1bStatus, MaritalStatus, Sex
__all__ = [
    "Base",
    "Customer",
    "EmailVerification",
    "H1bStatus",
    "MaritalStatus",
    "Sex",
]
