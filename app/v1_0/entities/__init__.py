from .customer_DTO import (
    CustomerDTO,
    CustomerAddressDTO,
    H1bDetailsDTO,
    MutationResultDTO,
    CustomerPageDTO,
)
from .page import PageDTO


__all__ = [
    "CustomerDTO", "CustomerAddressDTO", "H1bDetailsDTO",
    "MutationResultDTO", "CustomerPageDTO",
    "PageDTO",
]
