from .customer_service import CustomerService
from .health_service import HealthService

__all__ = [
    "CustomerService",
    "HealthService",
]
