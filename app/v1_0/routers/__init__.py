from .customer_router import router as customer_router
from .health_router import router as health_router
defined_routers = [
    health_router,
    customer_router,
]

__all__ = ["defined_routers", "customer_router", "health_router"]
