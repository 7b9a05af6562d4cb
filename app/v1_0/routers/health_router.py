from fastapi import APIRouter, Depends
from dependency_injector.wiring import inject, Provide

from app.app_containers import ApplicationContainer
from app.core.logger import logger
from app.v1_0.services import HealthService

router = APIRouter(tags=["Health"])

@router.get("/health", summary="Liveness check")
@inject
async def health(
    service: HealthService = Depends(
        Provide[ApplicationContainer.api_container.health_service]
    ),
) -> dict:
    return service.health()

@router.get("/test", summary="Database connectivity probe")
@router.get("/hello", include_in_schema=False)
@inject
async def test_connection(
    service: HealthService = Depends(
        Provide[ApplicationContainer.api_container.health_service]
    ),
) -> dict:
    logger.debug("[HealthRouter] database probe")
    return await service.check_database()
