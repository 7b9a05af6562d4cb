from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from dependency_injector.wiring import inject, Provide

from app.core.errors import ServiceError, StoreError
from app.storage.database import get_db
from app.app_containers import ApplicationContainer
from app.core.logger import logger

from app.v1_0.schemas import (
    AddressUpdate,
    CustomerCreate,
    CustomerPersonalCreate,
    CustomerUpdate,
    H1bUpdate,
)
from app.v1_0.entities import (
    CustomerAddressDTO,
    CustomerDTO,
    CustomerPageDTO,
    H1bDetailsDTO,
    MutationResultDTO,
)
from app.v1_0.services import CustomerService

router = APIRouter(tags=["Customers"])

@router.post(
    "/customers",
    response_model=MutationResultDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new customer",
)
@router.post(
    "/create_h1bcustomer",
    response_model=MutationResultDTO,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@inject
async def create_customer(
    request: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> MutationResultDTO:
    logger.info("[CustomerRouter] create email=%s", request.email)
    try:
        return await service.create(payload=request, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] create error: %s", e, exc_info=True)
        raise StoreError("Failed to create customer")

@router.post(
    "/customer/personal",
    response_model=MutationResultDTO,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@inject
async def create_customer_personal(
    request: CustomerPersonalCreate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> MutationResultDTO:
    logger.info("[CustomerRouter] create_personal email=%s", request.email)
    try:
        return await service.create(payload=request, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] create_personal error: %s", e, exc_info=True)
        raise StoreError("Failed to create customer")

@router.get(
    "/customers",
    response_model=List[CustomerDTO],
    summary="List all customers",
)
@inject
async def list_customers(
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
):
    logger.debug("[CustomerRouter] list_all")
    try:
        return await service.list_all(db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"[CustomerRouter] list_all error: {e}", exc_info=True)
        raise StoreError("Failed to list customers")

@router.get(
    "/customers/active",
    response_model=List[CustomerDTO],
    summary="List customers whose H1B status is Active",
)
@inject
async def list_active_customers(
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
):
    logger.debug("[CustomerRouter] list_active")
    try:
        return await service.list_active(db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"[CustomerRouter] list_active error: {e}", exc_info=True)
        raise StoreError("Failed to list customers")

@router.get(
    "/customers/page",
    response_model=CustomerPageDTO,
    summary="List customers paginated",
)
@inject
async def list_customers_paginated(
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
):
    logger.debug(f"[CustomerRouter] list_paginated page={page}")
    try:
        return await service.list_paginated(page, db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"[CustomerRouter] list_paginated error: {e}", exc_info=True)
        raise StoreError("Failed to list customers")

@router.get(
    "/customers/{email}",
    response_model=CustomerDTO,
    summary="Get customer by email",
)
@inject
async def get_customer(
    email: str,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
):
    logger.debug(f"[CustomerRouter] get email={email}")
    try:
        return await service.get(email, db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"[CustomerRouter] get error: {e}", exc_info=True)
        raise StoreError("Failed to fetch customer")

@router.put(
    "/customers/{email}",
    response_model=MutationResultDTO,
    summary="Update customer (only supplied fields change)",
)
@inject
async def update_customer(
    email: str,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> MutationResultDTO:
    logger.info(
        "[CustomerRouter] update email=%s fields=%s",
        email,
        sorted(data.changes()),
    )
    try:
        return await service.update_full(email=email, payload=data, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] update error: %s", e, exc_info=True)
        raise StoreError("Failed to update customer")

@router.put(
    "/customers/{email}/address",
    response_model=CustomerAddressDTO,
    summary="Update customer address",
)
@router.post(
    "/customers/{email}/address",
    response_model=CustomerAddressDTO,
    include_in_schema=False,
)
@router.post(
    "/customer/{email}/address",
    response_model=CustomerAddressDTO,
    include_in_schema=False,
)
@inject
async def update_customer_address(
    email: str,
    data: AddressUpdate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> CustomerAddressDTO:
    logger.info(
        "[CustomerRouter] update_address email=%s fields=%s",
        email,
        sorted(data.changes()),
    )
    try:
        return await service.update_address(email=email, payload=data, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] update_address error: %s", e, exc_info=True)
        raise StoreError("Failed to update address")

@router.put(
    "/customers/{email}/h1b",
    response_model=H1bDetailsDTO,
    summary="Update employer, LCA and H1B status details",
)
@router.post(
    "/customers/{email}/h1b",
    response_model=H1bDetailsDTO,
    include_in_schema=False,
)
@router.post(
    "/customer/{email}/h1b",
    response_model=H1bDetailsDTO,
    include_in_schema=False,
)
@inject
async def update_customer_h1b(
    email: str,
    data: H1bUpdate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> H1bDetailsDTO:
    logger.info(
        "[CustomerRouter] update_h1b email=%s fields=%s",
        email,
        sorted(data.changes()),
    )
    try:
        return await service.update_h1b(email=email, payload=data, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] update_h1b error: %s", e, exc_info=True)
        raise StoreError("Failed to update H1B details")

@router.patch(
    "/customers/{email}/deactivate",
    response_model=MutationResultDTO,
    summary="Soft delete: mark the customer Inactive",
)
@inject
async def deactivate_customer(
    email: str,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> MutationResultDTO:
    logger.warning("[CustomerRouter] deactivate email=%s", email)
    try:
        return await service.soft_delete(email=email, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] deactivate error: %s", e, exc_info=True)
        raise StoreError("Failed to deactivate customer")

@router.delete(
    "/customers/{email}",
    response_model=MutationResultDTO,
    summary="Hard delete: remove the customer permanently",
)
@inject
async def delete_customer(
    email: str,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(
        Provide[ApplicationContainer.api_container.customer_service]
    ),
) -> MutationResultDTO:
    logger.warning("[CustomerRouter] delete email=%s", email)
    try:
        return await service.hard_delete(email=email, db=db)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("[CustomerRouter] delete error: %s", e, exc_info=True)
        raise StoreError("Failed to delete customer")
