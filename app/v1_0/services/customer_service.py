from dataclasses import fields
from datetime import date
from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFound, ServiceError, StoreError, ValidationError
from app.core.logger import logger
from app.utils.tx import maybe_begin
from app.v1_0.entities import (
    CustomerAddressDTO,
    CustomerDTO,
    CustomerPageDTO,
    H1bDetailsDTO,
    MutationResultDTO,
)
from app.v1_0.models import Customer, EmailVerification, H1bStatus
from app.v1_0.repositories import CustomerRepository
from app.v1_0.schemas import (
    AddressUpdate,
    CustomerPersonalCreate,
    CustomerUpdate,
    H1bUpdate,
    normalize_email,
)

DTO = TypeVar("DTO")


def _to_dto(c: Customer, dto_cls: Type[DTO]) -> DTO:
    return dto_cls(**{f.name: getattr(c, f.name) for f in fields(dto_cls)})


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) == "23505":
        return True
    return "unique" in str(orig).lower()


def _check_windows(c: Customer) -> None:
    """Date-window invariants, checked against the merged row."""
    bad: list[str] = []
    if _inverted(c.h1b_start_date, c.h1b_end_date):
        bad += ["h1b_start_date", "h1b_end_date"]
    if _inverted(c.address_start_date, c.address_end_date):
        bad += ["address_start_date", "address_end_date"]
    if bad:
        raise ValidationError("Start date must be on or before end date.", fields=bad)


def _inverted(start: Optional[date], end: Optional[date]) -> bool:
    return start is not None and end is not None and start > end


class CustomerService:
    def __init__(
        self,
        customer_repository: CustomerRepository,
        default_h1b_status: str = H1bStatus.PENDING.value,
        page_size: int = 10,
    ) -> None:
        self.customer_repository = customer_repository
        self.default_h1b_status = H1bStatus(default_h1b_status)
        self.PAGE_SIZE = page_size

    async def _require(self, email: str, db: AsyncSession) -> Customer:
        """
        Ensure a customer exists or raise NotFound.

        Args:
            email: Normalized customer email.
            db: Active async database session.

        Returns:
            ORM customer entity if found.

        Raises:
            NotFound: If no record has this email.
        """
        c = await self.customer_repository.get_by_email(email, db)
        if not c:
            raise NotFound(f"Customer {email} not found.")
        return c

    async def create(self, payload: CustomerPersonalCreate, db: AsyncSession) -> MutationResultDTO:
        """
        Create a new customer record.

        Accepts the full CustomerCreate or the personal-only subset. Fields
        left out of the payload are stored as null; h1b_status and
        email_verification fall back to their defaults.

        Args:
            payload: Validated CustomerCreate or CustomerPersonalCreate data.
            db: Active async database session.

        Returns:
            MutationResultDTO with the email and rows_affected=1.

        Raises:
            ConflictError: if the email is already registered.
            StoreError: if persistence fails.
        """
        data = payload.model_dump()
        data["h1b_status"] = data.get("h1b_status") or self.default_h1b_status
        data["email_verification"] = data.get("email_verification") or EmailVerification.PENDING
        email = data["email"]
        logger.info("[CustomerService] Creating customer email=%s", email)

        try:
            async with maybe_begin(db):
                if await self.customer_repository.get_by_email(email, db) is not None:
                    raise ConflictError(f"Customer {email} already exists.")
                await self.customer_repository.create_customer(data, db)
        except ServiceError:
            raise
        except IntegrityError as e:
            if _is_unique_violation(e):
                logger.warning("[CustomerService] Duplicate email on insert: %s", email)
                raise ConflictError(f"Customer {email} already exists.")
            logger.error("[CustomerService] Create failed: %s", e, exc_info=True)
            raise StoreError("Failed to create customer")
        except Exception as e:
            logger.error("[CustomerService] Create failed: %s", e, exc_info=True)
            raise StoreError("Failed to create customer")

        logger.info("[CustomerService] Customer created email=%s", email)
        return MutationResultDTO(
            message="Customer created successfully",
            email=email,
            rows_affected=1,
        )

    async def get(self, email: str, db: AsyncSession) -> CustomerDTO:
        """
        Retrieve a single customer by email.

        Raises:
            NotFound: if no record matches.
            StoreError: if the query fails.
        """
        email = normalize_email(email)
        logger.debug(f"[CustomerService] Get customer email={email}")
        try:
            async with maybe_begin(db):
                c = await self._require(email, db)
            return _to_dto(c, CustomerDTO)
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"[CustomerService] Get failed email={email}: {e}", exc_info=True)
            raise StoreError("Failed to fetch customer")

    async def list_all(self, db: AsyncSession, *, active_only: bool = False) -> List[CustomerDTO]:
        """
        List customers, optionally only those whose h1b_status is Active.
        An empty table yields an empty list.
        """
        logger.debug("[CustomerService] List customers active_only=%s", active_only)
        status = H1bStatus.ACTIVE if active_only else None
        try:
            async with maybe_begin(db):
                rows = await self.customer_repository.list_customers(db, status=status)
            return [_to_dto(c, CustomerDTO) for c in rows]
        except Exception as e:
            logger.error(f"[CustomerService] List failed: {e}", exc_info=True)
            raise StoreError("Failed to list customers")

    async def list_active(self, db: AsyncSession) -> List[CustomerDTO]:
        return await self.list_all(db, active_only=True)

    async def list_paginated(self, page: int, db: AsyncSession) -> CustomerPageDTO:
        """
        List customers one page at a time (PAGE_SIZE per page, 1-based).
        """
        page_size = self.PAGE_SIZE
        offset = max(page - 1, 0) * page_size

        try:
            async with maybe_begin(db):
                items, total = await self.customer_repository.list_page(
                    offset=offset, limit=page_size, session=db
                )
        except Exception as e:
            logger.error(f"[CustomerService] List page failed: {e}", exc_info=True)
            raise StoreError("Failed to list customers")

        return CustomerPageDTO.build(
            [_to_dto(c, CustomerDTO) for c in items],
            page=page,
            page_size=page_size,
            total=total,
        )

    async def _merge_update(
        self,
        email: str,
        changes: dict[str, Any],
        db: AsyncSession,
        action: str,
    ) -> tuple[Customer, int]:
        """
        Apply a merge-update in one transaction: a single UPDATE writes only
        the supplied columns, then the merged row is re-read and checked.
        Any failure rolls the whole unit back.
        """
        logger.info("[CustomerService] %s email=%s fields=%s", action, email, sorted(changes))
        try:
            async with maybe_begin(db):
                rows = 0
                if changes:
                    rows = await self.customer_repository.update_fields_by_email(email, changes, db)
                    if rows == 0:
                        raise NotFound(f"Customer {email} not found.")
                c = await self._require(email, db)
                _check_windows(c)
            return c, rows
        except ServiceError:
            raise
        except Exception as e:
            logger.error(
                "[CustomerService] %s failed email=%s: %s",
                action,
                email,
                e,
                exc_info=True,
            )
            raise StoreError(f"Failed to {action.lower()}")

    async def update_full(
        self, email: str, payload: CustomerUpdate, db: AsyncSession
    ) -> MutationResultDTO:
        """
        Merge-update any mutable column. Fields absent from the payload keep
        their stored value.

        Raises:
            NotFound: if no record matches.
            ValidationError: if the merged record breaks a date window.
            StoreError: if persistence fails.
        """
        email = normalize_email(email)
        _, rows = await self._merge_update(email, payload.changes(), db, "Update customer")
        return MutationResultDTO(
            message="Customer updated successfully",
            email=email,
            rows_affected=rows,
        )

    async def update_address(
        self, email: str, payload: AddressUpdate, db: AsyncSession
    ) -> CustomerAddressDTO:
        email = normalize_email(email)
        c, _ = await self._merge_update(email, payload.changes(), db, "Update address")
        return _to_dto(c, CustomerAddressDTO)

    async def update_h1b(
        self, email: str, payload: H1bUpdate, db: AsyncSession
    ) -> H1bDetailsDTO:
        # h1b_status is replaced as given; transitions are not checked
        email = normalize_email(email)
        c, _ = await self._merge_update(email, payload.changes(), db, "Update H1B details")
        return _to_dto(c, H1bDetailsDTO)

    async def soft_delete(self, email: str, db: AsyncSession) -> MutationResultDTO:
        """
        Mark a customer Inactive without removing the row.

        Raises:
            NotFound: if no record matches or it is already inactive.
            StoreError: if persistence fails.
        """
        email = normalize_email(email)
        logger.warning("[CustomerService] Soft delete customer email=%s", email)
        try:
            async with maybe_begin(db):
                rows = await self.customer_repository.soft_delete(email, db)
                if rows == 0:
                    raise NotFound(f"Customer {email} not found or already inactive.")
        except ServiceError:
            raise
        except Exception as e:
            logger.error(
                "[CustomerService] Soft delete failed email=%s: %s",
                email,
                e,
                exc_info=True,
            )
            raise StoreError("Failed to deactivate customer")

        return MutationResultDTO(
            message="Customer soft deleted successfully",
            email=email,
            rows_affected=rows,
        )

    async def hard_delete(self, email: str, db: AsyncSession) -> MutationResultDTO:
        """
        Remove the row permanently.

        Raises:
            NotFound: if no row matched.
            StoreError: if persistence fails.
        """
        email = normalize_email(email)
        logger.warning("[CustomerService] Delete customer email=%s", email)
        try:
            async with maybe_begin(db):
                rows = await self.customer_repository.delete_by_email(email, db)
                if rows == 0:
                    raise NotFound(f"Customer {email} not found.")
        except ServiceError:
            raise
        except Exception as e:
            logger.error(
                "[CustomerService] Delete failed email=%s: %s",
                email,
                e,
                exc_info=True,
            )
            raise StoreError("Failed to delete customer")

        return MutationResultDTO(
            message="Customer deleted successfully",
            email=email,
            rows_affected=rows,
        )
