from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Type

from sqlalchemy import Date, DateTime, Enum as SAEnum, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import EmailVerification, H1bStatus, MaritalStatus, Sex


def _pg_enum(enum_cls: Type[Enum], name: str) -> SAEnum:
    # persist the display values ("Active"), not the member names ("ACTIVE")
    return SAEnum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])


class Customer(Base):
    __tablename__ = "h1bcustomer"

    # internal surrogate key, never exposed; email is the public identifier
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Identity / contact
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    login_email: Mapped[str | None] = mapped_column(String(320))
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    email_verification: Mapped[EmailVerification] = mapped_column(
        _pg_enum(EmailVerification, "email_verification_enum"),
        nullable=False,
        default=EmailVerification.PENDING,
    )

    # Personal
    dob: Mapped[date] = mapped_column(Date, nullable=False)
    sex: Mapped[Sex] = mapped_column(_pg_enum(Sex, "sex_enum"), nullable=False)
    marital_status: Mapped[MaritalStatus] = mapped_column(
        _pg_enum(MaritalStatus, "marital_status_enum"), nullable=False
    )
    emergency_contact_name: Mapped[str | None] = mapped_column(String(200))
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(30))
    employment_start_date: Mapped[date | None] = mapped_column(Date)

    # Address
    street_name: Mapped[str | None] = mapped_column(String(200))
    city: Mapped[str | None] = mapped_column(String(100))
    state: Mapped[str | None] = mapped_column(String(50))
    zip: Mapped[str | None] = mapped_column(String(20))
    address_start_date: Mapped[date | None] = mapped_column(Date)
    address_end_date: Mapped[date | None] = mapped_column(Date)

    # Employer / LCA
    client_name: Mapped[str | None] = mapped_column(String(200))
    client_street_name: Mapped[str | None] = mapped_column(String(200))
    client_city: Mapped[str | None] = mapped_column(String(100))
    client_state: Mapped[str | None] = mapped_column(String(50))
    client_zip: Mapped[str | None] = mapped_column(String(20))
    lca_title: Mapped[str | None] = mapped_column(String(200))
    lca_salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2, asdecimal=True))
    lca_code: Mapped[str | None] = mapped_column(String(50))
    receipt_number: Mapped[str | None] = mapped_column(String(50))
    h1b_start_date: Mapped[date | None] = mapped_column(Date)
    h1b_end_date: Mapped[date | None] = mapped_column(Date)
    h1b_status: Mapped[H1bStatus] = mapped_column(
        _pg_enum(H1bStatus, "h1b_status_enum"),
        nullable=False,
        default=H1bStatus.PENDING,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
