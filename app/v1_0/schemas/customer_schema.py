from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.v1_0.models.enums import EmailVerification, H1bStatus, MaritalStatus, Sex


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _check_window(start: Optional[date], end: Optional[date], start_name: str, end_name: str) -> None:
    if start is not None and end is not None and start > end:
        raise ValueError(f"{start_name} must be on or before {end_name}")


class AddressFields(BaseModel):
    street_name: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    zip: Optional[str] = Field(None, max_length=20)
    address_start_date: Optional[date] = None
    address_end_date: Optional[date] = None


class H1bFields(BaseModel):
    client_name: Optional[str] = Field(None, max_length=200)
    client_street_name: Optional[str] = Field(None, max_length=200)
    client_city: Optional[str] = Field(None, max_length=100)
    client_state: Optional[str] = Field(None, max_length=50)
    client_zip: Optional[str] = Field(None, max_length=20)
    lca_title: Optional[str] = Field(None, max_length=200)
    lca_salary: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    lca_code: Optional[str] = Field(None, max_length=50)
    receipt_number: Optional[str] = Field(None, max_length=50)
    h1b_start_date: Optional[date] = None
    h1b_end_date: Optional[date] = None


class CustomerPersonalCreate(BaseModel):
    """Personal and contact fields; enough to open a customer record."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    dob: date = Field(..., validation_alias=AliasChoices("dob", "date_of_birth"))
    sex: Sex
    marital_status: MaritalStatus
    phone: str = Field(..., min_length=1, max_length=30)
    emergency_contact_name: Optional[str] = Field(None, max_length=200)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    employment_start_date: Optional[date] = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return normalize_email(v)


class CustomerCreate(CustomerPersonalCreate, AddressFields, H1bFields):
    """Input schema to create a complete customer record."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "email": "a@b.com",
                "first_name": "A",
                "last_name": "B",
                "dob": "1990-01-01",
                "sex": "Male",
                "marital_status": "Single",
                "phone": "555-0100",
                "employment_start_date": "2024-01-01",
                "street_name": "1 Main St",
                "city": "Springfield",
                "state": "IL",
                "zip": "62701",
                "client_name": "Acme Corp",
                "lca_title": "Engineer",
                "lca_salary": 95000.00,
                "h1b_start_date": "2024-02-01",
                "h1b_end_date": "2027-02-01",
            }
        },
    )

    login_email: Optional[EmailStr] = None
    h1b_status: Optional[H1bStatus] = None
    email_verification: Optional[EmailVerification] = None

    @field_validator("login_email")
    @classmethod
    def _normalize_login_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else None

    @model_validator(mode="after")
    def _date_windows(self):
        _check_window(self.h1b_start_date, self.h1b_end_date, "h1b_start_date", "h1b_end_date")
        _check_window(self.address_start_date, self.address_end_date, "address_start_date", "address_end_date")
        return self


class _PartialUpdate(BaseModel):
    """
    Base for merge-updates. Only keys present in the request body are applied
    (`model_dump(exclude_unset=True)`); an explicit null clears an optional column.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class AddressUpdate(_PartialUpdate, AddressFields):
    """Partial update of the address sub-record."""

    @model_validator(mode="after")
    def _date_windows(self):
        _check_window(self.address_start_date, self.address_end_date, "address_start_date", "address_end_date")
        return self


class H1bUpdate(_PartialUpdate, H1bFields):
    """Partial update of employer / LCA / status fields."""
    h1b_status: Optional[H1bStatus] = None

    @field_validator("h1b_status")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @model_validator(mode="after")
    def _date_windows(self):
        _check_window(self.h1b_start_date, self.h1b_end_date, "h1b_start_date", "h1b_end_date")
        return self


class CustomerUpdate(_PartialUpdate, AddressFields, H1bFields):
    """Partial update across every mutable column. The email is not mutable."""
    login_email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    dob: Optional[date] = Field(None, validation_alias=AliasChoices("dob", "date_of_birth"))
    sex: Optional[Sex] = None
    marital_status: Optional[MaritalStatus] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    emergency_contact_name: Optional[str] = Field(None, max_length=200)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    employment_start_date: Optional[date] = None
    h1b_status: Optional[H1bStatus] = None
    email_verification: Optional[EmailVerification] = None

    @field_validator(
        "first_name", "last_name", "dob", "sex", "marital_status", "phone",
        "h1b_status", "email_verification",
    )
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("login_email")
    @classmethod
    def _normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else None

    @model_validator(mode="after")
    def _date_windows(self):
        _check_window(self.h1b_start_date, self.h1b_end_date, "h1b_start_date", "h1b_end_date")
        _check_window(self.address_start_date, self.address_end_date, "address_start_date", "address_end_date")
        return self
