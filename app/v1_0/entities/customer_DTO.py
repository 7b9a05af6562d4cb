from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from app.v1_0.models.enums import EmailVerification, H1bStatus, MaritalStatus, Sex
from .page import PageDTO

@dataclass(slots=True)
class CustomerDTO:
    """Full customer record as returned by the read endpoints."""
    email: str
    login_email: Optional[str]
    first_name: str
    last_name: str
    dob: date
    sex: Sex
    marital_status: MaritalStatus
    phone: str
    email_verification: EmailVerification
    emergency_contact_name: Optional[str]
    emergency_contact_phone: Optional[str]
    employment_start_date: Optional[date]
    street_name: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    address_start_date: Optional[date]
    address_end_date: Optional[date]
    client_name: Optional[str]
    client_street_name: Optional[str]
    client_city: Optional[str]
    client_state: Optional[str]
    client_zip: Optional[str]
    lca_title: Optional[str]
    lca_salary: Optional[Decimal]
    lca_code: Optional[str]
    receipt_number: Optional[str]
    h1b_start_date: Optional[date]
    h1b_end_date: Optional[date]
    h1b_status: H1bStatus
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

@dataclass(slots=True)
class CustomerAddressDTO:
    """Address sub-view."""
    email: str
    first_name: str
    last_name: str
    street_name: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip: Optional[str]
    address_start_date: Optional[date]
    address_end_date: Optional[date]

@dataclass(slots=True)
class H1bDetailsDTO:
    """Employer / LCA / status sub-view."""
    email: str
    client_name: Optional[str]
    client_street_name: Optional[str]
    client_city: Optional[str]
    client_state: Optional[str]
    client_zip: Optional[str]
    lca_title: Optional[str]
    lca_salary: Optional[Decimal]
    lca_code: Optional[str]
    receipt_number: Optional[str]
    h1b_start_date: Optional[date]
    h1b_end_date: Optional[date]
    h1b_status: H1bStatus

@dataclass(slots=True)
class MutationResultDTO:
    message: str
    email: str
    rows_affected: int

CustomerPageDTO = PageDTO[CustomerDTO]
