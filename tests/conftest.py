"""
Pytest configuration and fixtures.

Settings are read from the environment when `app.core.settings` is first
imported, so the test connection values are set before any app import.
The PostgreSQL database is replaced by a throwaway SQLite file per test.
"""

import os

os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_USER", "h1b_test")
os.environ.setdefault("DB_PASSWORD", "h1b_test_password")
os.environ.setdefault("DB_NAME", "h1b_test")

import pytest
import pytest_asyncio
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.storage.database import Database
from app.v1_0.repositories import CustomerRepository
from app.v1_0.services import CustomerService


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite-backed Database with the customer table created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'h1b.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def repository() -> CustomerRepository:
    return CustomerRepository()


@pytest.fixture
def service(repository) -> CustomerService:
    return CustomerService(repository, default_h1b_status="Pending", page_size=2)


@pytest_asyncio.fixture
async def client(database):
    """HTTP client against the app, wired to the test database."""
    container = app.state.container
    container.database.override(providers.Object(database))
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        container.database.reset_override()


@pytest.fixture
def customer_payload() -> dict:
    """The full create payload used across the suite."""
    return {
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
        "client_street_name": "2 Oak Ave",
        "client_city": "Springfield",
        "client_state": "IL",
        "client_zip": "62701",
        "lca_title": "Engineer",
        "lca_salary": 95000.00,
        "lca_code": "I-200-12345",
        "receipt_number": "EAC1234567890",
        "h1b_start_date": "2024-02-01",
        "h1b_end_date": "2027-02-01",
    }
