"""Tests for CustomerService: CRUD contract, merge semantics, error mapping."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from app.core.errors import ConflictError, NotFound, StoreError, ValidationError
from app.storage.database import Database
from app.v1_0.models import H1bStatus
from app.v1_0.schemas import AddressUpdate, CustomerCreate, CustomerUpdate, H1bUpdate


@pytest.fixture
def create_payload(customer_payload) -> CustomerCreate:
    return CustomerCreate.model_validate(customer_payload)


@pytest.mark.asyncio
async def test_create_then_get_returns_input(database, service, create_payload) -> None:
    async with database.session() as db:
        result = await service.create(create_payload, db)
    assert result.email == "a@b.com"
    assert result.rows_affected == 1

    async with database.session() as db:
        dto = await service.get("a@b.com", db)

    sent = create_payload.model_dump(exclude={"h1b_status", "email_verification"})
    for key, value in sent.items():
        assert getattr(dto, key) == value, key
    assert dto.h1b_status is H1bStatus.PENDING
    assert dto.lca_salary == Decimal("95000.00")


@pytest.mark.asyncio
async def test_default_status_comes_from_service_config(database, repository, create_payload) -> None:
    from app.v1_0.services import CustomerService

    service = CustomerService(repository, default_h1b_status="Active")
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        assert (await service.get("a@b.com", db)).h1b_status is H1bStatus.ACTIVE


@pytest.mark.asyncio
async def test_lookup_normalizes_email(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        assert (await service.get(" A@B.com ", db)).email == "a@b.com"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_and_persists_nothing(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)

    dup = create_payload.model_copy(update={"first_name": "Other"})
    async with database.session() as db:
        with pytest.raises(ConflictError):
            await service.create(dup, db)

    async with database.session() as db:
        rows = await service.list_all(db)
    assert len(rows) == 1
    assert rows[0].first_name == "A"


@pytest.mark.asyncio
async def test_get_unknown_email_is_not_found(database, service) -> None:
    async with database.session() as db:
        with pytest.raises(NotFound):
            await service.get("ghost@b.com", db)


@pytest.mark.asyncio
async def test_list_empty_store(database, service) -> None:
    async with database.session() as db:
        assert await service.list_all(db) == []
        assert await service.list_active(db) == []


@pytest.mark.asyncio
async def test_update_address_changes_only_city(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        before = await service.get("a@b.com", db)

    async with database.session() as db:
        view = await service.update_address("a@b.com", AddressUpdate(city="X"), db)
    assert view.city == "X"
    assert view.street_name == "1 Main St"
    assert view.first_name == "A"

    async with database.session() as db:
        after = await service.get("a@b.com", db)
    assert after.city == "X"
    for key in ("street_name", "state", "zip", "client_name", "lca_salary", "h1b_status", "phone"):
        assert getattr(after, key) == getattr(before, key), key


@pytest.mark.asyncio
async def test_update_address_unknown_email(database, service) -> None:
    async with database.session() as db:
        with pytest.raises(NotFound):
            await service.update_address("ghost@b.com", AddressUpdate(city="X"), db)


@pytest.mark.asyncio
async def test_empty_update_returns_current_view(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        view = await service.update_h1b("a@b.com", H1bUpdate(), db)
    assert view.lca_title == "Engineer"

    async with database.session() as db:
        result = await service.update_full("a@b.com", CustomerUpdate(), db)
    assert result.rows_affected == 0


@pytest.mark.asyncio
async def test_update_h1b_replaces_status_without_transition_check(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    for status in (H1bStatus.REVOKED, H1bStatus.PENDING, H1bStatus.EXPIRED):
        async with database.session() as db:
            view = await service.update_h1b("a@b.com", H1bUpdate(h1b_status=status), db)
        assert view.h1b_status is status


@pytest.mark.asyncio
async def test_merged_window_violation_rolls_back(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)

    # end date alone is valid in the payload but inverts the stored window
    async with database.session() as db:
        with pytest.raises(ValidationError) as exc:
            await service.update_h1b(
                "a@b.com",
                H1bUpdate(h1b_end_date=date(2020, 1, 1), lca_title="Manager"),
                db,
            )
    assert "h1b_end_date" in exc.value.fields

    async with database.session() as db:
        dto = await service.get("a@b.com", db)
    assert dto.h1b_end_date == date(2027, 2, 1)
    assert dto.lca_title == "Engineer"


@pytest.mark.asyncio
async def test_update_full_merges_and_clears(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    upd = CustomerUpdate.model_validate({"phone": "555-0111", "zip": None})
    async with database.session() as db:
        result = await service.update_full("A@B.COM", upd, db)
    assert result.email == "a@b.com"
    assert result.rows_affected == 1

    async with database.session() as db:
        dto = await service.get("a@b.com", db)
    assert dto.phone == "555-0111"
    assert dto.zip is None
    assert dto.city == "Springfield"


@pytest.mark.asyncio
async def test_concurrent_disjoint_h1b_updates_both_land(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)

    async def apply(upd: H1bUpdate):
        async with database.session() as db:
            return await service.update_h1b("a@b.com", upd, db)

    await asyncio.gather(
        apply(H1bUpdate(lca_title="Staff Engineer")),
        apply(H1bUpdate(client_city="Chicago", receipt_number="EAC0000000001")),
    )

    async with database.session() as db:
        dto = await service.get("a@b.com", db)
    assert dto.lca_title == "Staff Engineer"
    assert dto.client_city == "Chicago"
    assert dto.receipt_number == "EAC0000000001"


@pytest.mark.asyncio
async def test_soft_delete_keeps_row_but_leaves_active_list(database, service, create_payload) -> None:
    active = create_payload.model_copy(update={"h1b_status": H1bStatus.ACTIVE})
    async with database.session() as db:
        await service.create(active, db)
    async with database.session() as db:
        assert [c.email for c in await service.list_active(db)] == ["a@b.com"]

    async with database.session() as db:
        result = await service.soft_delete("a@b.com", db)
    assert result.rows_affected == 1

    async with database.session() as db:
        assert await service.list_active(db) == []
        dto = await service.get("a@b.com", db)
    assert dto.h1b_status is H1bStatus.INACTIVE

    # reversible through the status field
    async with database.session() as db:
        await service.update_h1b("a@b.com", H1bUpdate(h1b_status=H1bStatus.ACTIVE), db)
    async with database.session() as db:
        assert len(await service.list_active(db)) == 1


@pytest.mark.asyncio
async def test_soft_delete_twice_is_not_found(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        await service.soft_delete("a@b.com", db)
    async with database.session() as db:
        with pytest.raises(NotFound):
            await service.soft_delete("a@b.com", db)


@pytest.mark.asyncio
async def test_hard_delete_is_irrecoverable(database, service, create_payload) -> None:
    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        result = await service.hard_delete("a@b.com", db)
    assert result.rows_affected == 1

    async with database.session() as db:
        with pytest.raises(NotFound):
            await service.get("a@b.com", db)
    async with database.session() as db:
        with pytest.raises(NotFound):
            await service.hard_delete("a@b.com", db)


@pytest.mark.asyncio
async def test_pagination(database, service, create_payload) -> None:
    for i in range(3):
        payload = create_payload.model_copy(update={"email": f"p{i}@b.com"})
        async with database.session() as db:
            await service.create(payload, db)

    async with database.session() as db:
        first = await service.list_paginated(1, db)
        last = await service.list_paginated(2, db)
    assert [c.email for c in first.items] == ["p0@b.com", "p1@b.com"]
    assert (first.total, first.total_pages, first.has_next, first.has_prev) == (3, 2, True, False)
    assert [c.email for c in last.items] == ["p2@b.com"]
    assert (last.has_next, last.has_prev) == (False, True)


@pytest.mark.asyncio
async def test_store_failure_maps_to_store_error(tmp_path, service) -> None:
    # no schema created: every statement fails at the database
    broken = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        async with broken.session() as db:
            with pytest.raises(StoreError) as exc:
                await service.list_all(db)
        assert "no such table" not in exc.value.message
        async with broken.session() as db:
            with pytest.raises(StoreError):
                await service.hard_delete("a@b.com", db)
    finally:
        await broken.dispose()


@pytest.mark.asyncio
async def test_racing_create_hits_unique_index(monkeypatch, database, service, repository, create_payload) -> None:
    # both creates pass the existence check, so the unique index decides
    async def not_seen(email, session, for_update=False):
        return None

    monkeypatch.setattr(repository, "get_by_email", not_seen)

    async with database.session() as db:
        await service.create(create_payload, db)
    async with database.session() as db:
        with pytest.raises(ConflictError):
            await service.create(create_payload, db)

    async with database.session() as db:
        assert len(await service.list_all(db)) == 1


@pytest.mark.asyncio
async def test_create_from_personal_fields(database, service, customer_payload) -> None:
    from app.v1_0.schemas import CustomerPersonalCreate

    personal = CustomerPersonalCreate.model_validate(
        {k: customer_payload[k] for k in ("email", "first_name", "last_name", "dob", "sex", "marital_status", "phone")}
    )
    async with database.session() as db:
        result = await service.create(personal, db)
    assert result.rows_affected == 1

    async with database.session() as db:
        dto = await service.get("a@b.com", db)
    assert dto.h1b_status is H1bStatus.PENDING
    assert dto.street_name is None
