"""Service-level tests for update-merge semantics and email uniqueness."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import EMPLOYEE, FakeMediaStore
from employee_api.core.exceptions import ConflictError, ValidationError
from employee_api.models.employee import Employee
from employee_api.schemas.employee import EmployeeCreate, EmployeeUpdate
from employee_api.services import employees

_COLUMNS = [c.name for c in Employee.__table__.columns]


def _snapshot(employee: Employee) -> dict:
    return {name: getattr(employee, name) for name in _COLUMNS}


@pytest.mark.asyncio
async def test_update_changes_only_present_fields(db_session: AsyncSession, media: FakeMediaStore):
    employee = await employees.add_employee(db_session, media, EmployeeCreate(**EMPLOYEE))
    before = _snapshot(employee)

    updated = await employees.update_employee(
        db_session, media, employee.id, EmployeeUpdate(salary=5000)
    )
    after = _snapshot(updated)

    changed = {name for name in _COLUMNS if before[name] != after[name]}
    assert changed == {"salary", "updated_at"}
    assert after["salary"] == 5000
    assert after["updated_at"] > before["updated_at"]


@pytest.mark.asyncio
async def test_empty_update_still_refreshes_updated_at(db_session: AsyncSession, media: FakeMediaStore):
    employee = await employees.add_employee(db_session, media, EmployeeCreate(**EMPLOYEE))
    before = employee.updated_at

    updated = await employees.update_employee(db_session, media, employee.id, EmployeeUpdate())
    assert updated.updated_at > before


@pytest.mark.asyncio
async def test_null_is_explicit_missing_is_absent(db_session: AsyncSession, media: FakeMediaStore):
    employee = await employees.add_employee(db_session, media, EmployeeCreate(**EMPLOYEE))

    # Omitted gender: untouched
    await employees.update_employee(db_session, media, employee.id, EmployeeUpdate(designation="CTO"))
    assert employee.gender == "Female"

    # Explicit None: cleared
    await employees.update_employee(db_session, media, employee.id, EmployeeUpdate(gender=None))
    assert employee.gender is None
    assert employee.designation == "CTO"


@pytest.mark.asyncio
async def test_clearing_photo_deletes_it(db_session: AsyncSession, media: FakeMediaStore):
    employee = await employees.add_employee(
        db_session, media, EmployeeCreate(**EMPLOYEE, employee_photo="data:image/png;base64,AAAA")
    )
    old_url = employee.employee_photo

    await employees.update_employee(db_session, media, employee.id, EmployeeUpdate(employee_photo=None))

    assert employee.employee_photo is None
    assert media.deleted == [old_url]


@pytest.mark.asyncio
async def test_failed_validation_leaves_record_untouched(db_session: AsyncSession, media: FakeMediaStore):
    employee = await employees.add_employee(db_session, media, EmployeeCreate(**EMPLOYEE))
    before = _snapshot(employee)

    with pytest.raises(ValidationError):
        await employees.update_employee(
            db_session, media, employee.id, EmployeeUpdate(first_name="Grace", salary=10)
        )

    await db_session.refresh(employee)
    assert _snapshot(employee) == before


@pytest.mark.asyncio
async def test_same_email_race_exactly_one_succeeds(
    app: FastAPI, media: FakeMediaStore, monkeypatch: pytest.MonkeyPatch
):
    """Both writers pass the pre-check; the UNIQUE constraint lets only one in."""
    monkeypatch.setattr(employees, "_email_taken", AsyncMock(return_value=False))
    factory = app.state.session_factory

    async with factory() as first:
        await employees.add_employee(first, media, EmployeeCreate(**EMPLOYEE))

    async with factory() as second:
        with pytest.raises(ConflictError, match="already exists"):
            await employees.add_employee(second, media, EmployeeCreate(**EMPLOYEE))

    async with factory() as check:
        rows = (await check.execute(select(Employee))).scalars().all()
    assert len(rows) == 1
