"""
Employee operations: list, fetch, search, add, update, delete.

Nothing is committed until the last step of a write, so a failure at any
stage (validation, uniqueness, media upload) leaves the table untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.core.exceptions import (ConflictError, NotFoundError,
                                          ValidationError)
from employee_api.core.validation import parse_date, validate_employee_input
from employee_api.models.employee import Employee
from employee_api.schemas.employee import EmployeeCreate, EmployeeUpdate
from employee_api.services.media import MediaStore

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "Employee with this email already exists"
_NOT_FOUND = "Employee not found"
_SEARCH_REQUIRED = (
    "Please provide at least one search parameter (designation or department)"
)
_TRIMMED_FIELDS = {"first_name", "last_name", "designation", "department"}


# ── Helpers ─────────────────────────────────────────────────────────
def _normalise(field: str, value: Any) -> Any:
    """Coerce an input value into its stored form."""
    if value is None:
        return None
    if field == "email":
        return value.strip().lower()
    if field == "date_of_joining":
        return parse_date(value)
    if field == "employee_photo":
        return value or None
    if field in _TRIMMED_FIELDS:
        return value.strip()
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")


async def _get_or_404(db: AsyncSession, eid: int | str) -> Employee:
    try:
        employee_id = int(eid)
    except (TypeError, ValueError):
        raise NotFoundError(_NOT_FOUND) from None

    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError(_NOT_FOUND)
    return employee


async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(Employee.id).where(Employee.email == email))
    return result.first() is not None


async def _commit_or_conflict(db: AsyncSession) -> None:
    """Commit; a UNIQUE violation means a concurrent write took the email."""
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(_DUPLICATE_EMAIL) from exc


async def _discard_photo(media: MediaStore, url: str) -> None:
    try:
        await media.delete(url)
    except Exception as exc:
        logger.warning("Could not delete photo %s: %s", url, exc)


# ── Reads ───────────────────────────────────────────────────────────
async def list_employees(db: AsyncSession) -> list[Employee]:
    """All employees, newest first."""
    result = await db.execute(
        select(Employee).order_by(Employee.created_at.desc(), Employee.id.desc())
    )
    return list(result.scalars().all())


async def get_employee(db: AsyncSession, eid: int | str) -> Employee:
    return await _get_or_404(db, eid)


async def search_employees(
    db: AsyncSession,
    designation: str | None = None,
    department: str | None = None,
) -> list[Employee]:
    """Case-insensitive substring match; both filters must hold when both are given."""
    query = select(Employee)
    searched = False
    for column, term in (
        (Employee.designation, designation),
        (Employee.department, department),
    ):
        if term and term.strip():
            query = query.where(column.ilike(f"%{_escape_like(term)}%", escape="\\"))
            searched = True

    if not searched:
        raise ValidationError(_SEARCH_REQUIRED)

    result = await db.execute(
        query.order_by(Employee.created_at.desc(), Employee.id.desc())
    )
    return list(result.scalars().all())


# ── Writes ──────────────────────────────────────────────────────────
async def add_employee(
    db: AsyncSession,
    media: MediaStore,
    body: EmployeeCreate,
) -> Employee:
    data = body.model_dump()
    validate_employee_input(data, is_update=False)

    email = _normalise("email", data["email"])
    if await _email_taken(db, email):
        raise ConflictError(_DUPLICATE_EMAIL)

    photo_url = None
    if data["employee_photo"]:
        photo_url = await media.upload(data["employee_photo"])

    employee = Employee(
        **{field: _normalise(field, value) for field, value in data.items()}
    )
    employee.employee_photo = photo_url
    db.add(employee)
    await _commit_or_conflict(db)
    await db.refresh(employee)

    logger.info("Created employee %d", employee.id)
    return employee


async def update_employee(
    db: AsyncSession,
    media: MediaStore,
    eid: int | str,
    changes: EmployeeUpdate,
) -> Employee:
    """Merge only the fields present in ``changes`` into the stored record.

    An omitted field is left untouched.  A field sent explicitly is
    written even when falsy; ``None`` clears gender and photo and is
    rejected for required fields.
    """
    employee = await _get_or_404(db, eid)

    data = changes.model_dump(exclude_unset=True)
    validate_employee_input(data, is_update=True)

    if data.get("email") is not None:
        data["email"] = _normalise("email", data["email"])
        if data["email"] != employee.email and await _email_taken(db, data["email"]):
            raise ConflictError(_DUPLICATE_EMAIL)

    if "employee_photo" in data:
        new_photo = data["employee_photo"]
        if employee.employee_photo and employee.employee_photo != new_photo:
            await _discard_photo(media, employee.employee_photo)
        if new_photo:
            data["employee_photo"] = await media.upload(new_photo)

    for field, value in data.items():
        setattr(employee, field, _normalise(field, value))
    employee.updated_at = datetime.now(timezone.utc)

    await _commit_or_conflict(db)
    await db.refresh(employee)

    logger.info("Updated employee %d (%s)", employee.id, ", ".join(sorted(data)))
    return employee


async def delete_employee(
    db: AsyncSession,
    media: MediaStore,
    eid: int | str,
) -> Employee:
    """Delete the record and its photo; returns the record as it was."""
    employee = await _get_or_404(db, eid)

    if employee.employee_photo:
        await _discard_photo(media, employee.employee_photo)

    await db.delete(employee)
    await db.commit()

    logger.info("Deleted employee %d", employee.id)
    return employee
