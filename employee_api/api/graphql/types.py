"""
GraphQL object and input types.
"""

import dataclasses
from datetime import datetime, timezone
from typing import Any

import strawberry

from employee_api.models.employee import Employee
from employee_api.models.user import User


def iso_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. ``2024-01-31T09:00:00.000Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def present_fields(obj: Any) -> dict[str, Any]:
    """Fields the client actually sent (omitted ones are ``UNSET``)."""
    return {
        f.name: getattr(obj, f.name)
        for f in dataclasses.fields(obj)
        if getattr(obj, f.name) is not strawberry.UNSET
    }


# ── Output types ────────────────────────────────────────────────────
@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    email: str
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            email=user.email,
            created_at=iso_timestamp(user.created_at),
            updated_at=iso_timestamp(user.updated_at),
        )


@strawberry.type(name="Employee")
class EmployeeType:
    id: strawberry.ID
    first_name: str
    last_name: str
    email: str
    gender: str | None
    designation: str
    salary: float
    date_of_joining: str
    department: str
    employee_photo: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, employee: Employee) -> "EmployeeType":
        return cls(
            id=strawberry.ID(str(employee.id)),
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            gender=employee.gender,
            designation=employee.designation,
            salary=employee.salary,
            date_of_joining=iso_timestamp(employee.date_of_joining),
            department=employee.department,
            employee_photo=employee.employee_photo,
            created_at=iso_timestamp(employee.created_at),
            updated_at=iso_timestamp(employee.updated_at),
        )


@strawberry.type
class AuthPayload:
    token: str
    user: UserType


# ── Input types ─────────────────────────────────────────────────────
@strawberry.input
class EmployeeInput:
    first_name: str
    last_name: str
    email: str
    designation: str
    salary: float
    date_of_joining: str
    department: str
    gender: str | None = None
    employee_photo: str | None = None


@strawberry.input
class UpdateEmployeeInput:
    first_name: str | None = strawberry.UNSET
    last_name: str | None = strawberry.UNSET
    email: str | None = strawberry.UNSET
    gender: str | None = strawberry.UNSET
    designation: str | None = strawberry.UNSET
    salary: float | None = strawberry.UNSET
    date_of_joining: str | None = strawberry.UNSET
    department: str | None = strawberry.UNSET
    employee_photo: str | None = strawberry.UNSET
