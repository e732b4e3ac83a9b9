"""Pydantic schemas for employee writes.

Type checks only; business rules live in ``core.validation`` so every
violation can be reported together.  ``EmployeeUpdate`` relies on
``model_fields_set`` to tell an omitted field from an explicit ``None``.
"""

from __future__ import annotations

from pydantic import BaseModel


class EmployeeCreate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    gender: str | None = None
    designation: str | None = None
    salary: float | None = None
    date_of_joining: str | None = None
    department: str | None = None
    employee_photo: str | None = None


class EmployeeUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    gender: str | None = None
    designation: str | None = None
    salary: float | None = None
    date_of_joining: str | None = None
    department: str | None = None
    employee_photo: str | None = None
