"""
Input validators for signup, login and employee payloads.

Each validator either returns ``None`` or raises ``ValidationError``.
Multi-field validators collect every violation before raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

import email_validator
from email_validator import EmailNotValidError
from email_validator import validate_email as _check_email_syntax

from employee_api.core.exceptions import ValidationError

# Syntax check only: internal domains such as ``corp.local`` or
# ``staging.test`` are valid addresses for an employee registry.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()

GENDERS = ("Male", "Female", "Other")
MIN_PASSWORD_LENGTH = 6
MIN_SALARY = 1000

# Employee fields that are mandatory on create, in message order.
_REQUIRED_TEXT_FIELDS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "designation": "Designation",
    "date_of_joining": "Date of joining",
    "department": "Department",
}
_NON_NULLABLE_FIELDS = {**_REQUIRED_TEXT_FIELDS, "salary": "Salary"}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _messages_of(check, *args) -> list[str]:
    try:
        check(*args)
    except ValidationError as exc:
        return exc.messages
    return []


# ── Single-field validators ─────────────────────────────────────────
def validate_email(email: str | None) -> None:
    if _blank(email):
        raise ValidationError("Email is required")
    try:
        _check_email_syntax(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email format") from exc


def validate_password(password: str | None) -> None:
    if not password:
        raise ValidationError("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def validate_gender(gender: str | None) -> None:
    if gender is not None and gender not in GENDERS:
        raise ValidationError(f"Gender must be one of: {', '.join(GENDERS)}")


def validate_salary(salary: Any) -> None:
    numeric = isinstance(salary, (int, float)) and not isinstance(salary, bool)
    if not numeric or salary < MIN_SALARY:
        raise ValidationError(f"Salary must be a number and at least {MIN_SALARY}")


def parse_date(value: str | date | datetime) -> datetime:
    """Parse an ISO-8601 date or datetime (``Z`` suffix allowed) into aware UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError("Date of joining must be a valid date") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ── Payload validators ──────────────────────────────────────────────
def validate_employee_input(data: Mapping[str, Any], is_update: bool = False) -> None:
    """Validate an employee payload.

    ``data`` holds only the fields the caller actually sent.  On create
    every field except gender and photo is required.  On update only the
    present fields are checked, and an explicit ``None`` is rejected for
    fields the record cannot leave empty.
    """
    errors: list[str] = []

    if not is_update:
        for field, label in _REQUIRED_TEXT_FIELDS.items():
            if _blank(data.get(field)):
                errors.append(f"{label} is required")
            elif field == "email":
                errors.extend(_messages_of(validate_email, data["email"]))
            elif field == "date_of_joining":
                errors.extend(_messages_of(parse_date, data["date_of_joining"]))
        if data.get("salary") is None:
            errors.append("Salary is required")
        else:
            errors.extend(_messages_of(validate_salary, data["salary"]))
    else:
        for field, label in _NON_NULLABLE_FIELDS.items():
            if field in data and data[field] is None:
                errors.append(f"{label} cannot be null")
        if data.get("email") is not None:
            errors.extend(_messages_of(validate_email, data["email"]))
        if data.get("salary") is not None:
            errors.extend(_messages_of(validate_salary, data["salary"]))
        if data.get("date_of_joining") is not None:
            errors.extend(_messages_of(parse_date, data["date_of_joining"]))

    if data.get("gender") is not None:
        errors.extend(_messages_of(validate_gender, data["gender"]))

    if errors:
        raise ValidationError(errors)


def validate_signup_input(username: str | None, email: str | None, password: str | None) -> None:
    errors: list[str] = []
    if _blank(username):
        errors.append("Username is required")
    errors.extend(_messages_of(validate_email, email))
    errors.extend(_messages_of(validate_password, password))
    if errors:
        raise ValidationError(errors)


def validate_login_input(username_or_email: str | None, password: str | None) -> None:
    errors: list[str] = []
    if _blank(username_or_email):
        errors.append("Username or email is required")
    if _blank(password):
        errors.append("Password is required")
    if errors:
        raise ValidationError(errors)
