"""
Employee model: the records managed through the API.

Email uniqueness is enforced by the table itself; the resolvers also
pre-check it so callers get a friendly message in the common case.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String

from employee_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    first_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    last_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    gender: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    # Male | Female | Other
    designation: str = Column(String(100), nullable=False, index=True)  # type: ignore[assignment]
    salary: float = Column(Float, nullable=False)  # type: ignore[assignment]
    date_of_joining: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    department: str = Column(String(100), nullable=False, index=True)  # type: ignore[assignment]
    employee_photo: str | None = Column(String(1024), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        index=True,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
