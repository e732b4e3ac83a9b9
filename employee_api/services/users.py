"""
Account operations: signup and login.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.core.exceptions import AuthError, ConflictError
from employee_api.core.security import (TokenService, get_password_hash,
                                        verify_password)
from employee_api.core.validation import (validate_login_input,
                                          validate_signup_input)
from employee_api.models.user import User

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid username/email or password"


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def signup(
    db: AsyncSession,
    tokens: TokenService,
    username: str,
    email: str,
    password: str,
) -> tuple[str, User]:
    """Create an account and return ``(token, user)``."""
    validate_signup_input(username, email, password)
    username = username.strip()
    email = email.strip().lower()

    result = await db.execute(
        select(User).where(or_(User.username == username, User.email == email))
    )
    existing = list(result.scalars().all())
    if any(u.username == username for u in existing):
        raise ConflictError("Username already exists")
    if existing:
        raise ConflictError("Email already exists")

    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same username/email
        await db.rollback()
        raise ConflictError("Username or email already exists") from exc
    await db.refresh(user)

    logger.info("Registered user %d (%s)", user.id, user.username)
    return tokens.generate_token(user), user


async def login(
    db: AsyncSession,
    tokens: TokenService,
    username_or_email: str,
    password: str,
) -> tuple[str, User]:
    validate_login_input(username_or_email, password)
    identifier = username_or_email.strip()

    result = await db.execute(
        select(User).where(
            or_(User.username == identifier, User.email == identifier.lower())
        )
    )
    user = result.scalars().first()

    if user is None or not verify_password(password, user.hashed_password):
        raise AuthError(_BAD_CREDENTIALS)

    logger.info("User %d logged in", user.id)
    return tokens.generate_token(user), user
