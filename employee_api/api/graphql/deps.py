"""
Auth guard for protected resolvers.
"""

from employee_api.api.graphql.context import GraphQLContext
from employee_api.core.exceptions import AuthError
from employee_api.core.security import extract_bearer_token
from employee_api.models.user import User
from employee_api.services.users import get_user


async def authenticate_user(context: GraphQLContext) -> User:
    """Resolve the caller from the ``Authorization`` header.

    Accepts ``Bearer <token>`` or the bare token.  Raises ``AuthError``
    when the header is missing, the token is invalid or expired, or the
    user it names no longer exists.
    """
    token = extract_bearer_token(context.request.headers.get("Authorization"))
    if token is None:
        raise AuthError("Authentication required. Please provide a token.")

    claims = context.tokens.verify_token(token)

    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise AuthError("User not found") from None

    user = await get_user(context.db, user_id)
    if user is None:
        raise AuthError("User not found")
    return user
