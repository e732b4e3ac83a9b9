"""
Per-request GraphQL context: database session plus injected services.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from employee_api.core.security import TokenService
from employee_api.db.session import get_db
from employee_api.services.media import MediaStore


class GraphQLContext(BaseContext):
    def __init__(self, db: AsyncSession, tokens: TokenService, media: MediaStore) -> None:
        super().__init__()
        self.db = db
        self.tokens = tokens
        self.media = media


async def get_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> GraphQLContext:
    return GraphQLContext(
        db=db,
        tokens=request.app.state.tokens,
        media=request.app.state.media,
    )
