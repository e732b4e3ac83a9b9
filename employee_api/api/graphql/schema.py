"""
GraphQL schema: queries, mutations and the FastAPI router.

Resolvers authenticate (where required), delegate to ``services`` and map
ORM rows to GraphQL types.  Errors propagate untouched; ``process_result``
turns them into ``extensions.code`` at the boundary.
"""

import logging
from typing import Annotated, Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.schema.config import StrawberryConfig
from strawberry.types import ExecutionContext, ExecutionResult, Info

from employee_api.api.graphql.context import GraphQLContext, get_context
from employee_api.api.graphql.deps import authenticate_user
from employee_api.api.graphql.types import (AuthPayload, EmployeeInput,
                                            EmployeeType,
                                            UpdateEmployeeInput, UserType,
                                            present_fields)
from employee_api.core.config import Settings
from employee_api.core.exceptions import (INTERNAL_ERROR_CODE,
                                          INTERNAL_ERROR_MESSAGE, AppError)
from employee_api.schemas.employee import EmployeeCreate, EmployeeUpdate
from employee_api.services import employees, users

logger = logging.getLogger(__name__)

ContextInfo = Info[GraphQLContext, None]


@strawberry.type
class Query:
    @strawberry.field
    async def login(
        self,
        info: ContextInfo,
        username_or_email: Annotated[str, strawberry.argument(name="usernameOrEmail")],
        password: str,
    ) -> AuthPayload | None:
        token, user = await users.login(
            info.context.db, info.context.tokens, username_or_email, password
        )
        return AuthPayload(token=token, user=UserType.from_model(user))

    @strawberry.field(name="getAllEmployees")
    async def get_all_employees(self, info: ContextInfo) -> list[EmployeeType]:
        await authenticate_user(info.context)
        rows = await employees.list_employees(info.context.db)
        return [EmployeeType.from_model(e) for e in rows]

    @strawberry.field(name="getEmployeeById")
    async def get_employee_by_id(
        self, info: ContextInfo, eid: strawberry.ID
    ) -> EmployeeType | None:
        await authenticate_user(info.context)
        employee = await employees.get_employee(info.context.db, eid)
        return EmployeeType.from_model(employee)

    @strawberry.field(name="searchEmployees")
    async def search_employees(
        self,
        info: ContextInfo,
        designation: str | None = None,
        department: str | None = None,
    ) -> list[EmployeeType]:
        await authenticate_user(info.context)
        rows = await employees.search_employees(info.context.db, designation, department)
        return [EmployeeType.from_model(e) for e in rows]


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def signup(
        self, info: ContextInfo, username: str, email: str, password: str
    ) -> AuthPayload | None:
        token, user = await users.signup(
            info.context.db, info.context.tokens, username, email, password
        )
        return AuthPayload(token=token, user=UserType.from_model(user))

    @strawberry.mutation(name="addEmployee")
    async def add_employee(self, info: ContextInfo, input: EmployeeInput) -> EmployeeType | None:
        await authenticate_user(info.context)
        employee = await employees.add_employee(
            info.context.db, info.context.media, EmployeeCreate(**present_fields(input))
        )
        return EmployeeType.from_model(employee)

    @strawberry.mutation(name="updateEmployee")
    async def update_employee(
        self, info: ContextInfo, eid: strawberry.ID, input: UpdateEmployeeInput
    ) -> EmployeeType | None:
        await authenticate_user(info.context)
        employee = await employees.update_employee(
            info.context.db,
            info.context.media,
            eid,
            EmployeeUpdate(**present_fields(input)),
        )
        return EmployeeType.from_model(employee)

    @strawberry.mutation(name="deleteEmployee")
    async def delete_employee(self, info: ContextInfo, eid: strawberry.ID) -> EmployeeType | None:
        await authenticate_user(info.context)
        employee = await employees.delete_employee(info.context.db, info.context.media, eid)
        return EmployeeType.from_model(employee)


# ── Error rendering ─────────────────────────────────────────────────
def format_error(error: GraphQLError) -> dict[str, Any]:
    """Render an error for the client, masking anything unexpected."""
    formatted: dict[str, Any] = dict(error.formatted)
    original = error.original_error
    if isinstance(original, AppError):
        formatted["message"] = original.message
        formatted["extensions"] = {**formatted.get("extensions", {}), **original.extensions}
    elif original is not None:
        formatted["message"] = INTERNAL_ERROR_MESSAGE
        formatted["extensions"] = {"code": INTERNAL_ERROR_CODE}
    return formatted


class EmployeeSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            if original is None or isinstance(original, AppError):
                logger.info("GraphQL request failed: %s", error.message)
            else:
                logger.error("Unhandled resolver error: %s", original, exc_info=original)


class EmployeeGraphQLRouter(GraphQLRouter):
    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        response: GraphQLHTTPResponse = {"data": result.data}
        if result.errors:
            response["errors"] = [format_error(err) for err in result.errors]
        return response


schema = EmployeeSchema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(auto_camel_case=False),
)


def build_graphql_router(settings: Settings) -> GraphQLRouter:
    return EmployeeGraphQLRouter(
        schema,
        path=settings.GRAPHQL_PATH,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.GRAPHIQL else None,
    )
