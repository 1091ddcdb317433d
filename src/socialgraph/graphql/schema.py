"""
Main GraphQL schema definition using Strawberry
"""

from functools import partial
from typing import Any

import strawberry
from fastapi import Request
from graphql import validate_schema as gql_validate_schema
from strawberry.extensions import QueryDepthLimiter
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.types import ExecutionResult

from ..config import settings
from ..logging import get_logger
from ..store import DataStore, SqlAlchemyStore
from .context import build_context
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)


def build_schema(max_depth: int | None = None) -> strawberry.Schema:
    """Build the schema with the query depth limit applied before execution."""
    depth = settings.graphql_max_depth if max_depth is None else max_depth
    return strawberry.Schema(
        query=Query,
        mutation=Mutation,
        extensions=[partial(QueryDepthLimiter, max_depth=depth)],
    )


schema = build_schema()


def validate_schema() -> None:
    """Fail fast at startup when the built schema is not a valid GraphQL schema."""
    graphql_schema = schema._schema
    errors = gql_validate_schema(graphql_schema)
    if errors:
        message = "; ".join(str(e) for e in errors)
        logger.error("GraphQL schema validation failed", errors=message)
        raise RuntimeError(f"GraphQL schema validation failed: {message}")

    logger.info("GraphQL schema validated", types=len(graphql_schema.type_map))


class SocialGraphRouter(GraphQLRouter[dict[str, Any], None]):
    """GraphQL router whose response omits ``data`` when nothing was executed."""

    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        response = await super().process_result(request, result)
        if result.errors and result.data is None:
            response.pop("data", None)
        return response


def create_graphql_router(
    store: DataStore | None = None,
    path: str | None = None,
) -> SocialGraphRouter:
    """Create a GraphQL router for FastAPI."""
    store = store or SqlAlchemyStore()

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return build_context(store, request)

    return SocialGraphRouter(
        schema,
        path=path or settings.graphql_path,
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
