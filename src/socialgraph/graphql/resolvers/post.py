from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ...dbmodels import Posts
from ...logging import get_logger
from ..context import get_store
from ..types.post import Post

if TYPE_CHECKING:
    from ..mutations.root import ChangePostInput, CreatePostInput

logger = get_logger(__name__)


def convert_db_to_graphql_post(post: Posts) -> Post:
    """Convert a database Posts model to GraphQL Post type."""
    return Post(
        id=post.id,
        title=post.title,
        content=post.content,
        author_id=post.author_id,
    )


# Query resolvers
async def resolve_posts(info: strawberry.Info) -> list[Post]:
    posts = await get_store(info).list_posts()
    return [convert_db_to_graphql_post(p) for p in posts]


async def resolve_post_by_id(info: strawberry.Info, id: UUID) -> Post | None:
    post = await get_store(info).get_post(id)
    if post is None:
        logger.info("Post not found", post_id=str(id))
        return None
    return convert_db_to_graphql_post(post)


# Mutation resolvers
async def create_post(info: strawberry.Info, dto: CreatePostInput) -> Post:
    post = await get_store(info).create_post(
        title=dto.title, content=dto.content, author_id=dto.author_id
    )
    return convert_db_to_graphql_post(post)


async def change_post(info: strawberry.Info, id: UUID, dto: ChangePostInput) -> Post:
    values: dict[str, Any] = {}
    if dto.title is not None:
        values["title"] = dto.title
    if dto.content is not None:
        values["content"] = dto.content

    post = await get_store(info).update_post(id, values)
    return convert_db_to_graphql_post(post)


async def delete_post(info: strawberry.Info, id: UUID) -> bool:
    await get_store(info).delete_post(id)
    return True
