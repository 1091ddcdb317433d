"""
Subscription resolvers: two-hop relationship expansion and edge mutations
"""

from __future__ import annotations

import asyncio
from uuid import UUID

import strawberry

from ...dbmodels import Users
from ...logging import get_logger
from ...store import DataStore
from ..context import get_store
from ..types.user import User
from .user import convert_db_to_graphql_user

logger = get_logger(__name__)


async def _expand_one_hop(store: DataStore, user: Users) -> User:
    """Convert ``user`` and attach its own following and followers."""
    following, followers = await asyncio.gather(
        store.list_following(user.id),
        store.list_followers(user.id),
    )
    result = convert_db_to_graphql_user(user)
    result.following = [convert_db_to_graphql_user(u) for u in following]
    result.followers = [convert_db_to_graphql_user(u) for u in followers]
    return result


async def expand_user_subscriptions(store: DataStore, user_id: UUID) -> User | None:
    """
    Resolve a user together with its subscriptions two hops deep.

    The root carries posts, profile, ``following`` and ``followers``; every
    user in those two lists carries its own one-hop ``following`` and
    ``followers`` and nothing deeper. Neighbours are fetched one by one, so a
    root with F followings and W followers costs 3 + 2F + 2W store calls.
    Any failing lookup aborts the whole expansion.
    """
    root = await store.get_user(user_id)
    if root is None:
        logger.info("User not found", user_id=str(user_id))
        return None

    following, followers = await asyncio.gather(
        store.list_following(user_id),
        store.list_followers(user_id),
    )

    # gather keeps argument order, so results stay aligned with their neighbour
    expanded_following, expanded_followers = await asyncio.gather(
        asyncio.gather(*(_expand_one_hop(store, u) for u in following)),
        asyncio.gather(*(_expand_one_hop(store, u) for u in followers)),
    )

    result = convert_db_to_graphql_user(root, with_relations=True)
    result.following = list(expanded_following)
    result.followers = list(expanded_followers)

    logger.debug(
        "Expanded user subscriptions",
        user_id=str(user_id),
        following=len(result.following),
        followers=len(result.followers),
    )
    return result


# Query resolvers
async def resolve_user_by_id(info: strawberry.Info, id: UUID) -> User | None:
    return await expand_user_subscriptions(get_store(info), id)


# Mutation resolvers
async def subscribe_to(info: strawberry.Info, user_id: UUID, author_id: UUID) -> User:
    user = await get_store(info).subscribe(user_id, author_id)
    return convert_db_to_graphql_user(user)


async def unsubscribe_from(info: strawberry.Info, user_id: UUID, author_id: UUID) -> bool:
    await get_store(info).unsubscribe(user_id, author_id)
    return True
