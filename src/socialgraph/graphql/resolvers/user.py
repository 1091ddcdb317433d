from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ...dbmodels import Users
from ..context import get_store
from ..types.user import User
from .post import convert_db_to_graphql_post
from .profile import convert_db_to_graphql_profile

if TYPE_CHECKING:
    from ..mutations.root import ChangeUserInput, CreateUserInput


def convert_db_to_graphql_user(user: Users, *, with_relations: bool = False) -> User:
    """Convert a database Users model to GraphQL User type.

    With ``with_relations`` the eagerly loaded posts and profile (including its
    member type) are converted as well; otherwise they stay null.
    """
    result = User(id=user.id, name=user.name, balance=user.balance)
    if with_relations:
        result.posts = [convert_db_to_graphql_post(p) for p in user.posts]
        result.profile = (
            convert_db_to_graphql_profile(user.profile, with_member_type=True)
            if user.profile is not None
            else None
        )
    return result


# Query resolvers
async def resolve_users(info: strawberry.Info) -> list[User]:
    users = await get_store(info).list_users()
    return [convert_db_to_graphql_user(u, with_relations=True) for u in users]


# Mutation resolvers
async def create_user(info: strawberry.Info, dto: CreateUserInput) -> User:
    user = await get_store(info).create_user(name=dto.name, balance=dto.balance)
    return convert_db_to_graphql_user(user)


async def change_user(info: strawberry.Info, id: UUID, dto: ChangeUserInput) -> User:
    values: dict[str, Any] = {}
    if dto.name is not None:
        values["name"] = dto.name
    if dto.balance is not None:
        values["balance"] = dto.balance

    user = await get_store(info).update_user(id, values)
    return convert_db_to_graphql_user(user)


async def delete_user(info: strawberry.Info, id: UUID) -> bool:
    await get_store(info).delete_user(id)
    return True
