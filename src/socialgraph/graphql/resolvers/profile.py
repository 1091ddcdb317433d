from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ...dbmodels import Profiles
from ...logging import get_logger
from ...store import ConstraintViolationError
from ..context import get_store
from ..types.member_type import MemberTypeId
from ..types.profile import Profile
from .member_type import convert_db_to_graphql_member_type

if TYPE_CHECKING:
    from ..mutations.root import ChangeProfileInput, CreateProfileInput

logger = get_logger(__name__)


def convert_db_to_graphql_profile(profile: Profiles, *, with_member_type: bool = False) -> Profile:
    """Convert a database Profiles model to GraphQL Profile type.

    ``with_member_type`` must only be set when the member type relationship
    was eagerly loaded.
    """
    return Profile(
        id=profile.id,
        is_male=profile.is_male,
        year_of_birth=profile.year_of_birth,
        user_id=str(profile.user_id),
        member_type_id=MemberTypeId(profile.member_type_id),
        member_type=(
            convert_db_to_graphql_member_type(profile.member_type)
            if with_member_type and profile.member_type is not None
            else None
        ),
    )


# Query resolvers
async def resolve_profiles(info: strawberry.Info) -> list[Profile]:
    profiles = await get_store(info).list_profiles()
    return [convert_db_to_graphql_profile(p) for p in profiles]


async def resolve_profile_by_id(info: strawberry.Info, id: UUID) -> Profile | None:
    profile = await get_store(info).get_profile(id)
    if profile is None:
        logger.info("Profile not found", profile_id=str(id))
        return None
    return convert_db_to_graphql_profile(profile)


# Mutation resolvers
async def create_profile(info: strawberry.Info, dto: CreateProfileInput) -> Profile:
    # userId is a plain string; one that is not a UUID cannot reference a user
    try:
        user_id = UUID(dto.user_id)
    except ValueError as e:
        raise ConstraintViolationError("Profile", f"unknown user id: {dto.user_id}") from e

    profile = await get_store(info).create_profile(
        is_male=dto.is_male,
        year_of_birth=dto.year_of_birth,
        user_id=user_id,
        member_type_id=dto.member_type_id.value,
    )
    return convert_db_to_graphql_profile(profile)


async def change_profile(info: strawberry.Info, id: UUID, dto: ChangeProfileInput) -> Profile:
    values: dict[str, Any] = {}
    if dto.is_male is not None:
        values["is_male"] = dto.is_male
    if dto.year_of_birth is not None:
        values["year_of_birth"] = dto.year_of_birth
    if dto.member_type_id is not None:
        values["member_type_id"] = dto.member_type_id.value

    profile = await get_store(info).update_profile(id, values)
    return convert_db_to_graphql_profile(profile)


async def delete_profile(info: strawberry.Info, id: UUID) -> bool:
    await get_store(info).delete_profile(id)
    return True
