from __future__ import annotations

import strawberry

from ...dbmodels import MemberTypes
from ..context import get_store
from ..types.member_type import MemberType, MemberTypeId


def convert_db_to_graphql_member_type(member_type: MemberTypes) -> MemberType:
    """Convert a database MemberTypes model to GraphQL MemberType type."""
    return MemberType(
        id=MemberTypeId(member_type.id),
        discount=member_type.discount,
        posts_limit_per_month=member_type.posts_limit_per_month,
    )


async def resolve_member_types(info: strawberry.Info) -> list[MemberType]:
    member_types = await get_store(info).list_member_types()
    return [convert_db_to_graphql_member_type(mt) for mt in member_types]


async def resolve_member_type_by_id(
    info: strawberry.Info, id: MemberTypeId
) -> MemberType | None:
    member_type = await get_store(info).get_member_type(id.value)
    if member_type is None:
        return None
    return convert_db_to_graphql_member_type(member_type)
