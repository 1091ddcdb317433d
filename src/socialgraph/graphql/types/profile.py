"""
Profile GraphQL type definitions
"""

from uuid import UUID

import strawberry

from .member_type import MemberType, MemberTypeId


@strawberry.type
class Profile:
    """Profile type for GraphQL API."""

    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: str
    member_type_id: MemberTypeId
    member_type: MemberType | None = None
