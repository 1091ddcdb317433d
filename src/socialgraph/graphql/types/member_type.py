"""
Member type GraphQL type definitions
"""

from enum import Enum
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .profile import Profile


@strawberry.enum
class MemberTypeId(Enum):
    """Membership tier identifier."""

    basic = "basic"
    business = "business"


@strawberry.type
class MemberType:
    """Member type for GraphQL API.

    ``profiles`` is part of the schema but no query loads it, so it resolves to null.
    """

    id: MemberTypeId
    discount: float
    posts_limit_per_month: int
    profiles: list[Annotated["Profile", strawberry.lazy(".profile")]] | None = None
