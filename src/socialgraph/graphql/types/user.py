"""
User GraphQL type definitions
"""

from uuid import UUID

import strawberry

from .post import Post
from .profile import Profile


@strawberry.type
class User:
    """User type for GraphQL API.

    Relation fields are filled by the resolver that produced the user and are
    null when its loading policy does not cover them.
    """

    id: UUID
    name: str
    balance: float
    profile: Profile | None = None
    posts: list[Post] | None = None
    following: list["User"] | None = strawberry.field(
        name="userSubscribedTo",
        default=None,
        description="Users this user subscribes to.",
    )
    followers: list["User"] | None = strawberry.field(
        name="subscribedToUser",
        default=None,
        description="Users subscribing to this user.",
    )
