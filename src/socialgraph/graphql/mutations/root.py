"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.member_type import MemberTypeId
from ..types.post import Post
from ..types.profile import Profile
from ..types.user import User


# Input types for mutations
@strawberry.input
class CreateUserInput:
    """Input for creating a user."""

    name: str
    balance: float


@strawberry.input
class ChangeUserInput:
    """Input for changing a user. Omitted fields are left untouched."""

    name: str | None = None
    balance: float | None = None


@strawberry.input
class CreateProfileInput:
    """Input for creating a profile."""

    is_male: bool
    year_of_birth: int
    user_id: str
    member_type_id: MemberTypeId


@strawberry.input
class ChangeProfileInput:
    """Input for changing a profile. Omitted fields are left untouched."""

    is_male: bool | None = None
    year_of_birth: int | None = None
    member_type_id: MemberTypeId | None = None


@strawberry.input
class CreatePostInput:
    """Input for creating a post."""

    title: str
    content: str
    author_id: str


@strawberry.input
class ChangePostInput:
    """Input for changing a post. Omitted fields are left untouched."""

    title: str | None = None
    content: str | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # User mutations
    @strawberry.mutation(name="createUser")
    async def create_user(self, info: strawberry.Info, dto: CreateUserInput) -> User | None:
        """Create a new user."""
        from ..resolvers.user import create_user

        return await create_user(info, dto)

    @strawberry.mutation(name="changeUser")
    async def change_user(
        self, info: strawberry.Info, id: UUID, dto: ChangeUserInput
    ) -> User | None:
        """Change an existing user."""
        from ..resolvers.user import change_user

        return await change_user(info, id, dto)

    @strawberry.mutation(name="deleteUser")
    async def delete_user(self, info: strawberry.Info, id: UUID) -> bool | None:
        """Delete a user."""
        from ..resolvers.user import delete_user

        return await delete_user(info, id)

    # Profile mutations
    @strawberry.mutation(name="createProfile")
    async def create_profile(
        self, info: strawberry.Info, dto: CreateProfileInput
    ) -> Profile | None:
        """Create a profile for a user."""
        from ..resolvers.profile import create_profile

        return await create_profile(info, dto)

    @strawberry.mutation(name="changeProfile")
    async def change_profile(
        self, info: strawberry.Info, id: UUID, dto: ChangeProfileInput
    ) -> Profile | None:
        """Change an existing profile."""
        from ..resolvers.profile import change_profile

        return await change_profile(info, id, dto)

    @strawberry.mutation(name="deleteProfile")
    async def delete_profile(self, info: strawberry.Info, id: UUID) -> bool | None:
        """Delete a profile."""
        from ..resolvers.profile import delete_profile

        return await delete_profile(info, id)

    # Post mutations
    @strawberry.mutation(name="createPost")
    async def create_post(self, info: strawberry.Info, dto: CreatePostInput) -> Post | None:
        """Create a new post."""
        from ..resolvers.post import create_post

        return await create_post(info, dto)

    @strawberry.mutation(name="changePost")
    async def change_post(
        self, info: strawberry.Info, id: UUID, dto: ChangePostInput
    ) -> Post | None:
        """Change an existing post."""
        from ..resolvers.post import change_post

        return await change_post(info, id, dto)

    @strawberry.mutation(name="deletePost")
    async def delete_post(self, info: strawberry.Info, id: UUID) -> bool | None:
        """Delete a post."""
        from ..resolvers.post import delete_post

        return await delete_post(info, id)

    # Subscription mutations
    @strawberry.mutation(name="subscribeTo")
    async def subscribe_to(
        self, info: strawberry.Info, user_id: UUID, author_id: UUID
    ) -> User | None:
        """Subscribe a user to an author."""
        from ..resolvers.subscription import subscribe_to

        return await subscribe_to(info, user_id, author_id)

    @strawberry.mutation(name="unsubscribeFrom")
    async def unsubscribe_from(
        self, info: strawberry.Info, user_id: UUID, author_id: UUID
    ) -> bool | None:
        """Remove a user's subscription to an author."""
        from ..resolvers.subscription import unsubscribe_from

        return await unsubscribe_from(info, user_id, author_id)
