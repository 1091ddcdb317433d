"""Data access interface shared by resolvers and store implementations."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from ..dbmodels import MemberTypes, Posts, Profiles, Users


class StoreError(Exception):
    """Base exception for data store operations."""

    pass


class RecordNotFoundError(StoreError):
    """The addressed record does not exist."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConstraintViolationError(StoreError):
    """A uniqueness or foreign key constraint rejected the write."""

    def __init__(self, entity: str, detail: str):
        self.entity = entity
        self.detail = detail
        super().__init__(f"{entity} constraint violated: {detail}")


class DataStore(ABC):
    """Abstract record store for users, profiles, posts, member types and subscriptions.

    Single lookups return ``None`` when the record is absent. Writes addressing a
    missing record raise ``RecordNotFoundError``; writes rejected by the store's
    constraints raise ``ConstraintViolationError``.
    """

    # Users
    @abstractmethod
    async def list_users(self) -> list[Users]:
        """List users with posts and profile (and its member type) loaded."""
        pass

    @abstractmethod
    async def get_user(self, user_id: UUID) -> Users | None:
        """Get one user with posts and profile (and its member type) loaded."""
        pass

    @abstractmethod
    async def list_following(self, user_id: UUID) -> list[Users]:
        """Users that ``user_id`` subscribes to (scalar fields only)."""
        pass

    @abstractmethod
    async def list_followers(self, user_id: UUID) -> list[Users]:
        """Users subscribing to ``user_id`` (scalar fields only)."""
        pass

    @abstractmethod
    async def create_user(self, *, name: str, balance: float) -> Users:
        pass

    @abstractmethod
    async def update_user(self, user_id: UUID, values: dict[str, Any]) -> Users:
        pass

    @abstractmethod
    async def delete_user(self, user_id: UUID) -> None:
        pass

    # Profiles
    @abstractmethod
    async def list_profiles(self) -> list[Profiles]:
        pass

    @abstractmethod
    async def get_profile(self, profile_id: UUID) -> Profiles | None:
        pass

    @abstractmethod
    async def create_profile(
        self, *, is_male: bool, year_of_birth: int, user_id: UUID, member_type_id: str
    ) -> Profiles:
        pass

    @abstractmethod
    async def update_profile(self, profile_id: UUID, values: dict[str, Any]) -> Profiles:
        pass

    @abstractmethod
    async def delete_profile(self, profile_id: UUID) -> None:
        pass

    # Posts
    @abstractmethod
    async def list_posts(self) -> list[Posts]:
        pass

    @abstractmethod
    async def get_post(self, post_id: UUID) -> Posts | None:
        pass

    @abstractmethod
    async def create_post(self, *, title: str, content: str, author_id: str) -> Posts:
        pass

    @abstractmethod
    async def update_post(self, post_id: UUID, values: dict[str, Any]) -> Posts:
        pass

    @abstractmethod
    async def delete_post(self, post_id: UUID) -> None:
        pass

    # Member types
    @abstractmethod
    async def list_member_types(self) -> list[MemberTypes]:
        pass

    @abstractmethod
    async def get_member_type(self, member_type_id: str) -> MemberTypes | None:
        pass

    # Subscriptions
    @abstractmethod
    async def subscribe(self, subscriber_id: UUID, author_id: UUID) -> Users:
        """Create the (subscriber, author) edge and return the subscriber."""
        pass

    @abstractmethod
    async def unsubscribe(self, subscriber_id: UUID, author_id: UUID) -> None:
        """Delete the (subscriber, author) edge."""
        pass
