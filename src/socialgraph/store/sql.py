"""SQLAlchemy-backed data store."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from ..database.connection import get_async_session
from ..dbmodels import MemberTypes, Posts, Profiles, SubscribersOnAuthors, Users
from ..logging import get_logger
from .base import ConstraintViolationError, DataStore, RecordNotFoundError

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
ModelT = TypeVar("ModelT", Users, Profiles, Posts)

# Eager-loading policy shared by every user lookup that returns relations;
# posts are attached separately by _attach_posts
_USER_RELATIONS = (selectinload(Users.profile).selectinload(Profiles.member_type),)


@asynccontextmanager
async def _constraint_guard(entity: str) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError as e:
        detail = str(e.orig) if e.orig is not None else str(e)
        logger.warning("Store constraint violated", entity=entity, detail=detail)
        raise ConstraintViolationError(entity, detail) from e


async def _attach_posts(session: AsyncSession, users: list[Users]) -> None:
    """Load the posts whose author_id is the text form of each user's id."""
    if not users:
        return

    by_author: defaultdict[str, list[Posts]] = defaultdict(list)
    stmt = select(Posts).where(Posts.author_id.in_([str(u.id) for u in users]))
    for post in (await session.execute(stmt)).scalars():
        by_author[post.author_id].append(post)

    for user in users:
        set_committed_value(user, "posts", by_author.get(str(user.id), []))


class SqlAlchemyStore(DataStore):
    """Data store using one pooled session per call.

    Separate sessions per call let independent lookups run concurrently.
    """

    def __init__(self, session_factory: SessionFactory = get_async_session):
        self._session_factory = session_factory

    # Users
    async def list_users(self) -> list[Users]:
        async with self._session_factory() as session:
            result = await session.execute(select(Users).options(*_USER_RELATIONS))
            users = list(result.scalars().all())
            await _attach_posts(session, users)
            return users

    async def get_user(self, user_id: UUID) -> Users | None:
        async with self._session_factory() as session:
            stmt = select(Users).where(Users.id == user_id).options(*_USER_RELATIONS)
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()
            if user is not None:
                await _attach_posts(session, [user])
            return user

    async def list_following(self, user_id: UUID) -> list[Users]:
        async with self._session_factory() as session:
            stmt = (
                select(Users)
                .join(SubscribersOnAuthors, SubscribersOnAuthors.author_id == Users.id)
                .where(SubscribersOnAuthors.subscriber_id == user_id)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_followers(self, user_id: UUID) -> list[Users]:
        async with self._session_factory() as session:
            stmt = (
                select(Users)
                .join(SubscribersOnAuthors, SubscribersOnAuthors.subscriber_id == Users.id)
                .where(SubscribersOnAuthors.author_id == user_id)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def create_user(self, *, name: str, balance: float) -> Users:
        return await self._create("User", Users(name=name, balance=balance))

    async def update_user(self, user_id: UUID, values: dict[str, Any]) -> Users:
        return await self._update("User", Users, user_id, values)

    async def delete_user(self, user_id: UUID) -> None:
        await self._delete("User", delete(Users).where(Users.id == user_id), user_id)

    # Profiles
    async def list_profiles(self) -> list[Profiles]:
        async with self._session_factory() as session:
            result = await session.execute(select(Profiles))
            return list(result.scalars().all())

    async def get_profile(self, profile_id: UUID) -> Profiles | None:
        async with self._session_factory() as session:
            return await session.get(Profiles, profile_id)

    async def create_profile(
        self, *, is_male: bool, year_of_birth: int, user_id: UUID, member_type_id: str
    ) -> Profiles:
        profile = Profiles(
            is_male=is_male,
            year_of_birth=year_of_birth,
            user_id=user_id,
            member_type_id=member_type_id,
        )
        return await self._create("Profile", profile)

    async def update_profile(self, profile_id: UUID, values: dict[str, Any]) -> Profiles:
        return await self._update("Profile", Profiles, profile_id, values)

    async def delete_profile(self, profile_id: UUID) -> None:
        await self._delete("Profile", delete(Profiles).where(Profiles.id == profile_id), profile_id)

    # Posts
    async def list_posts(self) -> list[Posts]:
        async with self._session_factory() as session:
            result = await session.execute(select(Posts))
            return list(result.scalars().all())

    async def get_post(self, post_id: UUID) -> Posts | None:
        async with self._session_factory() as session:
            return await session.get(Posts, post_id)

    async def create_post(self, *, title: str, content: str, author_id: str) -> Posts:
        return await self._create("Post", Posts(title=title, content=content, author_id=author_id))

    async def update_post(self, post_id: UUID, values: dict[str, Any]) -> Posts:
        return await self._update("Post", Posts, post_id, values)

    async def delete_post(self, post_id: UUID) -> None:
        await self._delete("Post", delete(Posts).where(Posts.id == post_id), post_id)

    # Member types
    async def list_member_types(self) -> list[MemberTypes]:
        async with self._session_factory() as session:
            result = await session.execute(select(MemberTypes))
            return list(result.scalars().all())

    async def get_member_type(self, member_type_id: str) -> MemberTypes | None:
        async with self._session_factory() as session:
            return await session.get(MemberTypes, member_type_id)

    # Subscriptions
    async def subscribe(self, subscriber_id: UUID, author_id: UUID) -> Users:
        async with self._session_factory() as session:
            user = await session.get(Users, subscriber_id)
            if user is None:
                raise RecordNotFoundError("User", subscriber_id)

            async with _constraint_guard("Subscription"):
                session.add(SubscribersOnAuthors(subscriber_id=subscriber_id, author_id=author_id))
                await session.flush()

            logger.info(
                "Subscription created",
                subscriber_id=str(subscriber_id),
                author_id=str(author_id),
            )
            return user

    async def unsubscribe(self, subscriber_id: UUID, author_id: UUID) -> None:
        stmt = delete(SubscribersOnAuthors).where(
            SubscribersOnAuthors.subscriber_id == subscriber_id,
            SubscribersOnAuthors.author_id == author_id,
        )
        await self._delete("Subscription", stmt, (subscriber_id, author_id))
        logger.info(
            "Subscription removed",
            subscriber_id=str(subscriber_id),
            author_id=str(author_id),
        )

    # Shared write helpers
    async def _create(self, entity: str, record: ModelT) -> ModelT:
        async with self._session_factory() as session:
            async with _constraint_guard(entity):
                session.add(record)
                await session.flush()
            logger.info("Record created", entity=entity, id=str(record.id))
            return record

    async def _update(
        self, entity: str, model: type[ModelT], record_id: UUID, values: dict[str, Any]
    ) -> ModelT:
        async with self._session_factory() as session:
            record = await session.get(model, record_id)
            if record is None:
                raise RecordNotFoundError(entity, record_id)

            async with _constraint_guard(entity):
                for field, value in values.items():
                    setattr(record, field, value)
                await session.flush()

            logger.info("Record updated", entity=entity, id=str(record_id), fields=sorted(values))
            return record

    async def _delete(self, entity: str, stmt: Any, key: Any) -> None:
        async with self._session_factory() as session:
            async with _constraint_guard(entity):
                result = await session.execute(stmt)

            if result.rowcount == 0:
                raise RecordNotFoundError(entity, key)

            logger.info("Record deleted", entity=entity, key=str(key))
