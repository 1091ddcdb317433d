"""
Reusable seed data functions for database initialization.

Member types are a fixed enumeration; every deployment needs both rows
before profiles can be created.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import MEMBER_TYPE_IDS, MemberTypes, SubscribersOnAuthors, Users
from ..logging import get_logger

logger = get_logger(__name__)

# (discount, posts_limit_per_month) per member type
DEFAULT_MEMBER_TYPES: dict[str, tuple[float, int]] = {
    "basic": (2.3, 20),
    "business": (7.7, 100),
}


async def ensure_member_types(db: AsyncSession) -> list[str]:
    """
    Ensure both member types exist.

    Existing rows are left untouched so operators can tune discounts and limits.

    Args:
        db: Database session

    Returns:
        IDs of the member types that were created
    """
    result = await db.execute(select(MemberTypes.id))
    existing = set(result.scalars().all())

    created: list[str] = []
    for member_type_id in MEMBER_TYPE_IDS:
        if member_type_id in existing:
            logger.debug("Member type already exists", member_type_id=member_type_id)
            continue

        discount, posts_limit = DEFAULT_MEMBER_TYPES[member_type_id]
        db.add(
            MemberTypes(
                id=member_type_id,
                discount=discount,
                posts_limit_per_month=posts_limit,
            )
        )
        created.append(member_type_id)

    await db.flush()

    if created:
        logger.info("Created member types", member_type_ids=created)

    return created


async def seed_sample_users(db: AsyncSession) -> list[Users]:
    """Create two sample users where the first subscribes to the second."""
    alice = Users(name="Alice", balance=0.0)
    bob = Users(name="Bob", balance=0.0)
    db.add_all([alice, bob])
    await db.flush()

    db.add(SubscribersOnAuthors(subscriber_id=alice.id, author_id=bob.id))
    await db.flush()

    logger.info("Created sample users", user_ids=[str(alice.id), str(bob.id)])
    return [alice, bob]


async def seed_initial_data(db: AsyncSession, *, include_sample_data: bool = False) -> None:
    """
    Seed all initial data required for the application.

    Args:
        db: Database session
        include_sample_data: Also create sample users and a subscription
    """
    logger.info("Starting database seeding")

    await ensure_member_types(db)

    if include_sample_data:
        await seed_sample_users(db)

    logger.info("Database seeding completed")
