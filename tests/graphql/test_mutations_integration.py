"""
Integration tests for GraphQL mutations against a SQLite store
"""

import uuid

import pytest

CREATE_USER = """
    mutation CreateUser($dto: CreateUserInput!) {
        createUser(dto: $dto) { id name balance }
    }
"""

SUBSCRIBE = """
    mutation Subscribe($userId: UUID!, $authorId: UUID!) {
        subscribeTo(userId: $userId, authorId: $authorId) { id name }
    }
"""

UNSUBSCRIBE = """
    mutation Unsubscribe($userId: UUID!, $authorId: UUID!) {
        unsubscribeFrom(userId: $userId, authorId: $authorId)
    }
"""

GET_USER_SUBSCRIPTIONS = """
    query GetUser($id: UUID!) {
        user(id: $id) {
            id
            userSubscribedTo { id }
            subscribedToUser { id }
        }
    }
"""


async def create_user(execute_graphql, name: str, balance: float = 0.0) -> str:
    result = await execute_graphql(CREATE_USER, {"dto": {"name": name, "balance": balance}})
    assert result.errors is None
    return result.data["createUser"]["id"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_user_crud_via_mutations(execute_graphql):
    user_id = await create_user(execute_graphql, "Alice", 5.0)

    changed = await execute_graphql(
        """
        mutation Change($id: UUID!, $dto: ChangeUserInput!) {
            changeUser(id: $id, dto: $dto) { id name balance }
        }
        """,
        {"id": user_id, "dto": {"balance": 42.0}},
    )
    assert changed.errors is None
    assert changed.data["changeUser"] == {"id": user_id, "name": "Alice", "balance": 42.0}

    delete = "mutation Delete($id: UUID!) { deleteUser(id: $id) }"

    first = await execute_graphql(delete, {"id": user_id})
    assert first.errors is None
    assert first.data == {"deleteUser": True}

    second = await execute_graphql(delete, {"id": user_id})
    assert second.errors
    assert "User not found" in second.errors[0].message
    assert second.errors[0].path == ["deleteUser"]
    assert second.data == {"deleteUser": None}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_profile_mutations(execute_graphql):
    user_id = await create_user(execute_graphql, "Bob")

    created = await execute_graphql(
        """
        mutation Create($dto: CreateProfileInput!) {
            createProfile(dto: $dto) { id isMale yearOfBirth userId memberTypeId }
        }
        """,
        {
            "dto": {
                "isMale": True,
                "yearOfBirth": 1988,
                "userId": user_id,
                "memberTypeId": "basic",
            }
        },
    )
    assert created.errors is None
    profile = created.data["createProfile"]
    assert profile["userId"] == user_id
    assert profile["memberTypeId"] == "basic"

    changed = await execute_graphql(
        """
        mutation Change($id: UUID!, $dto: ChangeProfileInput!) {
            changeProfile(id: $id, dto: $dto) { isMale yearOfBirth memberTypeId }
        }
        """,
        {"id": profile["id"], "dto": {"memberTypeId": "business"}},
    )
    assert changed.errors is None
    assert changed.data["changeProfile"] == {
        "isMale": True,
        "yearOfBirth": 1988,
        "memberTypeId": "business",
    }

    deleted = await execute_graphql(
        "mutation Delete($id: UUID!) { deleteProfile(id: $id) }", {"id": profile["id"]}
    )
    assert deleted.data == {"deleteProfile": True}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_second_profile_for_user_is_a_constraint_error(execute_graphql):
    user_id = await create_user(execute_graphql, "Carol")
    create = """
        mutation Create($dto: CreateProfileInput!) { createProfile(dto: $dto) { id } }
    """
    dto = {"isMale": False, "yearOfBirth": 1990, "userId": user_id, "memberTypeId": "basic"}

    first = await execute_graphql(create, {"dto": dto})
    assert first.errors is None

    second = await execute_graphql(create, {"dto": dto})
    assert second.errors
    assert "Profile constraint violated" in second.errors[0].message
    assert second.data == {"createProfile": None}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_post_mutations(execute_graphql):
    author_id = await create_user(execute_graphql, "Dave")

    created = await execute_graphql(
        """
        mutation Create($dto: CreatePostInput!) {
            createPost(dto: $dto) { id title content authorId }
        }
        """,
        {"dto": {"title": "Draft", "content": "Body", "authorId": author_id}},
    )
    assert created.errors is None
    post = created.data["createPost"]
    assert post["authorId"] == author_id

    changed = await execute_graphql(
        """
        mutation Change($id: UUID!, $dto: ChangePostInput!) {
            changePost(id: $id, dto: $dto) { title content }
        }
        """,
        {"id": post["id"], "dto": {"title": "Final"}},
    )
    assert changed.errors is None
    assert changed.data["changePost"] == {"title": "Final", "content": "Body"}

    missing = await execute_graphql(
        """
        mutation Change($id: UUID!, $dto: ChangePostInput!) {
            changePost(id: $id, dto: $dto) { title }
        }
        """,
        {"id": str(uuid.uuid4()), "dto": {"title": "Nope"}},
    )
    assert missing.errors
    assert "Post not found" in missing.errors[0].message


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_post_accepts_non_uuid_author_id(execute_graphql):
    created = await execute_graphql(
        """
        mutation {
            createPost(dto: {title: "t", content: "c", authorId: "legacy-author-1"}) {
                title
                authorId
            }
        }
        """
    )

    assert created.errors is None
    assert created.data["createPost"] == {"title": "t", "authorId": "legacy-author-1"}

    listed = await execute_graphql("query { posts { authorId } }")
    assert listed.data["posts"] == [{"authorId": "legacy-author-1"}]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_profile_with_non_uuid_user_id_is_a_constraint_error(execute_graphql):
    result = await execute_graphql(
        """
        mutation Create($dto: CreateProfileInput!) { createProfile(dto: $dto) { id } }
        """,
        {
            "dto": {
                "isMale": True,
                "yearOfBirth": 1999,
                "userId": "legacy-user-1",
                "memberTypeId": "basic",
            }
        },
    )

    assert result.errors
    assert "Profile constraint violated" in result.errors[0].message
    assert result.data == {"createProfile": None}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe_scenario(execute_graphql):
    alice_id = await create_user(execute_graphql, "Alice")
    bob_id = await create_user(execute_graphql, "Bob")

    subscribed = await execute_graphql(SUBSCRIBE, {"userId": alice_id, "authorId": bob_id})
    assert subscribed.errors is None
    assert subscribed.data["subscribeTo"] == {"id": alice_id, "name": "Alice"}

    alice = await execute_graphql(GET_USER_SUBSCRIPTIONS, {"id": alice_id})
    assert alice.data["user"]["userSubscribedTo"] == [{"id": bob_id}]
    assert alice.data["user"]["subscribedToUser"] == []

    bob = await execute_graphql(GET_USER_SUBSCRIPTIONS, {"id": bob_id})
    assert bob.data["user"]["userSubscribedTo"] == []
    assert bob.data["user"]["subscribedToUser"] == [{"id": alice_id}]

    unsubscribed = await execute_graphql(UNSUBSCRIBE, {"userId": alice_id, "authorId": bob_id})
    assert unsubscribed.errors is None
    assert unsubscribed.data == {"unsubscribeFrom": True}

    alice = await execute_graphql(GET_USER_SUBSCRIPTIONS, {"id": alice_id})
    assert alice.data["user"]["userSubscribedTo"] == []

    again = await execute_graphql(UNSUBSCRIBE, {"userId": alice_id, "authorId": bob_id})
    assert again.errors
    assert "Subscription not found" in again.errors[0].message


@pytest.mark.integration
@pytest.mark.asyncio
async def test_duplicate_subscription_is_rejected(execute_graphql):
    alice_id = await create_user(execute_graphql, "Alice")
    bob_id = await create_user(execute_graphql, "Bob")

    first = await execute_graphql(SUBSCRIBE, {"userId": alice_id, "authorId": bob_id})
    assert first.errors is None

    second = await execute_graphql(SUBSCRIBE, {"userId": alice_id, "authorId": bob_id})
    assert second.errors
    assert "Subscription constraint violated" in second.errors[0].message


@pytest.mark.integration
@pytest.mark.asyncio
async def test_failed_mutation_does_not_null_sibling_fields(execute_graphql):
    result = await execute_graphql(
        """
        mutation Mixed($missing: UUID!) {
            createUser(dto: {name: "Zed", balance: 1.5}) { name }
            deletePost(id: $missing)
        }
        """,
        {"missing": str(uuid.uuid4())},
    )

    assert result.data["createUser"] == {"name": "Zed"}
    assert result.data["deletePost"] is None
    assert len(result.errors) == 1
    assert result.errors[0].path == ["deletePost"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_deleting_user_with_profile_is_rejected(execute_graphql):
    user_id = await create_user(execute_graphql, "Erin")
    await execute_graphql(
        """
        mutation Create($dto: CreateProfileInput!) { createProfile(dto: $dto) { id } }
        """,
        {
            "dto": {
                "isMale": False,
                "yearOfBirth": 2001,
                "userId": user_id,
                "memberTypeId": "business",
            }
        },
    )

    result = await execute_graphql(
        "mutation Delete($id: UUID!) { deleteUser(id: $id) }", {"id": user_id}
    )

    assert result.errors
    assert "User constraint violated" in result.errors[0].message

    still_there = await execute_graphql(
        "query GetUser($id: UUID!) { user(id: $id) { name profile { yearOfBirth } } }",
        {"id": user_id},
    )
    assert still_there.data["user"] == {"name": "Erin", "profile": {"yearOfBirth": 2001}}
