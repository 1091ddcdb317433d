"""
Tests for the two-hop subscription expansion behind the ``user`` query
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import strawberry

from socialgraph.dbmodels import Users
from socialgraph.graphql.context import build_context
from socialgraph.graphql.resolvers.subscription import (
    expand_user_subscriptions,
    resolve_user_by_id,
)
from socialgraph.graphql.schema import schema
from socialgraph.store import DataStore


def make_user(name: str) -> Users:
    return Users(id=uuid.uuid4(), name=name, balance=10.0)


@pytest.fixture
def graph():
    """Root follows A and B; C follows root; A follows C; B is followed by A."""
    root = make_user("root")
    a = make_user("a")
    b = make_user("b")
    c = make_user("c")
    users = {u.id: u for u in (root, a, b, c)}

    following = {
        root.id: [a, b],
        a.id: [c, b],
        b.id: [],
        c.id: [root],
    }
    followers = {
        root.id: [c],
        a.id: [root],
        b.id: [root, a],
        c.id: [a],
    }
    return {
        "root": root,
        "a": a,
        "b": b,
        "c": c,
        "users": users,
        "following": following,
        "followers": followers,
    }


@pytest.fixture
def mock_store(graph):
    store = AsyncMock(spec=DataStore)
    store.get_user.side_effect = lambda user_id: graph["users"].get(user_id)
    store.list_following.side_effect = lambda user_id: list(graph["following"][user_id])
    store.list_followers.side_effect = lambda user_id: list(graph["followers"][user_id])
    return store


@pytest.fixture
def mock_info(mock_store):
    """Create a mock GraphQL info object carrying the mocked store."""
    info = MagicMock(spec=strawberry.Info)
    info.context = build_context(mock_store)
    return info


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_returns_none_for_unknown_user(mock_store):
    result = await expand_user_subscriptions(mock_store, uuid.uuid4())

    assert result is None
    mock_store.get_user.assert_awaited_once()
    mock_store.list_following.assert_not_awaited()
    mock_store.list_followers.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_lookup_count(mock_store, graph):
    root = graph["root"]

    await expand_user_subscriptions(mock_store, root.id)

    # Two followings and one follower: 3 + 2*2 + 2*1
    total = (
        mock_store.get_user.await_count
        + mock_store.list_following.await_count
        + mock_store.list_followers.await_count
    )
    assert total == 9
    assert mock_store.get_user.await_count == 1
    assert mock_store.list_following.await_count == 4
    assert mock_store.list_followers.await_count == 4


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_shape_and_order(mock_store, graph):
    root, a, b, c = graph["root"], graph["a"], graph["b"], graph["c"]

    result = await expand_user_subscriptions(mock_store, root.id)

    assert result is not None
    assert result.id == root.id
    assert result.posts == []
    assert result.profile is None

    assert [u.id for u in result.following] == [a.id, b.id]
    assert [u.id for u in result.followers] == [c.id]

    first = result.following[0]
    assert [u.id for u in first.following] == [c.id, b.id]
    assert [u.id for u in first.followers] == [root.id]

    second = result.following[1]
    assert second.following == []
    assert [u.id for u in second.followers] == [root.id, a.id]

    follower = result.followers[0]
    assert [u.id for u in follower.following] == [root.id]
    assert [u.id for u in follower.followers] == [a.id]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_stops_after_second_level(mock_store, graph):
    result = await expand_user_subscriptions(mock_store, graph["root"].id)

    assert result is not None
    for neighbour in [*result.following, *result.followers]:
        # Neighbours carry scalar fields and their own one-hop lists only
        assert neighbour.posts is None
        assert neighbour.profile is None
        for leaf in [*neighbour.following, *neighbour.followers]:
            assert leaf.following is None
            assert leaf.followers is None
            assert leaf.posts is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_of_isolated_user_makes_three_lookups(mock_store, graph):
    lonely = make_user("lonely")
    graph["users"][lonely.id] = lonely
    graph["following"][lonely.id] = []
    graph["followers"][lonely.id] = []

    result = await expand_user_subscriptions(mock_store, lonely.id)

    assert result is not None
    assert result.following == []
    assert result.followers == []
    assert mock_store.get_user.await_count == 1
    assert mock_store.list_following.await_count == 1
    assert mock_store.list_followers.await_count == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expansion_fails_when_a_neighbour_lookup_fails(mock_store, graph):
    b = graph["b"]

    def failing_followers(user_id):
        if user_id == b.id:
            raise RuntimeError("store unavailable")
        return list(graph["followers"][user_id])

    mock_store.list_followers.side_effect = failing_followers

    with pytest.raises(RuntimeError, match="store unavailable"):
        await expand_user_subscriptions(mock_store, graph["root"].id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_user_by_id_uses_context_store(mock_info, mock_store, graph):
    result = await resolve_user_by_id(mock_info, graph["c"].id)

    assert result is not None
    assert result.name == "c"
    mock_store.get_user.assert_awaited_once_with(graph["c"].id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_query_through_schema(mock_store, graph):
    query = """
        query GetUser($id: UUID!) {
            user(id: $id) {
                id
                name
                userSubscribedTo {
                    name
                    subscribedToUser { name }
                }
                subscribedToUser {
                    name
                    userSubscribedTo { name }
                }
            }
        }
    """

    result = await schema.execute(
        query,
        variable_values={"id": str(graph["root"].id)},
        context_value=build_context(mock_store),
    )

    assert result.errors is None
    user = result.data["user"]
    assert user["name"] == "root"
    assert [u["name"] for u in user["userSubscribedTo"]] == ["a", "b"]
    assert [u["name"] for u in user["userSubscribedTo"][1]["subscribedToUser"]] == ["root", "a"]
    assert [u["name"] for u in user["subscribedToUser"]] == ["c"]
    assert [u["name"] for u in user["subscribedToUser"][0]["userSubscribedTo"]] == ["root"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_query_failure_nulls_field_and_reports_error(mock_store, graph):
    mock_store.list_following.side_effect = RuntimeError("store unavailable")

    result = await schema.execute(
        "query GetUser($id: UUID!) { user(id: $id) { id name } }",
        variable_values={"id": str(graph["root"].id)},
        context_value=build_context(mock_store),
    )

    assert result.errors
    assert "store unavailable" in result.errors[0].message
    assert result.data == {"user": None}
