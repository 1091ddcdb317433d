"""GraphQL context helpers: the request and the injected data store."""

from typing import Any

import strawberry

from ..store import DataStore


def build_context(store: DataStore, request: Any = None) -> dict[str, Any]:
    """Build the context dict handed to every resolver."""
    return {"request": request, "store": store}


def get_store(info: strawberry.Info) -> DataStore:
    """Return the data store carried by the GraphQL context."""
    store = info.context.get("store")
    if store is None:
        raise RuntimeError("GraphQL context is missing the data store")
    return store
