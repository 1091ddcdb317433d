"""
Data access layer for socialgraph
"""

from .base import ConstraintViolationError, DataStore, RecordNotFoundError, StoreError
from .sql import SqlAlchemyStore

__all__ = [
    "ConstraintViolationError",
    "DataStore",
    "RecordNotFoundError",
    "SqlAlchemyStore",
    "StoreError",
]
