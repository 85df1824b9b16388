"""Shared state for the entity store.

Holds the nine collections, their id sequences and the secondary indices
used for unique-pair lookups and cascading deletes. The operation mixins
in this package all work on this state.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Optional, Set, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from .clock import MonotonicClock
from .models import (
    User, Post, Like, Comment, Follow, Notification, Product, Order, Review
)
from .sequence import IdSequence


ModelT = TypeVar('ModelT', bound=BaseModel)

COLLECTIONS = (
    'users',
    'posts',
    'likes',
    'comments',
    'follows',
    'notifications',
    'products',
    'orders',
    'reviews',
)

NotificationListener = Callable[[Notification], None]


class StoreState:
    """Collections, sequences and indices backing an ``EntityStore``."""

    def __init__(self, clock: Optional[MonotonicClock] = None) -> None:
        self._clock = clock or MonotonicClock()

        # Rows keyed by id, in insertion order
        self._users: Dict[int, User] = {}
        self._posts: Dict[int, Post] = {}
        self._likes: Dict[int, Like] = {}
        self._comments: Dict[int, Comment] = {}
        self._follows: Dict[int, Follow] = {}
        self._notifications: Dict[int, Notification] = {}
        self._products: Dict[int, Product] = {}
        self._orders: Dict[int, Order] = {}
        self._reviews: Dict[int, Review] = {}

        self._sequences: Dict[str, IdSequence] = {
            name: IdSequence() for name in COLLECTIONS
        }

        # Unique keys
        self._username_index: Dict[str, int] = {}
        self._like_index: Dict[Tuple[int, int], int] = {}
        self._follow_index: Dict[Tuple[int, int], int] = {}
        self._review_index: Dict[Tuple[int, int], int] = {}

        # Cascade indices
        self._post_likes: DefaultDict[int, Set[int]] = defaultdict(set)
        self._post_comments: DefaultDict[int, Set[int]] = defaultdict(set)
        self._product_reviews: DefaultDict[int, Set[int]] = defaultdict(set)

        self._listeners: List[NotificationListener] = []

    def _next_id(self, collection: str) -> int:
        return self._sequences[collection].next()

    def _now(self):
        return self._clock.now()

    @staticmethod
    def _coerce(model: Type[ModelT], data: Union[ModelT, Dict[str, Any]]) -> ModelT:
        """Accept either a model instance or plain mapping of its fields."""
        if isinstance(data, model):
            return data
        return model.model_validate(data)

    @staticmethod
    def _copy(row: Optional[ModelT]) -> Optional[ModelT]:
        """Detached copy of a stored row, so callers cannot bypass the store."""
        if row is None:
            return None
        return row.model_copy(deep=True)

    @staticmethod
    def _newest_first(rows):
        return sorted(rows, key=lambda row: (row.created_at, row.id), reverse=True)

    @staticmethod
    def _oldest_first(rows):
        return sorted(rows, key=lambda row: (row.created_at, row.id))
