"""In-memory entity store for the social feed and marketplace.

This module provides functionality for:
- Creating and updating users, posts, products, orders and reviews
- Idempotent likes, follows and reviews with derived counters kept in sync
- Notification fan-out triggered by mutations
- Feed, notification and catalogue listings

The store is volatile and single-process. Every operation is a coroutine
that completes its reads and writes without suspending, so operations
never interleave on a single event loop.
"""

import logging
from typing import Optional

from .clock import MonotonicClock
from .commerce import CommerceOperations
from .diagnostics import DiagnosticsOperations
from .exceptions import DuplicateUsernameError, StoreError
from .models import (
    Comment,
    CommentCreate,
    Follow,
    Like,
    Notification,
    NotificationCreate,
    NotificationType,
    NotificationWithUsers,
    Order,
    OrderCreate,
    OrderStatus,
    Post,
    PostCreate,
    PostWithUser,
    Product,
    ProductCreate,
    ProductType,
    ProductUpdate,
    ProductWithReviews,
    ProductWithSeller,
    Review,
    ReviewCreate,
    ReviewWithUser,
    User,
    UserCreate,
    UserUpdate,
    dump_public,
)
from .notifications import NotificationOperations
from .posts import PostOperations
from .social import SocialOperations
from .users import UserOperations

logger = logging.getLogger(__name__)


class EntityStore(
    SocialOperations,
    CommerceOperations,
    PostOperations,
    DiagnosticsOperations,
    NotificationOperations,
    UserOperations
):
    """Entity store owning all collections and their invariants.

    Create one instance per application (or per test) and pass it to
    whatever needs it.
    """

    def __init__(self, clock: Optional[MonotonicClock] = None) -> None:
        """Initialize an empty store.

        Args:
            clock: Optional timestamp source, defaults to a MonotonicClock
        """
        super().__init__(clock=clock)
        logger.debug("Initialized empty entity store")


__all__ = [
    'EntityStore',
    'MonotonicClock',
    'StoreError',
    'DuplicateUsernameError',
    'dump_public',
    'User', 'UserCreate', 'UserUpdate',
    'Post', 'PostCreate', 'PostWithUser',
    'Like', 'Comment', 'CommentCreate', 'Follow',
    'Notification', 'NotificationCreate', 'NotificationType', 'NotificationWithUsers',
    'Product', 'ProductCreate', 'ProductUpdate', 'ProductType',
    'ProductWithSeller', 'ProductWithReviews',
    'Order', 'OrderCreate', 'OrderStatus',
    'Review', 'ReviewCreate', 'ReviewWithUser',
]
