"""User operations."""

import logging
from typing import Any, Dict, List, Optional, Union

from .base import StoreState
from .exceptions import DuplicateUsernameError
from .models import User, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserOperations(StoreState):
    """Create, look up and update users."""

    async def create_user(self, data: Union[UserCreate, Dict[str, Any]]) -> User:
        """Create a new user.

        Counters start at zero. ``is_seller`` stays False unless given.

        Raises:
            DuplicateUsernameError: If the username is already taken
        """
        data = self._coerce(UserCreate, data)
        if data.username in self._username_index:
            logger.warning(f"Rejected duplicate username {data.username!r}")
            raise DuplicateUsernameError(data.username)

        now = self._now()
        user = User(
            id=self._next_id('users'),
            followers_count=0,
            following_count=0,
            posts_count=0,
            created_at=now,
            updated_at=now,
            **data.model_dump()
        )
        self._users[user.id] = user
        self._username_index[user.username] = user.id
        logger.debug(f"Created user {user.id} ({user.username})")
        return self._copy(user)

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._copy(self._users.get(user_id))

    async def get_user_by_username(self, username: str) -> Optional[User]:
        user_id = self._username_index.get(username)
        if user_id is None:
            return None
        return self._copy(self._users.get(user_id))

    async def get_user_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        for user in self._users.values():
            if user.firebase_uid == firebase_uid:
                return self._copy(user)
        return None

    async def search_users(self, query: str) -> List[User]:
        """Users whose username or name contains ``query``, ignoring case."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            self._copy(user) for user in self._users.values()
            if needle in user.username.lower() or needle in user.name.lower()
        ]

    async def update_user(
        self,
        user_id: int,
        data: Union[UserUpdate, Dict[str, Any]]
    ) -> Optional[User]:
        """Apply a partial profile update.

        Only fields explicitly set on ``data`` are changed. Counters and
        seller/payment linkage have their own operations.

        Raises:
            DuplicateUsernameError: If renaming to a username already in use
            ValidationError: If ``data`` names a field that cannot be
                updated, or clears a required one
        """
        user = self._users.get(user_id)
        if not user:
            return None

        changes = self._coerce(UserUpdate, data).model_dump(exclude_unset=True)
        new_username = changes.get('username')
        if new_username is not None and new_username != user.username:
            if new_username in self._username_index:
                logger.warning(f"Rejected rename of user {user_id} to taken username {new_username!r}")
                raise DuplicateUsernameError(new_username)
            del self._username_index[user.username]
            self._username_index[new_username] = user_id

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = self._now()
        return self._copy(user)

    async def update_user_seller_status(self, user_id: int, is_seller: bool) -> Optional[User]:
        user = self._users.get(user_id)
        if not user:
            return None
        user.is_seller = is_seller
        user.updated_at = self._now()
        return self._copy(user)

    async def update_user_stripe_info(
        self,
        user_id: int,
        stripe_customer_id: str,
        stripe_account_id: Optional[str] = None
    ) -> Optional[User]:
        """Record payment-processor ids; the account id is kept if not given."""
        user = self._users.get(user_id)
        if not user:
            return None
        user.stripe_customer_id = stripe_customer_id
        if stripe_account_id:
            user.stripe_account_id = stripe_account_id
        user.updated_at = self._now()
        return self._copy(user)

    async def link_firebase_user(self, user_id: int, firebase_uid: str) -> Optional[User]:
        user = self._users.get(user_id)
        if not user:
            return None
        user.firebase_uid = firebase_uid
        user.updated_at = self._now()
        return self._copy(user)

    def _resolve_users(self, user_ids) -> List[User]:
        """Copies of the given users, skipping ids that do not resolve."""
        users = []
        for user_id in user_ids:
            user = self._users.get(user_id)
            if user:
                users.append(self._copy(user))
        return users
