"""Notification operations and fan-out.

Mutations elsewhere in the store call ``_notify`` to enqueue a
notification for the affected user. A single rule applies to every type:
no notification is created when the actor is also the recipient.

Listeners registered with ``subscribe`` receive a copy of each new
notification right after it is stored, e.g. to push it over a websocket.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .base import NotificationListener, StoreState
from .models import (
    POST_NOTIFICATION_TYPES,
    Notification,
    NotificationCreate,
    NotificationType,
    NotificationWithUsers,
)

logger = logging.getLogger(__name__)


class NotificationOperations(StoreState):
    """Create, list and acknowledge notifications."""

    def subscribe(self, listener: NotificationListener) -> None:
        """Register a callable invoked with every created notification."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: NotificationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(
        self,
        user_id: int,
        type: NotificationType,
        triggered_by_user_id: Optional[int] = None,
        resource_id: Optional[int] = None
    ) -> Optional[Notification]:
        if triggered_by_user_id is not None and triggered_by_user_id == user_id:
            logger.debug(f"Suppressed self-notification {type.value} for user {user_id}")
            return None

        notification = Notification(
            id=self._next_id('notifications'),
            user_id=user_id,
            triggered_by_user_id=triggered_by_user_id,
            type=type,
            resource_id=resource_id,
            read=False,
            created_at=self._now()
        )
        self._notifications[notification.id] = notification
        logger.debug(
            f"Notification {notification.id}: {type.value} for user {user_id} "
            f"from {triggered_by_user_id}"
        )

        for listener in list(self._listeners):
            try:
                listener(self._copy(notification))
            except Exception as e:
                logger.error(f"Notification listener failed for {notification.id}: {e}")

        return notification

    async def create_notification(
        self,
        data: Union[NotificationCreate, Dict[str, Any]]
    ) -> Optional[Notification]:
        """Create a notification directly.

        Returns:
            The new notification, or None if it was suppressed because the
            actor is the recipient
        """
        data = self._coerce(NotificationCreate, data)
        notification = self._notify(
            data.user_id,
            data.type,
            triggered_by_user_id=data.triggered_by_user_id,
            resource_id=data.resource_id
        )
        return self._copy(notification)

    async def get_user_notifications(self, user_id: int) -> List[NotificationWithUsers]:
        """Notifications addressed to a user, newest first.

        Each one carries the resolved actor and, for likes and comments,
        the post when it still exists. Notifications whose actor cannot be
        resolved are left out.
        """
        rows = self._newest_first(
            n for n in self._notifications.values() if n.user_id == user_id
        )

        result = []
        for notification in rows:
            if notification.triggered_by_user_id is None:
                continue
            actor = self._users.get(notification.triggered_by_user_id)
            if not actor:
                continue

            post = None
            if notification.resource_id is not None and notification.type in POST_NOTIFICATION_TYPES:
                post = self._posts.get(notification.resource_id)

            result.append(NotificationWithUsers(
                **notification.model_dump(),
                triggered_by_user=self._copy(actor),
                post=self._copy(post)
            ))
        return result

    async def get_unread_count(self, user_id: int) -> int:
        return sum(
            1 for n in self._notifications.values()
            if n.user_id == user_id and not n.read
        )

    async def mark_notifications_as_read(self, user_id: int) -> bool:
        """Mark every notification for a user as read. Always succeeds."""
        for notification in self._notifications.values():
            if notification.user_id == user_id:
                notification.read = True
        return True
