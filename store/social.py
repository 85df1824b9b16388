"""Likes, follows and comments.

Likes and follows are unique per pair of ids: creating one that already
exists returns the existing row without touching counters or sending a
second notification. Removing one that does not exist is a no-op.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .models import (
    Comment,
    CommentCreate,
    Follow,
    Like,
    NotificationType,
    User,
)
from .notifications import NotificationOperations
from .users import UserOperations

logger = logging.getLogger(__name__)


class SocialOperations(NotificationOperations, UserOperations):
    """Relationship operations between users and posts."""

    # Likes

    async def create_like(self, user_id: int, post_id: int) -> Like:
        """Like a post, once.

        Bumps the post's like count and notifies its owner, unless the
        owner liked their own post.
        """
        existing = self._like_index.get((user_id, post_id))
        if existing is not None:
            return self._copy(self._likes[existing])

        like = Like(
            id=self._next_id('likes'),
            user_id=user_id,
            post_id=post_id,
            created_at=self._now()
        )
        self._likes[like.id] = like
        self._like_index[(user_id, post_id)] = like.id
        self._post_likes[post_id].add(like.id)

        post = self._posts.get(post_id)
        if post:
            post.likes_count += 1
            self._notify(
                post.user_id,
                NotificationType.LIKE,
                triggered_by_user_id=user_id,
                resource_id=post.id
            )
        return self._copy(like)

    async def delete_like(self, user_id: int, post_id: int) -> bool:
        like_id = self._like_index.pop((user_id, post_id), None)
        if like_id is None:
            return False

        del self._likes[like_id]
        self._post_likes[post_id].discard(like_id)

        post = self._posts.get(post_id)
        if post:
            post.likes_count = max(0, post.likes_count - 1)
        return True

    async def get_like_by_user_and_post(self, user_id: int, post_id: int) -> Optional[Like]:
        like_id = self._like_index.get((user_id, post_id))
        if like_id is None:
            return None
        return self._copy(self._likes[like_id])

    async def get_post_likes(self, post_id: int) -> List[Like]:
        like_ids = sorted(self._post_likes.get(post_id, ()))
        return [self._copy(self._likes[like_id]) for like_id in like_ids]

    # Follows

    async def create_follow(self, follower_id: int, following_id: int) -> Follow:
        """Follow a user, once.

        Self-follows are stored like any other follow but never notify.
        """
        existing = self._follow_index.get((follower_id, following_id))
        if existing is not None:
            return self._copy(self._follows[existing])

        follow = Follow(
            id=self._next_id('follows'),
            follower_id=follower_id,
            following_id=following_id,
            created_at=self._now()
        )
        self._follows[follow.id] = follow
        self._follow_index[(follower_id, following_id)] = follow.id

        follower = self._users.get(follower_id)
        if follower:
            follower.following_count += 1

        following = self._users.get(following_id)
        if following:
            following.followers_count += 1
            self._notify(
                following_id,
                NotificationType.FOLLOW,
                triggered_by_user_id=follower_id
            )
        return self._copy(follow)

    async def delete_follow(self, follower_id: int, following_id: int) -> bool:
        follow_id = self._follow_index.pop((follower_id, following_id), None)
        if follow_id is None:
            return False

        del self._follows[follow_id]

        follower = self._users.get(follower_id)
        if follower:
            follower.following_count = max(0, follower.following_count - 1)

        following = self._users.get(following_id)
        if following:
            following.followers_count = max(0, following.followers_count - 1)
        return True

    async def get_follow_by_user_ids(self, follower_id: int, following_id: int) -> Optional[Follow]:
        follow_id = self._follow_index.get((follower_id, following_id))
        if follow_id is None:
            return None
        return self._copy(self._follows[follow_id])

    async def get_followers_by_user_id(self, user_id: int) -> List[User]:
        return self._resolve_users(
            f.follower_id for f in self._follows.values() if f.following_id == user_id
        )

    async def get_following_by_user_id(self, user_id: int) -> List[User]:
        return self._resolve_users(
            f.following_id for f in self._follows.values() if f.follower_id == user_id
        )

    # Comments

    async def create_comment(self, data: Union[CommentCreate, Dict[str, Any]]) -> Comment:
        data = self._coerce(CommentCreate, data)
        comment = Comment(
            id=self._next_id('comments'),
            created_at=self._now(),
            **data.model_dump()
        )
        self._comments[comment.id] = comment
        self._post_comments[comment.post_id].add(comment.id)

        post = self._posts.get(comment.post_id)
        if post:
            post.comments_count += 1
            self._notify(
                post.user_id,
                NotificationType.COMMENT,
                triggered_by_user_id=comment.user_id,
                resource_id=post.id
            )
        return self._copy(comment)

    async def get_post_comments(self, post_id: int) -> List[Comment]:
        """Comments on a post in conversation order, oldest first."""
        comments = (self._comments[comment_id] for comment_id in self._post_comments.get(post_id, ()))
        return [self._copy(comment) for comment in self._oldest_first(comments)]
