"""Post operations and feeds."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .base import StoreState
from .models import Post, PostCreate, PostWithUser

logger = logging.getLogger(__name__)


class PostOperations(StoreState):
    """Create, delete and list posts."""

    async def create_post(self, data: Union[PostCreate, Dict[str, Any]]) -> Post:
        """Create a post and bump the owner's post count.

        The owner is assumed to exist; if it does not, the post is still
        stored and the counter update is skipped.
        """
        data = self._coerce(PostCreate, data)
        post = Post(
            id=self._next_id('posts'),
            likes_count=0,
            comments_count=0,
            created_at=self._now(),
            **data.model_dump()
        )
        self._posts[post.id] = post

        owner = self._users.get(post.user_id)
        if owner:
            owner.posts_count += 1
        else:
            logger.debug(f"Post {post.id} owner {post.user_id} not found, skipping counter")

        return self._copy(post)

    async def get_post(self, post_id: int) -> Optional[Post]:
        return self._copy(self._posts.get(post_id))

    async def get_post_with_user(self, post_id: int) -> Optional[PostWithUser]:
        post = self._posts.get(post_id)
        if not post:
            return None
        return self._with_user(post)

    async def get_user_posts(self, user_id: int) -> List[Post]:
        return [
            self._copy(post) for post in
            self._newest_first(p for p in self._posts.values() if p.user_id == user_id)
        ]

    async def delete_post(self, post_id: int) -> bool:
        """Delete a post together with its likes and comments.

        Returns:
            False if the post does not exist
        """
        post = self._posts.pop(post_id, None)
        if not post:
            return False

        owner = self._users.get(post.user_id)
        if owner:
            owner.posts_count = max(0, owner.posts_count - 1)

        like_ids = self._post_likes.pop(post_id, set())
        for like_id in like_ids:
            like = self._likes.pop(like_id)
            del self._like_index[(like.user_id, like.post_id)]

        comment_ids = self._post_comments.pop(post_id, set())
        for comment_id in comment_ids:
            del self._comments[comment_id]

        logger.debug(
            f"Deleted post {post_id} with {len(like_ids)} likes and "
            f"{len(comment_ids)} comments"
        )
        return True

    async def get_feed_posts(self) -> List[PostWithUser]:
        """All posts with their author, newest first.

        Posts whose author cannot be resolved are left out.
        """
        return self._joined_feed(self._posts.values())

    async def get_following_feed(self, user_id: int) -> List[PostWithUser]:
        """Posts by the users ``user_id`` follows, newest first."""
        following = {
            f.following_id for f in self._follows.values() if f.follower_id == user_id
        }
        return self._joined_feed(p for p in self._posts.values() if p.user_id in following)

    def _with_user(self, post: Post) -> Optional[PostWithUser]:
        user = self._users.get(post.user_id)
        if not user:
            return None
        return PostWithUser(**post.model_dump(), user=self._copy(user))

    def _joined_feed(self, posts: Iterable[Post]) -> List[PostWithUser]:
        feed = []
        for post in self._newest_first(posts):
            joined = self._with_user(post)
            if joined:
                feed.append(joined)
        return feed
