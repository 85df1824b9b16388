"""Consistency checks over derived counters."""

import logging
from collections import Counter
from typing import Dict, List

from .base import COLLECTIONS, StoreState

logger = logging.getLogger(__name__)


class DiagnosticsOperations(StoreState):

    async def stats(self) -> Dict[str, int]:
        """Row count per collection."""
        return {name: len(getattr(self, f'_{name}')) for name in COLLECTIONS}

    async def check_consistency(self) -> List[str]:
        """Recompute every derived counter from the relation rows.

        Returns:
            One message per mismatch; empty when all counters agree
        """
        followers = Counter(f.following_id for f in self._follows.values())
        following = Counter(f.follower_id for f in self._follows.values())
        posts = Counter(p.user_id for p in self._posts.values())
        likes = Counter(like.post_id for like in self._likes.values())
        comments = Counter(c.post_id for c in self._comments.values())
        sales = Counter(o.product_id for o in self._orders.values())

        problems = []
        for user in self._users.values():
            for field, expected in (
                ('followers_count', followers[user.id]),
                ('following_count', following[user.id]),
                ('posts_count', posts[user.id]),
            ):
                actual = getattr(user, field)
                if actual != expected:
                    problems.append(f"user {user.id} {field}={actual}, expected {expected}")

        for post in self._posts.values():
            for field, expected in (
                ('likes_count', likes[post.id]),
                ('comments_count', comments[post.id]),
            ):
                actual = getattr(post, field)
                if actual != expected:
                    problems.append(f"post {post.id} {field}={actual}, expected {expected}")

        for product in self._products.values():
            if product.sales_count != sales[product.id]:
                problems.append(
                    f"product {product.id} sales_count={product.sales_count}, "
                    f"expected {sales[product.id]}"
                )

        for problem in problems:
            logger.warning(f"Inconsistent counter: {problem}")
        return problems
