"""Demo data for a fresh store.

Populates users, posts, follows, likes, comments and a small product
catalogue with a couple of orders and reviews. Everything goes through
the public store operations, so counters and notifications come out the
same as for real traffic.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from .models import ProductType

logger = logging.getLogger(__name__)

# Test data for users
USERS_DATA = [
    {
        "username": "ana.silva",
        "name": "Ana Silva",
        "location": "Rio de Janeiro",
        "bio": "Photographer | Beach lover",
        "avatar": "https://images.unsplash.com/photo-1534528741775-53994a69daeb?w=200&h=200"
    },
    {
        "username": "carlos.mendes",
        "name": "Carlos Mendes",
        "location": "São Paulo",
        "bio": "Adventure enthusiast",
        "avatar": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=200&h=200"
    },
    {
        "username": "sofia.almeida",
        "name": "Sofia Almeida",
        "location": "Recife",
        "bio": "Food blogger",
        "avatar": "https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=200&h=200"
    },
    {
        "username": "miguel.santos",
        "name": "Miguel Santos",
        "location": "Florianópolis",
        "bio": "Surfer | Travel enthusiast",
        "avatar": "https://images.unsplash.com/photo-1539571696357-5a69c17a67c6?w=200&h=200"
    },
    {
        "username": "julia.lima",
        "name": "Julia Lima",
        "location": "Salvador",
        "bio": "Car enthusiast | Fashion",
        "avatar": "https://images.unsplash.com/photo-1517841905240-472988babdf9?w=200&h=200"
    },
    {
        "username": "rafael.costa",
        "name": "Rafael Costa",
        "location": "Brasília",
        "bio": "Photographer | Traveller | Nature lover",
        "avatar": "https://images.unsplash.com/photo-1531746020798-e6953c6e8e04?w=200&h=200"
    },
]

# (author index, caption, image)
POSTS_DATA = [
    (0, "Enjoying a wonderful day at the beach #summer", "https://images.unsplash.com/photo-1533651180995-3b8dcd33e834?w=900"),
    (1, "Today's trail had breathtaking views #adventure", "https://images.unsplash.com/photo-1506157786151-b8491531f063?w=900"),
    (2, "Perfect lunch, trying out this amazing cuisine #food", "https://images.unsplash.com/photo-1540189549336-e6e99c3679fe?w=900"),
    (3, "New hobby: learning to surf in Floripa #surf", "https://images.unsplash.com/photo-1540339832862-474599807836?w=900"),
    (4, "My new car arrived! Dream come true #newcar", "https://images.unsplash.com/photo-1511919884226-fd3cad34687c?w=900"),
]

# (follower index, following index)
FOLLOWS_DATA = [(5, 0), (5, 1), (5, 2), (0, 5), (1, 5)]

# (user index, post index)
LIKES_DATA = [(5, 0), (5, 1), (0, 4), (1, 4), (2, 4)]

# (user index, post index, content)
COMMENTS_DATA = [
    (1, 0, "Amazing place!"),
    (5, 1, "I want to do this trail too!"),
]

PRODUCTS_DATA = [
    {
        "seller": 5,
        "title": "Landscape Photography Course",
        "description": "Eight lessons on composition, light and editing",
        "price": Decimal("149.90"),
        "image_url": "https://images.unsplash.com/photo-1452587925148-ce544e77e70d?w=900",
        "type": ProductType.COURSE,
        "category": "photography",
        "featured": True
    },
    {
        "seller": 3,
        "title": "Surf Lesson",
        "description": "Two-hour beginner lesson, board included",
        "price": Decimal("80.00"),
        "image_url": "https://images.unsplash.com/photo-1502680390469-be75c86b636f?w=900",
        "type": ProductType.SERVICE,
        "category": "sports",
        "featured": False
    },
    {
        "seller": 2,
        "title": "Regional Recipes E-book",
        "description": "Forty recipes from the northeast coast",
        "price": Decimal("29.90"),
        "image_url": "https://images.unsplash.com/photo-1466637574441-749b8f19452f?w=900",
        "type": ProductType.PRODUCT,
        "category": "food",
        "featured": True
    },
]

# (buyer index, product index)
ORDERS_DATA = [(0, 0), (5, 1)]

# (user index, product index, rating, comment)
REVIEWS_DATA = [
    (0, 0, 5, "Learned a lot, great lessons"),
    (5, 1, 4, None),
]

DEMO_PASSWORD = "password123"


async def seed_demo_data(store) -> Dict[str, List[Any]]:
    """Populate ``store`` with demo rows.

    Returns:
        Dict of the created users, posts and products
    """
    users = []
    for data in USERS_DATA:
        users.append(await store.create_user({**data, "password": DEMO_PASSWORD}))

    posts = []
    for author, caption, image_url in POSTS_DATA:
        posts.append(await store.create_post({
            "user_id": users[author].id,
            "caption": caption,
            "image_url": image_url
        }))

    for follower, following in FOLLOWS_DATA:
        await store.create_follow(users[follower].id, users[following].id)

    for user, post in LIKES_DATA:
        await store.create_like(users[user].id, posts[post].id)

    for user, post, content in COMMENTS_DATA:
        await store.create_comment({
            "user_id": users[user].id,
            "post_id": posts[post].id,
            "content": content
        })

    products = []
    for data in PRODUCTS_DATA:
        fields = {key: value for key, value in data.items() if key != "seller"}
        products.append(await store.create_product({
            "seller_id": users[data["seller"]].id,
            **fields
        }))

    for buyer, product in ORDERS_DATA:
        await store.create_order({
            "user_id": users[buyer].id,
            "product_id": products[product].id,
            "amount": products[product].price
        })

    for user, product, rating, comment in REVIEWS_DATA:
        await store.create_review({
            "user_id": users[user].id,
            "product_id": products[product].id,
            "rating": rating,
            "comment": comment
        })

    logger.info(
        f"Seeded demo data: {len(users)} users, {len(posts)} posts, "
        f"{len(products)} products"
    )
    return {"users": users, "posts": posts, "products": products}
