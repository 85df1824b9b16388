"""Entity, input and view models for the entity store.

Entities are the rows held by the store. ``*Create`` models carry the
caller-supplied fields for a new row, ``*Update`` models list exactly the
fields a caller may change afterwards. Derived counters never appear in
either, so a generic update cannot overwrite them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NotificationType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    PURCHASE = "purchase"
    SALE = "sale"
    REVIEW = "review"


class ProductType(str, Enum):
    COURSE = "course"
    PRODUCT = "product"
    SERVICE = "service"
    EVENT = "event"
    OTHER = "other"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# Notification types whose resource_id points at a post
POST_NOTIFICATION_TYPES = {NotificationType.LIKE, NotificationType.COMMENT}


# Entities


class User(BaseModel):
    """A registered user with derived social counters."""
    id: int
    username: str
    password: str = Field(repr=False)
    name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar: Optional[str] = None
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_seller: bool = False
    stripe_customer_id: Optional[str] = None
    stripe_account_id: Optional[str] = None
    firebase_uid: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Post(BaseModel):
    id: int
    user_id: int
    image_url: str
    caption: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime


class Like(BaseModel):
    id: int
    user_id: int
    post_id: int
    created_at: datetime


class Comment(BaseModel):
    id: int
    user_id: int
    post_id: int
    content: str
    created_at: datetime


class Follow(BaseModel):
    id: int
    follower_id: int
    following_id: int
    created_at: datetime


class Notification(BaseModel):
    """A message addressed to ``user_id`` about an action by another user.

    The meaning of ``resource_id`` depends on ``type``: a post id for
    likes and comments, an order id for purchases and sales, a product id
    for reviews, and nothing for follows.
    """
    id: int
    user_id: int
    triggered_by_user_id: Optional[int] = None
    type: NotificationType
    resource_id: Optional[int] = None
    read: bool = False
    created_at: datetime


class Product(BaseModel):
    id: int
    seller_id: int
    title: str
    description: str
    price: Decimal
    image_url: str
    type: ProductType
    category: str
    featured: bool = False
    sales_count: int = 0
    created_at: datetime
    updated_at: datetime


class Order(BaseModel):
    """A purchase of one product.

    ``status`` is a plain string: the store records whatever the caller
    sets and leaves checking it against ``OrderStatus`` to the caller.
    """
    id: int
    user_id: int
    product_id: int
    payment_reference: Optional[str] = None
    amount: Decimal
    status: str = OrderStatus.PENDING.value
    created_at: datetime


class Review(BaseModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Create models


class UserCreate(BaseModel):
    username: str
    password: str = Field(repr=False)
    name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar: Optional[str] = None
    is_seller: bool = False
    stripe_customer_id: Optional[str] = None
    stripe_account_id: Optional[str] = None
    firebase_uid: Optional[str] = None


class PostCreate(BaseModel):
    user_id: int
    image_url: str
    caption: Optional[str] = None


class CommentCreate(BaseModel):
    user_id: int
    post_id: int
    content: str


class NotificationCreate(BaseModel):
    user_id: int
    triggered_by_user_id: Optional[int] = None
    type: NotificationType
    resource_id: Optional[int] = None


class ProductCreate(BaseModel):
    seller_id: int
    title: str
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image_url: str
    type: ProductType = ProductType.PRODUCT
    category: str
    featured: bool = False


class OrderCreate(BaseModel):
    user_id: int
    product_id: int
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    payment_reference: Optional[str] = None


class ReviewCreate(BaseModel):
    user_id: int
    product_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


# Update models
#
# Unknown and derived fields are rejected rather than ignored, as is an
# explicit None for a field the entity requires.


def _reject_cleared(model: BaseModel, required: Set[str]) -> None:
    cleared = sorted(f for f in required if f in model.model_fields_set and getattr(model, f) is None)
    if cleared:
        raise ValueError(f"Cannot clear required fields: {', '.join(cleared)}")


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra='forbid')

    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar: Optional[str] = None

    @model_validator(mode='after')
    def check_required(self) -> 'UserUpdate':
        _reject_cleared(self, {'username', 'password', 'name'})
        return self


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    type: Optional[ProductType] = None
    category: Optional[str] = None
    featured: Optional[bool] = None

    @model_validator(mode='after')
    def check_required(self) -> 'ProductUpdate':
        _reject_cleared(self, {'title', 'description', 'price', 'image_url', 'type', 'category', 'featured'})
        return self


# Views


class PostWithUser(Post):
    user: User


class NotificationWithUsers(Notification):
    triggered_by_user: User
    post: Optional[Post] = None


class ProductWithSeller(Product):
    seller: User


class ReviewWithUser(Review):
    user: User


class ProductWithReviews(ProductWithSeller):
    reviews: List[ReviewWithUser] = Field(default_factory=list)
    average_rating: Optional[float] = None


def _strip_passwords(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: _strip_passwords(item)
            for key, item in value.items()
            if key != 'password'
        }
    if isinstance(value, list):
        return [_strip_passwords(item) for item in value]
    return value


def dump_public(model: BaseModel) -> Dict[str, Any]:
    """Serialize an entity or view to JSON-ready data without passwords.

    Nested users (post authors, notification actors, sellers) are
    stripped as well.
    """
    return _strip_passwords(model.model_dump(mode='json'))
