"""Marketplace operations: products, orders and reviews.

This module provides functionality for:
- Creating and managing product listings
- Recording orders and counting sales
- Collecting one review per buyer and product
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import (
    NotificationType,
    Order,
    OrderCreate,
    OrderStatus,
    Product,
    ProductCreate,
    ProductUpdate,
    ProductWithReviews,
    ProductWithSeller,
    Review,
    ReviewCreate,
    ReviewWithUser,
)
from .notifications import NotificationOperations

logger = logging.getLogger(__name__)


class CommerceOperations(NotificationOperations):
    """Products, orders and reviews."""

    # Products

    async def create_product(self, data: Union[ProductCreate, Dict[str, Any]]) -> Product:
        """Create a product listing.

        The seller becomes a seller (``is_seller``) with their first product.
        """
        data = self._coerce(ProductCreate, data)
        now = self._now()
        product = Product(
            id=self._next_id('products'),
            sales_count=0,
            created_at=now,
            updated_at=now,
            **data.model_dump()
        )
        self._products[product.id] = product

        seller = self._users.get(product.seller_id)
        if seller and not seller.is_seller:
            seller.is_seller = True
            seller.updated_at = now
            logger.info(f"User {seller.id} became a seller with product {product.id}")

        return self._copy(product)

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self._copy(self._products.get(product_id))

    async def get_product_with_reviews(self, product_id: int) -> Optional[ProductWithReviews]:
        """A product with its seller, reviews and average rating.

        Returns None if the product or its seller does not exist.
        """
        product = self._products.get(product_id)
        if not product:
            return None
        seller = self._users.get(product.seller_id)
        if not seller:
            return None

        reviews = self._joined_reviews(product_id)
        average = None
        if reviews:
            total = Decimal(sum(review.rating for review in reviews))
            average = float((total / len(reviews)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))

        return ProductWithReviews(
            **product.model_dump(),
            seller=self._copy(seller),
            reviews=reviews,
            average_rating=average
        )

    async def get_all_products(
        self,
        category: Optional[str] = None,
        type: Optional[str] = None
    ) -> List[ProductWithSeller]:
        """Products with their seller, newest first.

        Args:
            category: Only products in this category
            type: Only products of this type
        """
        products = self._products.values()
        if category is not None:
            products = [p for p in products if p.category == category]
        if type is not None:
            products = [p for p in products if p.type == type]
        return self._joined_products(products)

    async def get_featured_products(self) -> List[ProductWithSeller]:
        return self._joined_products(p for p in self._products.values() if p.featured)

    async def get_seller_products(self, seller_id: int) -> List[Product]:
        return [
            self._copy(product) for product in
            self._newest_first(p for p in self._products.values() if p.seller_id == seller_id)
        ]

    async def update_product(
        self,
        product_id: int,
        data: Union[ProductUpdate, Dict[str, Any]]
    ) -> Optional[Product]:
        """Apply a partial update to a product listing.

        Raises:
            ValidationError: If ``data`` names a field that cannot be
                updated, such as ``sales_count``, or clears a required one
        """
        product = self._products.get(product_id)
        if not product:
            return None

        changes = self._coerce(ProductUpdate, data).model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        product.updated_at = self._now()
        return self._copy(product)

    async def delete_product(self, product_id: int) -> bool:
        """Delete a product and its reviews. Orders are kept."""
        product = self._products.pop(product_id, None)
        if not product:
            return False

        review_ids = self._product_reviews.pop(product_id, set())
        for review_id in review_ids:
            review = self._reviews.pop(review_id)
            del self._review_index[(review.user_id, review.product_id)]

        logger.debug(f"Deleted product {product_id} with {len(review_ids)} reviews")
        return True

    # Orders

    async def create_order(self, data: Union[OrderCreate, Dict[str, Any]]) -> Order:
        """Record an order for a product.

        Orders start out pending. The product's sales count goes up right
        away, not when the order completes. The seller gets a "purchase"
        notification and the buyer a "sale" notification, both pointing at
        the order.
        """
        data = self._coerce(OrderCreate, data)
        order = Order(
            id=self._next_id('orders'),
            status=OrderStatus.PENDING.value,
            created_at=self._now(),
            **data.model_dump()
        )
        self._orders[order.id] = order

        product = self._products.get(order.product_id)
        if not product:
            logger.debug(f"Order {order.id} product {order.product_id} not found, skipping side effects")
            return self._copy(order)

        product.sales_count += 1
        self._notify(
            product.seller_id,
            NotificationType.PURCHASE,
            triggered_by_user_id=order.user_id,
            resource_id=order.id
        )
        self._notify(
            order.user_id,
            NotificationType.SALE,
            triggered_by_user_id=product.seller_id,
            resource_id=order.id
        )
        logger.info(f"Order {order.id}: user {order.user_id} bought product {product.id}")
        return self._copy(order)

    async def get_order(self, order_id: int) -> Optional[Order]:
        return self._copy(self._orders.get(order_id))

    async def get_order_by_payment_reference(self, payment_reference: str) -> Optional[Order]:
        for order in self._orders.values():
            if order.payment_reference == payment_reference:
                return self._copy(order)
        return None

    async def get_user_orders(self, user_id: int) -> List[Order]:
        """Orders placed by a buyer, newest first."""
        return [
            self._copy(order) for order in
            self._newest_first(o for o in self._orders.values() if o.user_id == user_id)
        ]

    async def get_seller_orders(self, seller_id: int) -> List[Order]:
        """Orders for any product the seller still lists, newest first."""
        product_ids = {p.id for p in self._products.values() if p.seller_id == seller_id}
        return [
            self._copy(order) for order in
            self._newest_first(o for o in self._orders.values() if o.product_id in product_ids)
        ]

    async def update_order_status(self, order_id: int, status: str) -> Optional[Order]:
        """Replace an order's status.

        The value is stored as given; callers are expected to pass one of
        ``OrderStatus``.
        """
        order = self._orders.get(order_id)
        if not order:
            return None
        order.status = status.value if isinstance(status, OrderStatus) else status
        logger.debug(f"Order {order_id} status set to {order.status}")
        return self._copy(order)

    # Reviews

    async def create_review(self, data: Union[ReviewCreate, Dict[str, Any]]) -> Review:
        """Review a product, or revise an earlier review of it.

        A user has at most one review per product. A second call updates
        the rating, and the comment when one is passed, of the existing
        review in place; only a new review notifies the seller.
        """
        data = self._coerce(ReviewCreate, data)
        now = self._now()

        existing_id = self._review_index.get((data.user_id, data.product_id))
        if existing_id is not None:
            review = self._reviews[existing_id]
            review.rating = data.rating
            if 'comment' in data.model_fields_set:
                review.comment = data.comment
            review.updated_at = now
            logger.debug(f"Updated review {review.id} to rating {review.rating}")
            return self._copy(review)

        review = Review(
            id=self._next_id('reviews'),
            created_at=now,
            updated_at=now,
            **data.model_dump()
        )
        self._reviews[review.id] = review
        self._review_index[(review.user_id, review.product_id)] = review.id
        self._product_reviews[review.product_id].add(review.id)

        product = self._products.get(review.product_id)
        if product:
            self._notify(
                product.seller_id,
                NotificationType.REVIEW,
                triggered_by_user_id=review.user_id,
                resource_id=product.id
            )
        return self._copy(review)

    async def get_product_reviews(self, product_id: int) -> List[ReviewWithUser]:
        """Reviews of a product with their authors, newest first."""
        return self._joined_reviews(product_id)

    async def delete_review(self, review_id: int) -> bool:
        review = self._reviews.pop(review_id, None)
        if not review:
            return False
        del self._review_index[(review.user_id, review.product_id)]
        self._product_reviews[review.product_id].discard(review_id)
        return True

    def _joined_products(self, products: Iterable[Product]) -> List[ProductWithSeller]:
        joined = []
        for product in self._newest_first(products):
            seller = self._users.get(product.seller_id)
            if seller:
                joined.append(ProductWithSeller(**product.model_dump(), seller=self._copy(seller)))
        return joined

    def _joined_reviews(self, product_id: int) -> List[ReviewWithUser]:
        reviews = (self._reviews[review_id] for review_id in self._product_reviews.get(product_id, ()))
        joined = []
        for review in self._newest_first(reviews):
            user = self._users.get(review.user_id)
            if user:
                joined.append(ReviewWithUser(**review.model_dump(), user=self._copy(user)))
        return joined
