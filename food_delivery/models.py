"""
SQLAlchemy Database Models

Relational model of the delivery platform:
- Users with roles and email verification
- Restaurants grouped by category, each with a dish menu
- Orders with line items and a status workflow
- Promotion payments
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from food_delivery.database import Base


class UserRole(str, enum.Enum):
    """Who the account belongs to."""
    CLIENT = "client"
    OWNER = "owner"
    DELIVERY = "delivery"


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    COOKING = "cooking"
    COOKED = "cooked"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Primary key and audit timestamps shared by every table."""
    # Python-side timestamps keep loaded rows readable without a refresh
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


# =============================================================================
# USERS
# =============================================================================

class User(TimestampMixin, Base):
    """
    Platform account.

    The password column always holds a bcrypt hash; services hash before
    assigning it.
    """
    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, index=True)
    verified = Column(Boolean, nullable=False, default=False)

    restaurants = relationship(
        "Restaurant", back_populates="owner", passive_deletes=True
    )
    orders = relationship(
        "Order", back_populates="customer", foreign_keys="Order.customer_id",
        passive_deletes=True,
    )
    rides = relationship(
        "Order", back_populates="driver", foreign_keys="Order.driver_id",
        passive_deletes=True,
    )
    payments = relationship("Payment", back_populates="user", passive_deletes=True)
    verification = relationship(
        "Verification", back_populates="user", uselist=False, passive_deletes=True
    )

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.role.value}>"


class Verification(TimestampMixin, Base):
    """One-time email verification code, one per user."""
    __tablename__ = "verifications"

    code = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    user = relationship("User", back_populates="verification")


# =============================================================================
# CATALOG
# =============================================================================

class Category(TimestampMixin, Base):
    """Restaurant category, addressed by slug."""
    __tablename__ = "categories"

    name = Column(String(100), nullable=False, unique=True)
    cover_img = Column(String(500), nullable=True)
    slug = Column(String(120), nullable=False, unique=True, index=True)

    restaurants = relationship("Restaurant", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<Category {self.slug}>"


class Restaurant(TimestampMixin, Base):
    """A restaurant owned by an OWNER account."""
    __tablename__ = "restaurants"

    name = Column(String(100), nullable=False, index=True)
    cover_img = Column(String(500), nullable=False)
    address = Column(String(255), nullable=False)
    is_promoted = Column(Boolean, nullable=False, default=False, index=True)
    promoted_until = Column(DateTime(timezone=True), nullable=True)

    owner_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    owner = relationship("User", back_populates="restaurants")
    category = relationship("Category", back_populates="restaurants")
    menu = relationship(
        "Dish", back_populates="restaurant", passive_deletes=True, order_by="Dish.id"
    )
    orders = relationship(
        "Order", back_populates="restaurant", passive_deletes=True, order_by="Order.id"
    )
    payments = relationship("Payment", back_populates="restaurant", passive_deletes=True)

    def __repr__(self):
        return f"<Restaurant #{self.id} - {self.name}>"


class Dish(TimestampMixin, Base):
    """
    Menu entry.

    ``options`` is a JSON list shaped like::

        [{"name": "Spice level", "choices": [{"name": "Hot", "extra": 1}]},
         {"name": "Extra cheese", "extra": 2}]
    """
    __tablename__ = "dishes"

    name = Column(String(100), nullable=False)
    price = Column(Integer, nullable=False)
    photo = Column(String(500), nullable=True)
    description = Column(Text, nullable=False)
    options = Column(JSON, nullable=False, default=list)

    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )

    restaurant = relationship("Restaurant", back_populates="menu")

    def __repr__(self):
        return f"<Dish #{self.id} - {self.name} - {self.price}>"


# =============================================================================
# ORDERS
# =============================================================================

class Order(TimestampMixin, Base):
    """
    Customer order.

    Tracks the lifecycle from placement through cooking to delivery.
    """
    __tablename__ = "orders"

    total = Column(Float, nullable=True)
    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )

    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    driver_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True, index=True
    )

    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    driver = relationship("User", back_populates="rides", foreign_keys=[driver_id])
    restaurant = relationship("Restaurant", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order #{self.id} - {self.status.value} - {self.total}>"


class OrderItem(TimestampMixin, Base):
    """
    Line item of an order.

    ``options`` is a JSON list of the selections: ``[{"name": ..., "choice": ...}]``.
    """
    __tablename__ = "order_items"

    options = Column(JSON, nullable=False, default=list)

    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    dish_id = Column(
        Integer, ForeignKey("dishes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    order = relationship("Order", back_populates="items")
    dish = relationship("Dish")


# =============================================================================
# PAYMENTS
# =============================================================================

class Payment(TimestampMixin, Base):
    """Promotion payment made by a restaurant owner."""
    __tablename__ = "payments"

    transaction_id = Column(String(255), nullable=False, index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user = relationship("User", back_populates="payments")
    restaurant = relationship("Restaurant", back_populates="payments")

    def __repr__(self):
        return f"<Payment #{self.id} - {self.transaction_id}>"
