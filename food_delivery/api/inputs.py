"""
GraphQL input types.

Field names mirror ``food_delivery.schemas``; services validate these
objects against the pydantic schemas before touching the database.
"""

from typing import List, Optional

import strawberry

from food_delivery.api.enums import OrderStatus, UserRole


# =============================================================================
# USERS
# =============================================================================

@strawberry.input
class CreateAccountInput:
    email: str
    password: str
    role: UserRole


@strawberry.input
class LoginInput:
    email: str
    password: str


@strawberry.input
class EditProfileInput:
    email: Optional[str] = None
    password: Optional[str] = None


@strawberry.input
class UserProfileInput:
    user_id: int


@strawberry.input
class VerifyEmailInput:
    code: str


# =============================================================================
# RESTAURANTS & CATEGORIES
# =============================================================================

@strawberry.input
class CreateRestaurantInput:
    name: str
    cover_img: str
    address: str
    category_name: str


@strawberry.input
class EditRestaurantInput:
    restaurant_id: int
    name: Optional[str] = None
    cover_img: Optional[str] = None
    address: Optional[str] = None
    category_name: Optional[str] = None


@strawberry.input
class RestaurantIdInput:
    restaurant_id: int


@strawberry.input
class RestaurantsInput:
    page: int = 1


@strawberry.input
class SearchRestaurantInput:
    query: str
    page: int = 1


@strawberry.input
class CategoryInput:
    slug: str
    page: int = 1


# =============================================================================
# DISHES
# =============================================================================

@strawberry.input
class DishChoiceInput:
    name: str
    extra: Optional[int] = None


@strawberry.input
class DishOptionInput:
    name: str
    choices: Optional[List[DishChoiceInput]] = None
    extra: Optional[int] = None


@strawberry.input
class CreateDishInput:
    restaurant_id: int
    name: str
    price: int
    description: str
    photo: Optional[str] = None
    options: Optional[List[DishOptionInput]] = None


@strawberry.input
class EditDishInput:
    dish_id: int
    name: Optional[str] = None
    price: Optional[int] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    options: Optional[List[DishOptionInput]] = None


@strawberry.input
class DishIdInput:
    dish_id: int


# =============================================================================
# ORDERS
# =============================================================================

@strawberry.input
class OrderItemOptionInput:
    name: str
    choice: Optional[str] = None


@strawberry.input
class CreateOrderItemInput:
    dish_id: int
    options: Optional[List[OrderItemOptionInput]] = None


@strawberry.input
class CreateOrderInput:
    restaurant_id: int
    items: List[CreateOrderItemInput]


@strawberry.input
class GetOrdersInput:
    status: Optional[OrderStatus] = None


@strawberry.input
class OrderIdInput:
    id: int


@strawberry.input
class EditOrderInput:
    id: int
    status: OrderStatus


# =============================================================================
# PAYMENTS
# =============================================================================

@strawberry.input
class CreatePaymentInput:
    transaction_id: str
    restaurant_id: int
