"""
GraphQL operation results.

Every operation answers with ``ok`` and ``error``; successful results add
their payload fields. Services construct these directly.
"""

from typing import List, Optional

import strawberry

from food_delivery.api.types import (
    CategoryType,
    OrderType,
    PaymentType,
    RestaurantType,
    UserType,
)


@strawberry.type
class CoreOutput:
    ok: bool
    error: Optional[str] = None


@strawberry.type
class PaginationOutput(CoreOutput):
    total_pages: Optional[int] = None
    total_results: Optional[int] = None


# =============================================================================
# USERS
# =============================================================================

@strawberry.type
class LoginOutput(CoreOutput):
    token: Optional[str] = None


@strawberry.type
class UserProfileOutput(CoreOutput):
    user: Optional[UserType] = None


# =============================================================================
# RESTAURANTS
# =============================================================================

@strawberry.type
class CreateRestaurantOutput(CoreOutput):
    restaurant_id: Optional[int] = None


@strawberry.type
class RestaurantOutput(CoreOutput):
    restaurant: Optional[RestaurantType] = None


@strawberry.type
class MyRestaurantsOutput(CoreOutput):
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class RestaurantsOutput(PaginationOutput):
    results: Optional[List[RestaurantType]] = None


@strawberry.type
class SearchRestaurantOutput(PaginationOutput):
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class AllCategoriesOutput(CoreOutput):
    categories: Optional[List[CategoryType]] = None


@strawberry.type
class CategoryOutput(PaginationOutput):
    category: Optional[CategoryType] = None
    restaurants: Optional[List[RestaurantType]] = None


@strawberry.type
class CreateDishOutput(CoreOutput):
    dish_id: Optional[int] = None


# =============================================================================
# ORDERS
# =============================================================================

@strawberry.type
class CreateOrderOutput(CoreOutput):
    order_id: Optional[int] = None


@strawberry.type
class GetOrdersOutput(CoreOutput):
    orders: Optional[List[OrderType]] = None


@strawberry.type
class GetOrderOutput(CoreOutput):
    order: Optional[OrderType] = None


# =============================================================================
# PAYMENTS
# =============================================================================

@strawberry.type
class GetPaymentsOutput(CoreOutput):
    payments: Optional[List[PaymentType]] = None
