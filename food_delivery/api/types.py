"""
GraphQL object types.

Resolvers return ORM rows; these types read columns straight off the row and
load relationships on demand through ``awaitable_attrs``.
"""

from datetime import datetime
from typing import List, Optional

import strawberry
from strawberry.types import Info

from food_delivery.api.enums import OrderStatus, UserRole
from food_delivery.api.permissions import IsRestaurantOwner, IsSelf


@strawberry.type(name="User")
class UserType:
    id: int
    email: str
    role: UserRole
    verified: bool
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def restaurants(self) -> List["RestaurantType"]:
        return await self.awaitable_attrs.restaurants

    @strawberry.field(permission_classes=[IsSelf])
    async def payments(self) -> List["PaymentType"]:
        return await self.awaitable_attrs.payments


@strawberry.type(name="Category")
class CategoryType:
    id: int
    name: str
    cover_img: Optional[str]
    slug: str
    created_at: datetime

    @strawberry.field
    async def restaurant_count(self, info: Info) -> int:
        return await info.context.restaurants.count_restaurants(self)


@strawberry.type(name="DishChoice")
class DishChoiceType:
    name: str
    extra: Optional[int] = None


@strawberry.type(name="DishOption")
class DishOptionType:
    name: str
    choices: Optional[List[DishChoiceType]] = None
    extra: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DishOptionType":
        choices = data.get("choices")
        return cls(
            name=data["name"],
            extra=data.get("extra"),
            choices=[
                DishChoiceType(name=c["name"], extra=c.get("extra")) for c in choices
            ] if choices is not None else None,
        )


@strawberry.type(name="Dish")
class DishType:
    id: int
    name: str
    price: int
    photo: Optional[str]
    description: str
    restaurant_id: int

    @strawberry.field
    def options(self) -> List[DishOptionType]:
        return [DishOptionType.from_dict(o) for o in self.options or []]

    @strawberry.field
    async def restaurant(self) -> "RestaurantType":
        return await self.awaitable_attrs.restaurant


@strawberry.type(name="Restaurant")
class RestaurantType:
    id: int
    name: str
    cover_img: str
    address: str
    is_promoted: bool
    promoted_until: Optional[datetime]
    owner_id: int
    created_at: datetime

    @strawberry.field
    async def owner(self) -> UserType:
        return await self.awaitable_attrs.owner

    @strawberry.field
    async def category(self) -> Optional[CategoryType]:
        return await self.awaitable_attrs.category

    @strawberry.field
    async def menu(self) -> List[DishType]:
        return await self.awaitable_attrs.menu

    @strawberry.field(permission_classes=[IsRestaurantOwner])
    async def orders(self) -> List["OrderType"]:
        return await self.awaitable_attrs.orders


@strawberry.type(name="OrderItemOption")
class OrderItemOptionType:
    name: str
    choice: Optional[str] = None


@strawberry.type(name="OrderItem")
class OrderItemType:
    id: int

    @strawberry.field
    async def dish(self) -> DishType:
        return await self.awaitable_attrs.dish

    @strawberry.field
    def options(self) -> List[OrderItemOptionType]:
        return [
            OrderItemOptionType(name=o["name"], choice=o.get("choice"))
            for o in self.options or []
        ]


@strawberry.type(name="Order")
class OrderType:
    id: int
    total: Optional[float]
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def customer(self) -> Optional[UserType]:
        return await self.awaitable_attrs.customer

    @strawberry.field
    async def driver(self) -> Optional[UserType]:
        return await self.awaitable_attrs.driver

    @strawberry.field
    async def restaurant(self) -> Optional[RestaurantType]:
        return await self.awaitable_attrs.restaurant

    @strawberry.field
    async def items(self) -> List[OrderItemType]:
        return await self.awaitable_attrs.items


@strawberry.type(name="Payment")
class PaymentType:
    id: int
    transaction_id: str
    restaurant_id: int
    created_at: datetime

    @strawberry.field
    async def restaurant(self) -> RestaurantType:
        return await self.awaitable_attrs.restaurant
