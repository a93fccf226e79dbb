"""GraphQL enums, registered once on the ORM enum classes."""

import strawberry

from food_delivery.models import OrderStatus, UserRole

UserRole = strawberry.enum(UserRole, description="Account role")
OrderStatus = strawberry.enum(OrderStatus, description="Order workflow status")

__all__ = ["UserRole", "OrderStatus"]
