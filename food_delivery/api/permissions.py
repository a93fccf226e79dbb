"""
Role-based permissions for resolvers and fields.

Operations declare who may call them; a missing or invalid token, or the
wrong role, fails with ``Forbidden resource``.
"""

from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from food_delivery.models import UserRole


class RolePermission(BasePermission):
    """Grants access to authenticated users holding one of ``roles``.

    An empty ``roles`` tuple admits any authenticated user.
    """
    message = "Forbidden resource"
    roles: tuple[UserRole, ...] = ()

    async def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        user = await info.context.get_current_user()
        if user is None:
            return False
        return not self.roles or user.role in self.roles


class IsAuthenticated(RolePermission):
    roles = ()


class IsClient(RolePermission):
    roles = (UserRole.CLIENT,)


class IsOwner(RolePermission):
    roles = (UserRole.OWNER,)


class IsDelivery(RolePermission):
    roles = (UserRole.DELIVERY,)


# =============================================================================
# FIELD-LEVEL
# =============================================================================

class IsRestaurantOwner(BasePermission):
    """Field guard on Restaurant: only the owning user may read it."""
    message = "Forbidden resource"

    async def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        user = await info.context.get_current_user()
        return user is not None and source.owner_id == user.id


class IsSelf(BasePermission):
    """Field guard on User: only that user may read it."""
    message = "Forbidden resource"

    async def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        user = await info.context.get_current_user()
        return user is not None and source.id == user.id
