"""
Orders Service

Order placement and the status workflow:
- Clients place orders for dishes of a single restaurant
- Owners move orders through cooking
- Drivers pick orders up and deliver them

Every change is announced on the pub/sub channels that feed the GraphQL
subscriptions.
"""

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from food_delivery import schemas
from food_delivery.api.outputs import (
    CoreOutput,
    CreateOrderOutput,
    GetOrderOutput,
    GetOrdersOutput,
)
from food_delivery.models import (
    Dish,
    Order,
    OrderItem,
    OrderStatus,
    Restaurant,
    User,
    UserRole,
)
from food_delivery.services.base import BaseService, handle_errors
from food_delivery.services.exceptions import (
    AccessDenied,
    InvalidOrder,
    RecordNotFound,
)
from food_delivery.services.pubsub import (
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER,
    BasePubSub,
)

logger = logging.getLogger(__name__)

# Statuses each role may set
ALLOWED_STATUSES = {
    UserRole.CLIENT: (),
    UserRole.OWNER: (OrderStatus.COOKING, OrderStatus.COOKED),
    UserRole.DELIVERY: (OrderStatus.PICKED_UP, OrderStatus.DELIVERED),
}


def price_item(dish: Dish, selections: list[schemas.OrderItemOption]) -> float:
    """
    Price one line item: the dish price plus the extras of its selections.

    An option with its own ``extra`` costs that extra; otherwise the extra of
    the selected choice applies.

    Raises:
        InvalidOrder: Selection names an option or choice the dish lacks
    """
    options = {option["name"]: option for option in dish.options or []}
    price = dish.price

    for selection in selections:
        option = options.get(selection.name)
        if option is None:
            raise InvalidOrder("Option not found")

        if option.get("extra") is not None:
            price += option["extra"]
        elif selection.choice is not None:
            choices = {c["name"]: c for c in option.get("choices") or []}
            choice = choices.get(selection.choice)
            if choice is None:
                raise InvalidOrder("Choice not found")
            price += choice.get("extra") or 0

    return price


def can_see_order(user: User, order: Order, restaurant_owner_id: Optional[int]) -> bool:
    """True when ``user`` is the order's customer, driver or restaurant owner."""
    if user.role == UserRole.CLIENT:
        return order.customer_id == user.id
    if user.role == UserRole.DELIVERY:
        return order.driver_id == user.id
    if user.role == UserRole.OWNER:
        return restaurant_owner_id == user.id
    return False


class OrdersService(BaseService):
    """Order operations for the GraphQL resolvers."""

    def __init__(self, db: AsyncSession, pubsub: BasePubSub):
        super().__init__(db)
        self.pubsub = pubsub

    async def _owner_id(self, order: Order) -> Optional[int]:
        if order.restaurant_id is None:
            return None
        restaurant = await self.db.get(Restaurant, order.restaurant_id)
        return restaurant.owner_id if restaurant else None

    async def _visible_order(self, user: User, order_id: int) -> tuple[Order, Optional[int]]:
        order = await self.db.get(Order, order_id)
        if order is None:
            raise RecordNotFound("Order not found")
        owner_id = await self._owner_id(order)
        if not can_see_order(user, order, owner_id):
            raise AccessDenied("You can't see that")
        return order, owner_id

    async def _publish_update(self, order: Order, owner_id: Optional[int]) -> None:
        await self.pubsub.publish(
            NEW_ORDER_UPDATE,
            {
                "order_id": order.id,
                "customer_id": order.customer_id,
                "driver_id": order.driver_id,
                "owner_id": owner_id,
            },
        )

    async def watch(
        self,
        channel: str,
        accept: Callable[[dict[str, Any]], bool],
    ) -> AsyncIterator[Order]:
        """
        Yield the orders announced on ``channel`` whose event passes ``accept``.

        Events only carry ids, so each order is reloaded to pick up changes
        committed by other sessions.
        """
        async with aclosing(self.pubsub.subscribe(channel)) as events:
            async for payload in events:
                if not accept(payload):
                    continue
                order = await self.db.get(Order, payload["order_id"], populate_existing=True)
                if order is not None:
                    yield order

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    @handle_errors(CreateOrderOutput, "Could not create order.")
    async def create_order(self, customer: User, input: Any) -> CreateOrderOutput:
        """
        Place an order.

        Every item is checked and priced before anything is written, so a bad
        item leaves no partial order behind.
        """
        data = schemas.CreateOrderInput.model_validate(input)

        restaurant = await self.db.get(Restaurant, data.restaurant_id)
        if restaurant is None:
            raise RecordNotFound("Restaurant not found")
        if not data.items:
            raise InvalidOrder("Order must contain at least one item")

        total = 0.0
        items = []
        for item in data.items:
            dish = await self.db.get(Dish, item.dish_id)
            if dish is None:
                raise RecordNotFound("Dish not found")
            if dish.restaurant_id != restaurant.id:
                raise InvalidOrder("Dish does not belong to this restaurant")

            total += price_item(dish, item.options)
            items.append(
                OrderItem(
                    dish_id=dish.id,
                    options=[o.model_dump(exclude_none=True) for o in item.options],
                )
            )

        order = Order(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            total=total,
            status=OrderStatus.PENDING,
            items=items,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info(
            f"Order #{order.id} placed by user #{customer.id} "
            f"at restaurant #{restaurant.id}: {len(items)} item(s), total {total}"
        )
        await self.pubsub.publish(
            NEW_PENDING_ORDER,
            {"order_id": order.id, "owner_id": restaurant.owner_id},
        )
        return CreateOrderOutput(ok=True, order_id=order.id)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    @handle_errors(GetOrdersOutput, "Could not get orders")
    async def get_orders(self, user: User, input: Any) -> GetOrdersOutput:
        data = schemas.GetOrdersInput.model_validate(input or {})

        query = select(Order)
        if user.role == UserRole.CLIENT:
            query = query.where(Order.customer_id == user.id)
        elif user.role == UserRole.DELIVERY:
            query = query.where(Order.driver_id == user.id)
        else:
            query = query.join(Restaurant, Order.restaurant_id == Restaurant.id).where(
                Restaurant.owner_id == user.id
            )

        if data.status is not None:
            query = query.where(Order.status == data.status)

        result = await self.db.execute(query.order_by(Order.id))
        return GetOrdersOutput(ok=True, orders=list(result.scalars().all()))

    @handle_errors(GetOrderOutput, "Could not load order")
    async def get_order(self, user: User, input: Any) -> GetOrderOutput:
        data = schemas.OrderIdInput.model_validate(input)

        order, _ = await self._visible_order(user, data.id)
        return GetOrderOutput(ok=True, order=order)

    # =========================================================================
    # STATUS WORKFLOW
    # =========================================================================

    @handle_errors(CoreOutput, "Could not edit order.")
    async def edit_order(self, user: User, input: Any) -> CoreOutput:
        data = schemas.EditOrderInput.model_validate(input)

        order, owner_id = await self._visible_order(user, data.id)
        if data.status not in ALLOWED_STATUSES.get(user.role, ()):
            raise AccessDenied("You can't do that.")

        previous = order.status
        order.status = data.status
        await self.db.commit()

        logger.info(
            f"Order #{order.id} status: {previous.value} -> {order.status.value} "
            f"(by user #{user.id})"
        )
        if order.status == OrderStatus.COOKED:
            await self.pubsub.publish(
                NEW_COOKED_ORDER,
                {"order_id": order.id, "owner_id": owner_id},
            )
        await self._publish_update(order, owner_id)
        return CoreOutput(ok=True)

    @handle_errors(CoreOutput, "Could not take order.")
    async def take_order(self, driver: User, input: Any) -> CoreOutput:
        data = schemas.OrderIdInput.model_validate(input)

        order = await self.db.get(Order, data.id)
        if order is None:
            raise RecordNotFound("Order not found")
        if order.driver_id is not None:
            raise InvalidOrder("This order already has a driver")

        # Another driver may have claimed it since it was loaded
        result = await self.db.execute(
            update(Order)
            .where(Order.id == order.id, Order.driver_id.is_(None))
            .values(driver_id=driver.id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise InvalidOrder("This order already has a driver")
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} taken by driver #{driver.id}")
        await self._publish_update(order, await self._owner_id(order))
        return CoreOutput(ok=True)
