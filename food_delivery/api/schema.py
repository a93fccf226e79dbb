"""
GraphQL Schema

Queries, mutations and subscriptions. Resolvers check roles through
permission classes and delegate everything else to the domain services
carried by the request context.
"""

from typing import AsyncGenerator, Optional

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from food_delivery.api import inputs
from food_delivery.api.context import get_context
from food_delivery.api.outputs import (
    AllCategoriesOutput,
    CategoryOutput,
    CoreOutput,
    CreateDishOutput,
    CreateOrderOutput,
    CreateRestaurantOutput,
    GetOrderOutput,
    GetOrdersOutput,
    GetPaymentsOutput,
    LoginOutput,
    MyRestaurantsOutput,
    RestaurantOutput,
    RestaurantsOutput,
    SearchRestaurantOutput,
    UserProfileOutput,
)
from food_delivery.api.permissions import IsAuthenticated, IsClient, IsDelivery, IsOwner
from food_delivery.api.types import OrderType, UserType
from food_delivery.services.pubsub import (
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER,
)


# =============================================================================
# QUERIES
# =============================================================================

@strawberry.type
class Query:

    # --- Users ---------------------------------------------------------------

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def me(self, info: Info) -> UserType:
        return await info.context.get_current_user()

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def user_profile(
        self, info: Info, input: inputs.UserProfileInput
    ) -> UserProfileOutput:
        return await info.context.users.user_profile(input)

    # --- Restaurants ---------------------------------------------------------

    @strawberry.field(permission_classes=[IsOwner])
    async def my_restaurants(self, info: Info) -> MyRestaurantsOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.my_restaurants(user)

    @strawberry.field(permission_classes=[IsOwner])
    async def my_restaurant(
        self, info: Info, input: inputs.RestaurantIdInput
    ) -> RestaurantOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.my_restaurant(user, input)

    @strawberry.field
    async def restaurants(self, info: Info, input: inputs.RestaurantsInput) -> RestaurantsOutput:
        return await info.context.restaurants.all_restaurants(input)

    @strawberry.field
    async def restaurant(self, info: Info, input: inputs.RestaurantIdInput) -> RestaurantOutput:
        return await info.context.restaurants.find_restaurant_by_id(input)

    @strawberry.field
    async def search_restaurant(
        self, info: Info, input: inputs.SearchRestaurantInput
    ) -> SearchRestaurantOutput:
        return await info.context.restaurants.search_restaurant_by_name(input)

    @strawberry.field
    async def all_categories(self, info: Info) -> AllCategoriesOutput:
        return await info.context.restaurants.all_categories()

    @strawberry.field
    async def category(self, info: Info, input: inputs.CategoryInput) -> CategoryOutput:
        return await info.context.restaurants.find_category_by_slug(input)

    # --- Orders --------------------------------------------------------------

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def get_orders(
        self, info: Info, input: Optional[inputs.GetOrdersInput] = None
    ) -> GetOrdersOutput:
        user = await info.context.get_current_user()
        return await info.context.orders.get_orders(user, input)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def get_order(self, info: Info, input: inputs.OrderIdInput) -> GetOrderOutput:
        user = await info.context.get_current_user()
        return await info.context.orders.get_order(user, input)

    # --- Payments ------------------------------------------------------------

    @strawberry.field(permission_classes=[IsOwner])
    async def get_payments(self, info: Info) -> GetPaymentsOutput:
        user = await info.context.get_current_user()
        return await info.context.payments.get_payments(user)


# =============================================================================
# MUTATIONS
# =============================================================================

@strawberry.type
class Mutation:

    # --- Users ---------------------------------------------------------------

    @strawberry.mutation
    async def create_account(self, info: Info, input: inputs.CreateAccountInput) -> CoreOutput:
        return await info.context.users.create_account(input)

    @strawberry.mutation
    async def login(self, info: Info, input: inputs.LoginInput) -> LoginOutput:
        return await info.context.users.login(input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def edit_profile(self, info: Info, input: inputs.EditProfileInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.users.edit_profile(user, input)

    @strawberry.mutation
    async def verify_email(self, info: Info, input: inputs.VerifyEmailInput) -> CoreOutput:
        return await info.context.users.verify_email(input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def delete_account(self, info: Info) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.users.delete_account(user)

    # --- Restaurants ---------------------------------------------------------

    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_restaurant(
        self, info: Info, input: inputs.CreateRestaurantInput
    ) -> CreateRestaurantOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.create_restaurant(user, input)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def edit_restaurant(
        self, info: Info, input: inputs.EditRestaurantInput
    ) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.edit_restaurant(user, input)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def delete_restaurant(
        self, info: Info, input: inputs.RestaurantIdInput
    ) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.delete_restaurant(user, input)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_dish(self, info: Info, input: inputs.CreateDishInput) -> CreateDishOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.create_dish(user, input)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def edit_dish(self, info: Info, input: inputs.EditDishInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.edit_dish(user, input)

    @strawberry.mutation(permission_classes=[IsOwner])
    async def delete_dish(self, info: Info, input: inputs.DishIdInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.restaurants.delete_dish(user, input)

    # --- Orders --------------------------------------------------------------

    @strawberry.mutation(permission_classes=[IsClient])
    async def create_order(self, info: Info, input: inputs.CreateOrderInput) -> CreateOrderOutput:
        user = await info.context.get_current_user()
        return await info.context.orders.create_order(user, input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def edit_order(self, info: Info, input: inputs.EditOrderInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.orders.edit_order(user, input)

    @strawberry.mutation(permission_classes=[IsDelivery])
    async def take_order(self, info: Info, input: inputs.OrderIdInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.orders.take_order(user, input)

    # --- Payments ------------------------------------------------------------

    @strawberry.mutation(permission_classes=[IsOwner])
    async def create_payment(self, info: Info, input: inputs.CreatePaymentInput) -> CoreOutput:
        user = await info.context.get_current_user()
        return await info.context.payments.create_payment(user, input)


# =============================================================================
# SUBSCRIPTIONS
# =============================================================================

@strawberry.type
class Subscription:

    @strawberry.subscription(permission_classes=[IsOwner])
    async def pending_orders(self, info: Info) -> AsyncGenerator[OrderType, None]:
        """New orders placed at the caller's restaurants."""
        user = await info.context.get_current_user()
        async for order in info.context.orders.watch(
            NEW_PENDING_ORDER,
            lambda event: event.get("owner_id") == user.id,
        ):
            yield order

    @strawberry.subscription(permission_classes=[IsDelivery])
    async def cooked_orders(self, info: Info) -> AsyncGenerator[OrderType, None]:
        """Orders ready for pickup."""
        async for order in info.context.orders.watch(NEW_COOKED_ORDER, lambda event: True):
            yield order

    @strawberry.subscription(permission_classes=[IsAuthenticated])
    async def order_updates(
        self, info: Info, input: inputs.OrderIdInput
    ) -> AsyncGenerator[OrderType, None]:
        """Changes to one order, for its customer, driver and restaurant owner."""
        user = await info.context.get_current_user()
        async for order in info.context.orders.watch(
            NEW_ORDER_UPDATE,
            lambda event: event.get("order_id") == input.id and user.id in (
                event.get("customer_id"),
                event.get("driver_id"),
                event.get("owner_id"),
            ),
        ):
            yield order


schema = strawberry.Schema(query=Query, mutation=Mutation, subscription=Subscription)

graphql_router = GraphQLRouter(schema, context_getter=get_context)
