"""
Restaurants Service

Restaurant, category and dish management. Owners may only modify what they
own; listings are paginated with promoted restaurants first.
"""

import logging
import math
import re
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from food_delivery import schemas
from food_delivery.api.outputs import (
    AllCategoriesOutput,
    CategoryOutput,
    CoreOutput,
    CreateDishOutput,
    CreateRestaurantOutput,
    MyRestaurantsOutput,
    RestaurantOutput,
    RestaurantsOutput,
    SearchRestaurantOutput,
)
from food_delivery.core.config import get_settings
from food_delivery.models import Category, Dish, Restaurant, User
from food_delivery.services.base import BaseService, handle_errors
from food_delivery.services.exceptions import AccessDenied, RecordNotFound

logger = logging.getLogger(__name__)


def category_slug(name: str) -> tuple[str, str]:
    """Normalize a category name and derive its slug."""
    category_name = name.strip().lower()
    return category_name, re.sub(r"\s+", "-", category_name)


def escape_like(text: str) -> str:
    """Make ``%`` and ``_`` match literally in a LIKE pattern escaped with ``\\``."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RestaurantsService(BaseService):
    """Catalog operations for the GraphQL resolvers."""

    def __init__(self, db: AsyncSession, page_size: Optional[int] = None):
        super().__init__(db)
        self.page_size = page_size or get_settings().page_size

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def get_or_create_category(self, name: str) -> Category:
        category_name, slug = category_slug(name)
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            category = Category(name=category_name, slug=slug)
            self.db.add(category)
            await self.db.flush()
            logger.info(f"Category created: {slug}")
        return category

    async def check_owner(
        self,
        owner_id: int,
        restaurant_id: int,
        denied_message: str = "You can't do that.",
    ) -> Restaurant:
        """
        Load a restaurant and make sure ``owner_id`` owns it.

        Raises:
            RecordNotFound: Unknown restaurant
            AccessDenied: Restaurant belongs to someone else
        """
        restaurant = await self.db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise RecordNotFound("Restaurant not found")
        if restaurant.owner_id != owner_id:
            raise AccessDenied(denied_message)
        return restaurant

    async def _check_dish_owner(self, owner_id: int, dish_id: int) -> Dish:
        dish = await self.db.get(Dish, dish_id)
        if dish is None:
            raise RecordNotFound("Dish not found")
        restaurant = await self.db.get(Restaurant, dish.restaurant_id)
        if restaurant is None or restaurant.owner_id != owner_id:
            raise AccessDenied("You can't do that.")
        return dish

    async def _paginate(self, query: Select, page: int) -> tuple[list, int, int]:
        """Run ``query`` for one page; returns (rows, total_pages, total_results)."""
        count_result = await self.db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        total_results = count_result.scalar() or 0

        result = await self.db.execute(
            query.offset((page - 1) * self.page_size).limit(self.page_size)
        )
        rows = list(result.scalars().all())
        return rows, math.ceil(total_results / self.page_size), total_results

    @staticmethod
    def _listing(query: Select) -> Select:
        return query.order_by(Restaurant.is_promoted.desc(), Restaurant.id)

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    @handle_errors(CreateRestaurantOutput, "Could not create restaurant")
    async def create_restaurant(self, owner: User, input: Any) -> CreateRestaurantOutput:
        data = schemas.CreateRestaurantInput.model_validate(input)

        category = await self.get_or_create_category(data.category_name)
        restaurant = Restaurant(
            name=data.name,
            cover_img=data.cover_img,
            address=data.address,
            owner_id=owner.id,
            category_id=category.id,
        )
        self.db.add(restaurant)
        await self.db.commit()

        logger.info(f"Restaurant #{restaurant.id} created by user #{owner.id}")
        return CreateRestaurantOutput(ok=True, restaurant_id=restaurant.id)

    @handle_errors(CoreOutput, "Could not edit restaurant")
    async def edit_restaurant(self, owner: User, input: Any) -> CoreOutput:
        data = schemas.EditRestaurantInput.model_validate(input)

        restaurant = await self.check_owner(
            owner.id,
            data.restaurant_id,
            "You can't edit a restaurant that you don't own",
        )
        if data.category_name:
            category = await self.get_or_create_category(data.category_name)
            restaurant.category_id = category.id
        for field in ("name", "cover_img", "address"):
            value = getattr(data, field)
            if value is not None:
                setattr(restaurant, field, value)
        await self.db.commit()

        return CoreOutput(ok=True)

    @handle_errors(CoreOutput, "Could not delete restaurant")
    async def delete_restaurant(self, owner: User, input: Any) -> CoreOutput:
        data = schemas.RestaurantIdInput.model_validate(input)

        await self.check_owner(
            owner.id,
            data.restaurant_id,
            "You can't delete a restaurant that you don't own",
        )
        await self.db.execute(delete(Restaurant).where(Restaurant.id == data.restaurant_id))
        await self.db.commit()

        logger.info(f"Restaurant #{data.restaurant_id} deleted by user #{owner.id}")
        return CoreOutput(ok=True)

    @handle_errors(MyRestaurantsOutput, "Could not find restaurants")
    async def my_restaurants(self, owner: User) -> MyRestaurantsOutput:
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.owner_id == owner.id).order_by(Restaurant.id)
        )
        return MyRestaurantsOutput(ok=True, restaurants=list(result.scalars().all()))

    @handle_errors(RestaurantOutput, "Could not find restaurant")
    async def my_restaurant(self, owner: User, input: Any) -> RestaurantOutput:
        data = schemas.RestaurantIdInput.model_validate(input)

        restaurant = await self.check_owner(owner.id, data.restaurant_id)
        return RestaurantOutput(ok=True, restaurant=restaurant)

    @handle_errors(RestaurantsOutput, "Could not load restaurants")
    async def all_restaurants(self, input: Any) -> RestaurantsOutput:
        data = schemas.RestaurantsInput.model_validate(input)

        rows, total_pages, total_results = await self._paginate(
            self._listing(select(Restaurant)), data.page
        )
        return RestaurantsOutput(
            ok=True,
            results=rows,
            total_pages=total_pages,
            total_results=total_results,
        )

    @handle_errors(RestaurantOutput, "Could not find restaurant")
    async def find_restaurant_by_id(self, input: Any) -> RestaurantOutput:
        data = schemas.RestaurantIdInput.model_validate(input)

        restaurant = await self.db.get(Restaurant, data.restaurant_id)
        if restaurant is None:
            raise RecordNotFound("Restaurant not found")
        return RestaurantOutput(ok=True, restaurant=restaurant)

    @handle_errors(SearchRestaurantOutput, "Could not search for restaurants")
    async def search_restaurant_by_name(self, input: Any) -> SearchRestaurantOutput:
        data = schemas.SearchRestaurantInput.model_validate(input)

        pattern = f"%{escape_like(data.query)}%"
        query = select(Restaurant).where(Restaurant.name.ilike(pattern, escape="\\"))
        rows, total_pages, total_results = await self._paginate(
            self._listing(query), data.page
        )
        return SearchRestaurantOutput(
            ok=True,
            restaurants=rows,
            total_pages=total_pages,
            total_results=total_results,
        )

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    @handle_errors(AllCategoriesOutput, "Could not load categories")
    async def all_categories(self) -> AllCategoriesOutput:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return AllCategoriesOutput(ok=True, categories=list(result.scalars().all()))

    async def count_restaurants(self, category: Category) -> int:
        result = await self.db.execute(
            select(func.count(Restaurant.id)).where(Restaurant.category_id == category.id)
        )
        return result.scalar() or 0

    @handle_errors(CategoryOutput, "Could not load category")
    async def find_category_by_slug(self, input: Any) -> CategoryOutput:
        data = schemas.CategoryInput.model_validate(input)

        result = await self.db.execute(select(Category).where(Category.slug == data.slug))
        category = result.scalar_one_or_none()
        if category is None:
            raise RecordNotFound("Category not found")

        rows, total_pages, total_results = await self._paginate(
            self._listing(select(Restaurant).where(Restaurant.category_id == category.id)),
            data.page,
        )
        return CategoryOutput(
            ok=True,
            category=category,
            restaurants=rows,
            total_pages=total_pages,
            total_results=total_results,
        )

    # =========================================================================
    # DISHES
    # =========================================================================

    @handle_errors(CreateDishOutput, "Could not create dish")
    async def create_dish(self, owner: User, input: Any) -> CreateDishOutput:
        data = schemas.CreateDishInput.model_validate(input)

        await self.check_owner(owner.id, data.restaurant_id)
        dish = Dish(
            name=data.name,
            price=data.price,
            description=data.description,
            photo=data.photo,
            options=[o.model_dump(exclude_none=True) for o in data.options],
            restaurant_id=data.restaurant_id,
        )
        self.db.add(dish)
        await self.db.commit()

        return CreateDishOutput(ok=True, dish_id=dish.id)

    @handle_errors(CoreOutput, "Could not edit dish")
    async def edit_dish(self, owner: User, input: Any) -> CoreOutput:
        data = schemas.EditDishInput.model_validate(input)

        dish = await self._check_dish_owner(owner.id, data.dish_id)
        for field in ("name", "price", "description", "photo"):
            value = getattr(data, field)
            if value is not None:
                setattr(dish, field, value)
        if data.options is not None:
            dish.options = [o.model_dump(exclude_none=True) for o in data.options]
        await self.db.commit()

        return CoreOutput(ok=True)

    @handle_errors(CoreOutput, "Could not delete dish")
    async def delete_dish(self, owner: User, input: Any) -> CoreOutput:
        data = schemas.DishIdInput.model_validate(input)

        await self._check_dish_owner(owner.id, data.dish_id)
        await self.db.execute(delete(Dish).where(Dish.id == data.dish_id))
        await self.db.commit()

        return CoreOutput(ok=True)
