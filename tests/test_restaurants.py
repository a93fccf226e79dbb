from sqlalchemy import func, select

from food_delivery.models import Category, Dish, Restaurant, UserRole
from food_delivery.services.restaurants import RestaurantsService, category_slug
from tests.factories import create_dish, create_restaurant, create_user


async def make_owner(session, email="owner@example.com"):
    return await create_user(session, email, role=UserRole.OWNER)


def test_category_slug():
    assert category_slug("  Korean BBQ ") == ("korean bbq", "korean-bbq")
    assert category_slug("Fast   Food") == ("fast   food", "fast-food")


async def test_create_restaurant_creates_category(session):
    owner = await make_owner(session)
    service = RestaurantsService(session)

    output = await service.create_restaurant(owner, {
        "name": "Seoul Grill",
        "cover_img": "https://img.test/grill.png",
        "address": "2 Side Street",
        "category_name": " Korean BBQ ",
    })

    assert output.ok is True
    restaurant = await session.get(Restaurant, output.restaurant_id)
    category = await session.get(Category, restaurant.category_id)
    assert restaurant.owner_id == owner.id
    assert category.slug == "korean-bbq"
    assert category.name == "korean bbq"


async def test_create_restaurant_reuses_category(session):
    owner = await make_owner(session)
    service = RestaurantsService(session)
    data = {"cover_img": "https://img.test/c.png", "address": "3 Road", "category_name": "Tacos"}

    first = await service.create_restaurant(owner, {"name": "Taco One", **data})
    second = await service.create_restaurant(owner, {**data, "name": "Taco Two", "category_name": "tacos"})

    assert first.ok and second.ok
    count = await session.execute(select(func.count(Category.id)))
    assert count.scalar() == 1


async def test_create_restaurant_validation(session):
    owner = await make_owner(session)
    service = RestaurantsService(session)

    output = await service.create_restaurant(owner, {
        "name": "X",
        "cover_img": "https://img.test/c.png",
        "address": "3 Road",
        "category_name": "tacos",
    })

    assert output.ok is False
    assert output.error.startswith("name:")


async def test_edit_restaurant(session):
    owner = await make_owner(session)
    restaurant = await create_restaurant(session, owner)
    service = RestaurantsService(session)

    output = await service.edit_restaurant(owner, {
        "restaurant_id": restaurant.id,
        "name": "Pizza Palace",
        "category_name": "Italian Food",
    })

    assert output.ok is True
    assert restaurant.name == "Pizza Palace"
    assert restaurant.address == "1 Main Street"
    category = await session.get(Category, restaurant.category_id)
    assert category.slug == "italian-food"


async def test_edit_restaurant_ownership(session):
    owner = await make_owner(session)
    intruder = await make_owner(session, "intruder@example.com")
    restaurant = await create_restaurant(session, owner)
    service = RestaurantsService(session)

    denied = await service.edit_restaurant(intruder, {"restaurant_id": restaurant.id, "name": "Mine"})
    missing = await service.edit_restaurant(owner, {"restaurant_id": 999, "name": "Ghost"})

    assert denied.error == "You can't edit a restaurant that you don't own"
    assert missing.error == "Restaurant not found"
    assert restaurant.name == "Pizza Place"


async def test_delete_restaurant_cascades_menu(session):
    owner = await make_owner(session)
    intruder = await make_owner(session, "intruder@example.com")
    restaurant = await create_restaurant(session, owner)
    await create_dish(session, restaurant)
    service = RestaurantsService(session)

    denied = await service.delete_restaurant(intruder, {"restaurant_id": restaurant.id})
    assert denied.error == "You can't delete a restaurant that you don't own"

    output = await service.delete_restaurant(owner, {"restaurant_id": restaurant.id})
    assert output.ok is True

    dishes = await session.execute(select(func.count(Dish.id)))
    restaurants = await session.execute(select(func.count(Restaurant.id)))
    assert dishes.scalar() == 0
    assert restaurants.scalar() == 0


async def test_my_restaurants(session):
    owner = await make_owner(session)
    other = await make_owner(session, "other@example.com")
    await create_restaurant(session, owner, name="Mine One")
    await create_restaurant(session, owner, name="Mine Two")
    theirs = await create_restaurant(session, other, name="Theirs")
    service = RestaurantsService(session)

    output = await service.my_restaurants(owner)
    single = await service.my_restaurant(owner, {"restaurant_id": theirs.id})

    assert [r.name for r in output.restaurants] == ["Mine One", "Mine Two"]
    assert single.ok is False
    assert single.error == "You can't do that."


async def test_all_restaurants_promoted_first_and_paginated(session):
    owner = await make_owner(session)
    for i in range(4):
        await create_restaurant(session, owner, name=f"Plain {i}")
    await create_restaurant(session, owner, name="Promoted", is_promoted=True)
    service = RestaurantsService(session, page_size=2)

    first = await service.all_restaurants({"page": 1})
    last = await service.all_restaurants({"page": 3})

    assert first.ok is True
    assert [r.name for r in first.results] == ["Promoted", "Plain 0"]
    assert first.total_pages == 3
    assert first.total_results == 5
    assert [r.name for r in last.results] == ["Plain 3"]


async def test_all_restaurants_rejects_bad_page(session):
    output = await RestaurantsService(session).all_restaurants({"page": 0})

    assert output.ok is False
    assert output.error.startswith("page:")


async def test_find_restaurant_by_id(session):
    owner = await make_owner(session)
    restaurant = await create_restaurant(session, owner)
    service = RestaurantsService(session)

    found = await service.find_restaurant_by_id({"restaurant_id": restaurant.id})
    missing = await service.find_restaurant_by_id({"restaurant_id": restaurant.id + 1})

    assert found.restaurant.id == restaurant.id
    assert missing.error == "Restaurant not found"


async def test_search_restaurant_is_case_insensitive(session):
    owner = await make_owner(session)
    await create_restaurant(session, owner, name="Burger Barn")
    await create_restaurant(session, owner, name="The BURGER Joint")
    await create_restaurant(session, owner, name="Sushi Bar")

    output = await RestaurantsService(session).search_restaurant_by_name({"query": "burger"})

    assert output.ok is True
    assert sorted(r.name for r in output.restaurants) == ["Burger Barn", "The BURGER Joint"]
    assert output.total_results == 2
    assert output.total_pages == 1


async def test_search_restaurant_wildcards_are_literal(session):
    owner = await make_owner(session)
    await create_restaurant(session, owner, name="100% Vegan")
    await create_restaurant(session, owner, name="Sushi_Bar")
    await create_restaurant(session, owner, name="Sushi Bar")
    service = RestaurantsService(session)

    percent = await service.search_restaurant_by_name({"query": "%"})
    underscore = await service.search_restaurant_by_name({"query": "i_b"})

    assert [r.name for r in percent.restaurants] == ["100% Vegan"]
    assert [r.name for r in underscore.restaurants] == ["Sushi_Bar"]
    assert underscore.total_results == 1


async def test_categories(session):
    owner = await make_owner(session)
    await create_restaurant(session, owner, name="Slice", category_name="pizza")
    await create_restaurant(session, owner, name="Crust", category_name="pizza")
    await create_restaurant(session, owner, name="Roll", category_name="sushi")
    service = RestaurantsService(session)

    listing = await service.all_categories()
    pizza = await service.find_category_by_slug({"slug": "pizza"})
    missing = await service.find_category_by_slug({"slug": "nope"})

    assert [c.slug for c in listing.categories] == ["pizza", "sushi"]
    assert await service.count_restaurants(listing.categories[0]) == 2
    assert pizza.category.slug == "pizza"
    assert sorted(r.name for r in pizza.restaurants) == ["Crust", "Slice"]
    assert pizza.total_results == 2
    assert missing.error == "Category not found"


async def test_create_dish(session):
    owner = await make_owner(session)
    intruder = await make_owner(session, "intruder@example.com")
    restaurant = await create_restaurant(session, owner)
    service = RestaurantsService(session)
    data = {
        "restaurant_id": restaurant.id,
        "name": "Pepperoni",
        "price": 12,
        "description": "Spicy salami",
        "options": [
            {"name": "Size", "choices": [{"name": "L", "extra": 3}, {"name": "M"}]},
            {"name": "Extra cheese", "extra": 2},
        ],
    }

    denied = await service.create_dish(intruder, data)
    output = await service.create_dish(owner, data)

    assert denied.error == "You can't do that."
    assert output.ok is True
    dish = await session.get(Dish, output.dish_id)
    assert dish.options == [
        {"name": "Size", "choices": [{"name": "L", "extra": 3}, {"name": "M"}]},
        {"name": "Extra cheese", "extra": 2},
    ]


async def test_edit_and_delete_dish(session):
    owner = await make_owner(session)
    intruder = await make_owner(session, "intruder@example.com")
    restaurant = await create_restaurant(session, owner)
    dish = await create_dish(session, restaurant)
    service = RestaurantsService(session)

    missing = await service.edit_dish(owner, {"dish_id": dish.id + 1, "price": 5})
    denied = await service.edit_dish(intruder, {"dish_id": dish.id, "price": 5})
    edited = await service.edit_dish(owner, {"dish_id": dish.id, "price": 15})

    assert missing.error == "Dish not found"
    assert denied.error == "You can't do that."
    assert edited.ok is True
    assert dish.price == 15
    assert dish.name == "Margherita"

    deleted = await service.delete_dish(owner, {"dish_id": dish.id})
    assert deleted.ok is True
    count = await session.execute(select(func.count(Dish.id)))
    assert count.scalar() == 0
