"""Pytest configuration and shared fixtures."""

import os

# Services and the app share one engine module; point it at SQLite before import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pantryplanner.connectors.base import RecipeProvider
from pantryplanner.database import Base
from pantryplanner.models import (
    Category,
    Food,
    PantryItem,
    Recipe,
    RecipeIngredient,
    ShoppingListItem,
    User,
)

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# In-memory Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Session configured like the application's."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def kitchen(db_session):
    """
    Two users, three categories and a handful of foods.

    Nothing is stocked and no recipes exist yet; tests add what they need
    with ``make_recipe`` and ``stock``.
    """
    alice = User(email="alice@example.com")
    bob = User(email="bob@example.com")
    dairy = Category(name="Dairy")
    produce = Category(name="Produce")
    dry_goods = Category(name="Dry goods")
    db_session.add_all([alice, bob, dairy, produce, dry_goods])
    await db_session.flush()

    foods = {
        "milk": Food(name="Milk", category_id=dairy.id),
        "eggs": Food(name="Eggs", category_id=dairy.id),
        "butter": Food(name="Butter", category_id=dairy.id),
        "tomato": Food(name="Tomato", category_id=produce.id),
        "onion": Food(name="Onion", category_id=produce.id),
        "flour": Food(name="Flour", category_id=dry_goods.id),
        "rice": Food(name="Rice", category_id=dry_goods.id),
        "salt": Food(name="Salt", category_id=None),
    }
    db_session.add_all(foods.values())
    await db_session.commit()

    return SimpleNamespace(
        alice=alice,
        bob=bob,
        dairy=dairy,
        produce=produce,
        dry_goods=dry_goods,
        **foods,
    )


@pytest.fixture
def make_recipe(db_session):
    """Factory that stores a recipe using the given foods."""

    async def _make(user: User, title: str, *foods: Food) -> Recipe:
        recipe = Recipe(
            user_id=user.id,
            title=title,
            instructions=f"Cook the {title.lower()}.",
            ingredients=[
                RecipeIngredient(food_id=food.id, food=food, quantity=Decimal("1"))
                for food in foods
            ],
        )
        db_session.add(recipe)
        await db_session.commit()
        return recipe

    return _make


@pytest.fixture
def stock(db_session):
    """Factory that puts foods in a user's pantry."""

    async def _stock(user: User, *foods: Food, quantity: str = "1") -> list[PantryItem]:
        items = [
            PantryItem(user_id=user.id, food_id=food.id, food=food, quantity=Decimal(quantity))
            for food in foods
        ]
        db_session.add_all(items)
        await db_session.commit()
        return items

    return _stock


@pytest.fixture
def list_item(db_session):
    """Factory that puts an item on a user's shopping list."""

    async def _add(user: User, food: Food | None, **fields) -> ShoppingListItem:
        item = ShoppingListItem(user_id=user.id, food_id=food.id if food else None, **fields)
        db_session.add(item)
        await db_session.commit()
        return item

    return _add


# =============================================================================
# In-memory Model Helpers
# =============================================================================


def build_food(food_id: int, name: str) -> Food:
    return Food(id=food_id, name=name, category_id=None)


def build_recipe(recipe_id: int, *foods: Food) -> Recipe:
    return Recipe(
        id=recipe_id,
        user_id=1,
        title=f"Recipe {recipe_id}",
        instructions="",
        ingredients=[
            RecipeIngredient(food_id=food.id, food=food, quantity=Decimal("1")) for food in foods
        ],
    )


def build_pantry(*foods: Food) -> list[PantryItem]:
    return [
        PantryItem(id=index, user_id=1, food_id=food.id, food=food, quantity=Decimal("1"))
        for index, food in enumerate(foods, start=1)
    ]


@pytest.fixture
def foods():
    """Unsaved foods for pure selection and scoring tests."""
    return SimpleNamespace(
        milk=build_food(1, "Milk"),
        eggs=build_food(2, "Eggs"),
        flour=build_food(3, "Flour"),
        tomato=build_food(4, "Tomato"),
        onion=build_food(5, "Onion"),
        rice=build_food(6, "Rice"),
    )


# =============================================================================
# External Provider Fixtures
# =============================================================================


@pytest.fixture
def fake_provider():
    """Factory for providers with canned ``generate_entries`` behaviour."""

    def _make(name: str = "fake", entries=None, side_effect=None) -> RecipeProvider:
        provider = MagicMock(spec=RecipeProvider)
        provider.name = name
        provider.generate_entries = AsyncMock(return_value=entries or [], side_effect=side_effect)
        provider.close = AsyncMock()
        return provider

    return _make


# =============================================================================
# MealDB Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_mealdb_meal_response():
    """Sample single meal response from MealDB API."""
    return {
        "meals": [
            {
                "idMeal": "52772",
                "strMeal": "Teriyaki Chicken Casserole",
                "strCategory": "Chicken",
                "strArea": "Japanese",
                "strInstructions": "Preheat oven to 350° F. Spray a 9x13-inch baking pan...",
                "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
                "strIngredient1": "soy sauce",
                "strIngredient2": "water",
                "strIngredient3": "brown sugar",
                "strIngredient4": "chicken breasts",
                "strIngredient5": "brown rice",
                **{f"strIngredient{i}": "" for i in range(6, 21)},
                "strMeasure1": "3/4 cup",
                "strMeasure2": "1/2 cup",
                "strMeasure3": "1/4 cup",
                "strMeasure4": "2",
                "strMeasure5": "3 cups",
                **{f"strMeasure{i}": "" for i in range(6, 21)},
                "strSource": "https://example.com/recipe",
            }
        ]
    }


@pytest.fixture
def mock_mealdb_filter_response():
    """Summary rows returned by filter.php."""
    return {
        "meals": [
            {
                "idMeal": "52772",
                "strMeal": "Teriyaki Chicken Casserole",
                "strMealThumb": "https://example.com/thumb.jpg",
            },
            {
                "idMeal": "52773",
                "strMeal": "Honey Teriyaki Salmon",
                "strMealThumb": "https://example.com/thumb2.jpg",
            },
        ]
    }
