"""Tests for food reference resolution and catalog writes."""

from decimal import Decimal

import pytest
from pydantic import TypeAdapter
from sqlalchemy import func, select

from pantryplanner.catalog import CatalogService, resolve_food_reference
from pantryplanner.errors import NotFoundError, ValidationError
from pantryplanner.models import Food, RecipeIngredient
from pantryplanner.schemas import (
    ExistingFoodReference,
    FoodReference,
    NewFoodReference,
    PantryItemRequest,
    RecipeIngredientRequest,
    RecipeRequest,
)


async def count(db_session, column) -> int:
    return (await db_session.execute(select(func.count(column)))).scalar_one()


class TestFoodReference:
    """Tests for the food reference union and its resolver."""

    def test_union_dispatches_on_mode(self):
        adapter = TypeAdapter(FoodReference)

        existing = adapter.validate_python({"mode": "existing", "id": 3})
        new = adapter.validate_python({"mode": "new", "name": "Kale", "category_id": 1})

        assert isinstance(existing, ExistingFoodReference)
        assert isinstance(new, NewFoodReference)

    @pytest.mark.asyncio
    async def test_existing_reference(self, db_session, kitchen):
        food = await resolve_food_reference(db_session, ExistingFoodReference(id=kitchen.milk.id))

        assert food.id == kitchen.milk.id

    @pytest.mark.asyncio
    async def test_unknown_existing_reference(self, db_session, kitchen):
        with pytest.raises(ValidationError):
            await resolve_food_reference(db_session, ExistingFoodReference(id=999))

    @pytest.mark.asyncio
    async def test_new_reference_creates_food(self, db_session, kitchen):
        food = await resolve_food_reference(
            db_session, NewFoodReference(name="  Kale ", category_id=kitchen.produce.id)
        )

        assert food.id is not None
        assert food.name == "Kale"
        assert food.category_id == kitchen.produce.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_new_reference_needs_name(self, db_session, kitchen, name):
        with pytest.raises(ValidationError):
            await resolve_food_reference(
                db_session, NewFoodReference(name=name, category_id=kitchen.produce.id)
            )

    @pytest.mark.asyncio
    async def test_new_reference_needs_known_category(self, db_session, kitchen):
        with pytest.raises(ValidationError):
            await resolve_food_reference(db_session, NewFoodReference(name="Kale", category_id=999))


class TestCatalogService:
    """Tests for CatalogService."""

    @pytest.mark.asyncio
    async def test_create_recipe_with_existing_and_new_foods(self, db_session, kitchen):
        recipe = await CatalogService(db_session).create_recipe(
            kitchen.alice.id,
            RecipeRequest(
                title="Kale omelette",
                ingredients=[
                    RecipeIngredientRequest(
                        food=ExistingFoodReference(id=kitchen.eggs.id), quantity=Decimal("3")
                    ),
                    RecipeIngredientRequest(
                        food=NewFoodReference(name="Kale", category_id=kitchen.produce.id),
                        unit="leaves",
                    ),
                ],
            ),
        )

        assert recipe.user_id == kitchen.alice.id
        assert [i.food.name for i in recipe.ingredients] == ["Eggs", "Kale"]
        assert recipe.ingredients[1].food.category.name == "Produce"
        assert recipe.ingredients[1].unit == "leaves"

    @pytest.mark.asyncio
    async def test_bad_ingredient_creates_nothing(self, db_session, kitchen):
        foods_before = await count(db_session, Food.id)

        with pytest.raises(ValidationError):
            await CatalogService(db_session).create_recipe(
                kitchen.alice.id,
                RecipeRequest(
                    title="Broken",
                    ingredients=[
                        RecipeIngredientRequest(
                            food=NewFoodReference(name="Kale", category_id=kitchen.produce.id)
                        ),
                        RecipeIngredientRequest(food=ExistingFoodReference(id=999)),
                    ],
                ),
            )

        assert await count(db_session, Food.id) == foods_before
        assert await count(db_session, RecipeIngredient.id) == 0

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, db_session, kitchen):
        with pytest.raises(ValidationError):
            await CatalogService(db_session).create_recipe(
                kitchen.alice.id, RecipeRequest(title=" ")
            )

    @pytest.mark.asyncio
    async def test_replace_recipe_replaces_ingredients(self, db_session, kitchen, make_recipe):
        recipe = await make_recipe(kitchen.alice, "Pancakes", kitchen.milk, kitchen.eggs)

        replaced = await CatalogService(db_session).replace_recipe(
            recipe.id,
            kitchen.alice.id,
            RecipeRequest(
                title="Crepes",
                ingredients=[
                    RecipeIngredientRequest(food=ExistingFoodReference(id=kitchen.flour.id))
                ],
            ),
        )

        assert replaced.title == "Crepes"
        assert [i.food_id for i in replaced.ingredients] == [kitchen.flour.id]
        assert await count(db_session, RecipeIngredient.id) == 1

    @pytest.mark.asyncio
    async def test_replace_foreign_recipe(self, db_session, kitchen, make_recipe):
        recipe = await make_recipe(kitchen.bob, "Bob's rice", kitchen.rice)

        with pytest.raises(NotFoundError):
            await CatalogService(db_session).replace_recipe(
                recipe.id, kitchen.alice.id, RecipeRequest(title="Mine now")
            )

    @pytest.mark.asyncio
    async def test_add_pantry_items(self, db_session, kitchen):
        items = await CatalogService(db_session).add_pantry_items(
            kitchen.alice.id,
            [
                PantryItemRequest(
                    food=ExistingFoodReference(id=kitchen.milk.id),
                    quantity=Decimal("2"),
                    unit="l",
                ),
                PantryItemRequest(
                    food=NewFoodReference(name="Kale", category_id=kitchen.produce.id)
                ),
            ],
        )

        assert [item.food.name for item in items] == ["Milk", "Kale"]
        assert items[0].quantity == Decimal("2")
        assert items[0].unit == "l"

    @pytest.mark.asyncio
    async def test_add_pantry_items_unknown_user(self, db_session, kitchen):
        with pytest.raises(NotFoundError):
            await CatalogService(db_session).add_pantry_items(
                999, [PantryItemRequest(food=ExistingFoodReference(id=kitchen.milk.id))]
            )

    def test_negative_quantity_rejected_by_schema(self):
        with pytest.raises(ValueError):
            PantryItemRequest(food=ExistingFoodReference(id=1), quantity=Decimal("-1"))
