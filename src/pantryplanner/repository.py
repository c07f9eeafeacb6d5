"""Read-side queries for users, pantry snapshots and recipe catalogs."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pantryplanner.models import (
    Food,
    MealPlan,
    MealPlanEntry,
    PantryItem,
    Recipe,
    RecipeIngredient,
    ShoppingListItem,
    User,
)


class PlannerRepository:
    """Queries the planning services consume. Writes go through the session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def user_exists(self, user_id: int) -> bool:
        result = await self.db.execute(select(func.count(User.id)).where(User.id == user_id))
        return result.scalar_one() > 0

    # =========================================================================
    # Pantry
    # =========================================================================

    async def get_pantry_items(self, user_id: int) -> list[PantryItem]:
        """Return the user's pantry snapshot with each item's food loaded."""
        result = await self.db.execute(
            select(PantryItem)
            .execution_options(populate_existing=True)
            .where(PantryItem.user_id == user_id)
            .options(selectinload(PantryItem.food).selectinload(Food.category))
            .order_by(PantryItem.id)
        )
        return list(result.scalars().all())

    # =========================================================================
    # Recipes
    # =========================================================================

    async def get_recipes(self, user_id: int) -> list[Recipe]:
        """Return the user's catalog in creation order with ingredients and foods."""
        result = await self.db.execute(
            select(Recipe)
            .execution_options(populate_existing=True)
            .where(Recipe.user_id == user_id)
            .options(
                selectinload(Recipe.ingredients)
                .selectinload(RecipeIngredient.food)
                .selectinload(Food.category)
            )
            .order_by(Recipe.id)
        )
        return list(result.scalars().all())

    async def get_recipe(self, recipe_id: int, user_id: int) -> Recipe | None:
        """Return the recipe if it exists and belongs to the user."""
        result = await self.db.execute(
            select(Recipe)
            .execution_options(populate_existing=True)
            .where(Recipe.id == recipe_id, Recipe.user_id == user_id)
            .options(
                selectinload(Recipe.ingredients)
                .selectinload(RecipeIngredient.food)
                .selectinload(Food.category)
            )
        )
        return result.scalar_one_or_none()

    async def get_owned_recipe_ids(self, recipe_ids: set[int], user_id: int) -> set[int]:
        """Return the subset of ``recipe_ids`` the user owns."""
        if not recipe_ids:
            return set()
        result = await self.db.execute(
            select(Recipe.id).where(Recipe.id.in_(recipe_ids), Recipe.user_id == user_id)
        )
        return set(result.scalars().all())

    # =========================================================================
    # Meal plans
    # =========================================================================

    async def get_meal_plan(self, plan_id: int, with_recipes: bool = False) -> MealPlan | None:
        """Load a plan with its entries, optionally down to ingredient foods."""
        entries = selectinload(MealPlan.entries)
        if with_recipes:
            entries = entries.selectinload(MealPlanEntry.recipe).selectinload(
                Recipe.ingredients
            ).selectinload(RecipeIngredient.food)
        result = await self.db.execute(
            select(MealPlan)
            .where(MealPlan.id == plan_id)
            .options(entries)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_meal_plans(
        self, user_id: int, skip: int, take: int
    ) -> tuple[list[MealPlan], int]:
        """Return a page of the user's plans, newest first, and the total count."""
        total = await self.db.execute(
            select(func.count(MealPlan.id)).where(MealPlan.user_id == user_id)
        )
        result = await self.db.execute(
            select(MealPlan)
            .execution_options(populate_existing=True)
            .where(MealPlan.user_id == user_id)
            .options(selectinload(MealPlan.entries))
            .order_by(MealPlan.created_at.desc(), MealPlan.id.desc())
            .offset(skip)
            .limit(take)
        )
        return list(result.scalars().all()), total.scalar_one()

    async def get_meal_plan_entry(self, entry_id: int) -> MealPlanEntry | None:
        result = await self.db.execute(
            select(MealPlanEntry)
            .execution_options(populate_existing=True)
            .where(MealPlanEntry.id == entry_id)
            .options(
                selectinload(MealPlanEntry.recipe)
                .selectinload(Recipe.ingredients)
                .selectinload(RecipeIngredient.food)
            )
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # Shopping list
    # =========================================================================

    async def get_shopping_list_items(self, user_id: int) -> list[ShoppingListItem]:
        result = await self.db.execute(
            select(ShoppingListItem)
            .execution_options(populate_existing=True)
            .where(ShoppingListItem.user_id == user_id)
            .options(selectinload(ShoppingListItem.food).selectinload(Food.category))
            .order_by(ShoppingListItem.id)
        )
        return list(result.scalars().all())

    async def get_food(self, food_id: int) -> Food | None:
        result = await self.db.execute(
            select(Food)
            .where(Food.id == food_id)
            .options(selectinload(Food.category))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
