"""Meal plan generation from the recipe catalog and external sources."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.config import get_settings
from pantryplanner.errors import ArgumentError, NotFoundError
from pantryplanner.logging_config import get_logger
from pantryplanner.models import Recipe
from pantryplanner.plan.external import ExternalSourceOrchestrator
from pantryplanner.plan.selector import select_recipes
from pantryplanner.repository import PlannerRepository
from pantryplanner.schemas import GeneratedMealPlanEntry, MealPlanDraft

logger = get_logger(__name__)


class MealPlanGenerator:
    """
    Builds unsaved meal plans.

    Recipes come from the user's catalog first, picked greedily by pantry
    coverage. Whatever the catalog cannot fill is requested from the external
    sources. With ``use_external`` the catalog is skipped entirely.
    """

    def __init__(
        self,
        db: AsyncSession,
        orchestrator: ExternalSourceOrchestrator,
        max_days: int | None = None,
    ):
        self.repository = PlannerRepository(db)
        self.orchestrator = orchestrator
        self.max_days = max_days if max_days is not None else get_settings().max_meal_plan_days

    async def generate_meal_plan(
        self,
        user_id: int,
        days: int,
        start_date: date | None,
        use_external: bool = False,
    ) -> MealPlanDraft:
        """
        Generate a draft plan with one meal per day.

        Raises:
            ArgumentError: ``days`` is not positive, exceeds the configured
                maximum, or the user does not exist.
            ExternalSourceUnavailableError: An external source failed.
        """
        logger.info(
            f"Generating meal plan: user={user_id}, days={days}, use_external={use_external}"
        )
        if days <= 0:
            raise ArgumentError("Number of days must be greater than zero")
        if days > self.max_days:
            raise ArgumentError(f"Cannot create meal plan for more than {self.max_days} days")

        meals: list[GeneratedMealPlanEntry] = []
        if not use_external:
            try:
                recipes = await self.select_manually(days, user_id)
            except NotFoundError as e:
                raise ArgumentError(str(e)) from e
            meals = [GeneratedMealPlanEntry(recipe_id=recipe.id) for recipe in recipes]
        elif not await self.repository.user_exists(user_id):
            raise ArgumentError(f"User {user_id} does not exist")

        if len(meals) < days:
            pantry = await self.repository.get_pantry_items(user_id)
            meals.extend(await self.orchestrator.fill_remaining(days - len(meals), pantry))

        logger.info(f"Generated {len(meals)} of {days} meals for user {user_id}")
        return MealPlanDraft(start_date=start_date, meals=meals)

    async def select_manually(self, requested_count: int, user_id: int) -> list[Recipe]:
        """Pick recipes from the user's own catalog."""
        if requested_count <= 0:
            raise ArgumentError("Meal count must be greater than zero")
        if not await self.repository.user_exists(user_id):
            logger.warning(f"Meal selection requested for unknown user {user_id}")
            raise NotFoundError(f"User {user_id} does not exist")

        pantry = await self.repository.get_pantry_items(user_id)
        recipes = await self.repository.get_recipes(user_id)
        selected = select_recipes(requested_count, recipes, pantry)

        logger.info(
            f"Selected {len(selected)} of {requested_count} meals from {len(recipes)} recipes"
        )
        return selected
