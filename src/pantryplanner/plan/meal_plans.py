"""Meal plan persistence: create, reconcile, delete and cook."""

from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.database import transaction
from pantryplanner.errors import ArgumentError, NotFoundError, ValidationError
from pantryplanner.logging_config import LoggingContext, get_logger
from pantryplanner.models import MealPlan, MealPlanEntry
from pantryplanner.repository import PlannerRepository
from pantryplanner.schemas import (
    MealPlanEntryRequest,
    MealPlanEntrySchema,
    MealPlanListResult,
    MealPlanRequest,
    MealPlanSnapshot,
    PantryItemSchema,
    PantryItemsResult,
)

logger = get_logger(__name__)


def to_snapshot(plan: MealPlan) -> MealPlanSnapshot:
    """Convert a loaded plan into its response shape."""
    return MealPlanSnapshot(
        id=plan.id,
        start_date=plan.start_date,
        meals=[MealPlanEntrySchema.model_validate(entry) for entry in plan.entries],
    )


class MealPlanService:
    """Owner-checked operations on saved meal plans."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = PlannerRepository(db)

    async def _require_user(self, user_id: int) -> None:
        if not await self.repository.user_exists(user_id):
            logger.warning(f"Unknown user {user_id}")
            raise NotFoundError(f"User {user_id} does not exist")

    async def _load_owned_plan(
        self, plan_id: int, user_id: int, with_recipes: bool = False
    ) -> MealPlan:
        plan = await self.repository.get_meal_plan(plan_id, with_recipes=with_recipes)
        if plan is None or plan.user_id != user_id:
            # A foreign plan is reported exactly like a missing one
            logger.warning(f"Meal plan {plan_id} not found for user {user_id}")
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    async def _validate_recipes(self, meals: list[MealPlanEntryRequest], user_id: int) -> None:
        """Reject any meal whose recipe is missing or owned by someone else."""
        wanted = {meal.recipe_id for meal in meals if meal.recipe_id is not None}
        owned = await self.repository.get_owned_recipe_ids(wanted, user_id)
        unknown = sorted(wanted - owned)
        if unknown:
            logger.warning(f"Rejected recipe ids {unknown} for user {user_id}")
            raise ValidationError(f"Recipes not found: {', '.join(map(str, unknown))}")

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_meal_plans(
        self, user_id: int, skip: int = 0, take: int = 10
    ) -> MealPlanListResult:
        """Return a page of the user's meal plans, newest first."""
        if skip < 0:
            raise ArgumentError("skip must not be negative")
        if take <= 0:
            raise ArgumentError("take must be greater than zero")

        plans, total = await self.repository.get_meal_plans(user_id, skip, take)
        return MealPlanListResult(total_count=total, items=[to_snapshot(p) for p in plans])

    async def get_meal_plan(self, plan_id: int, user_id: int) -> MealPlanSnapshot:
        return to_snapshot(await self._load_owned_plan(plan_id, user_id))

    # =========================================================================
    # Writes
    # =========================================================================

    async def add_meal_plan(
        self, user_id: int, request: MealPlanRequest | None
    ) -> MealPlanSnapshot:
        """Save a new plan, typically an accepted draft."""
        if request is None:
            raise ArgumentError("Request object is required")
        await self._require_user(user_id)
        if not request.meals:
            raise ValidationError("A meal plan needs at least one meal")
        await self._validate_recipes(request.meals, user_id)

        async with transaction(self.db):
            plan = MealPlan(
                user_id=user_id,
                start_date=request.start_date,
                entries=[
                    MealPlanEntry(notes=meal.notes, recipe_id=meal.recipe_id, cooked=False)
                    for meal in request.meals
                ],
            )
            self.db.add(plan)

        logger.info(f"Created meal plan {plan.id} with {len(plan.entries)} meals")
        return to_snapshot(plan)

    async def update_meal_plan(
        self, plan_id: int, user_id: int, request: MealPlanRequest | None
    ) -> MealPlanSnapshot:
        """
        Make the saved plan match ``request.meals``.

        Meals with an id overwrite the matching saved meal, meals without an
        id are added, and saved meals missing from the request are deleted.
        Every check runs before anything is written, and all changes commit
        together.
        """
        if request is None:
            raise ArgumentError("Request object is required")

        with LoggingContext(user_id=user_id, plan_id=plan_id):
            await self._require_user(user_id)
            if request.id is not None and request.id != plan_id:
                logger.warning(f"Payload plan id {request.id} does not match {plan_id}")
                raise NotFoundError(f"Meal plan {request.id} does not match {plan_id}")
            plan = await self._load_owned_plan(plan_id, user_id)

            existing = {entry.id: entry for entry in plan.entries}
            updates = [meal for meal in request.meals if meal.id is not None]
            additions = [meal for meal in request.meals if meal.id is None]

            stray = sorted({meal.id for meal in updates} - existing.keys())
            if stray:
                raise ValidationError(
                    f"Meals {', '.join(map(str, stray))} are not part of plan {plan_id}"
                )
            await self._validate_recipes(request.meals, user_id)

            keep_ids = {meal.id for meal in updates}
            to_delete = [entry for entry_id, entry in existing.items() if entry_id not in keep_ids]

            async with transaction(self.db):
                plan.start_date = request.start_date
                for entry in to_delete:
                    plan.entries.remove(entry)
                for meal in updates:
                    entry = existing[meal.id]
                    entry.notes = meal.notes
                    entry.recipe_id = meal.recipe_id
                for meal in additions:
                    plan.entries.append(
                        MealPlanEntry(notes=meal.notes, recipe_id=meal.recipe_id, cooked=False)
                    )

            logger.info(
                f"Reconciled meal plan {plan_id}: {len(updates)} updated, "
                f"{len(additions)} added, {len(to_delete)} deleted"
            )
            return to_snapshot(plan)

    async def delete_meal_plan(self, plan_id: int, user_id: int) -> bool:
        """Delete a plan and all of its meals."""
        await self._require_user(user_id)
        plan = await self._load_owned_plan(plan_id, user_id)

        async with transaction(self.db):
            await self.db.delete(plan)

        logger.info(f"Deleted meal plan {plan_id}")
        return True

    async def cook_meal(self, plan_id: int, entry_id: int, user_id: int) -> PantryItemsResult:
        """
        Mark a meal as cooked and list the pantry items it probably used.

        Pantry quantities are left alone; the caller decides what to remove.
        Cooking a meal twice is harmless and returns the same items.
        """
        with LoggingContext(user_id=user_id, plan_id=plan_id):
            plan = await self._load_owned_plan(plan_id, user_id)
            entry = await self.repository.get_meal_plan_entry(entry_id)
            if entry is None:
                raise NotFoundError(f"Meal {entry_id} not found")
            if entry.meal_plan_id != plan.id:
                logger.warning(f"Meal {entry_id} is not part of plan {plan_id}")
                raise NotFoundError(f"Meal {entry_id} is not part of plan {plan_id}")

            if not entry.cooked:
                async with transaction(self.db):
                    entry.cooked = True
                logger.info(f"Marked meal {entry_id} as cooked")

            used_food_ids = set()
            if entry.recipe is not None:
                used_food_ids = {ingredient.food_id for ingredient in entry.recipe.ingredients}
            if not used_food_ids:
                return PantryItemsResult(total_count=0, items=[])

            pantry = await self.repository.get_pantry_items(user_id)
            used = [
                PantryItemSchema.model_validate(item)
                for item in pantry
                if item.food_id in used_food_ids
            ]
            return PantryItemsResult(total_count=len(used), items=used)
