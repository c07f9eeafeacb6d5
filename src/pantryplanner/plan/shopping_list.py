"""Shopping list generation from meal plans and the pantry."""

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.database import transaction
from pantryplanner.errors import ArgumentError, NotFoundError, ValidationError
from pantryplanner.logging_config import LoggingContext, get_logger
from pantryplanner.models import Food, MealPlan, PantryItem, ShoppingListItem
from pantryplanner.repository import PlannerRepository
from pantryplanner.schemas import (
    GenerateShoppingListRequest,
    ShoppingListItemSchema,
    ShoppingListItemUpdateRequest,
    ShoppingListResult,
)

logger = get_logger(__name__)


def missing_foods(plan: MealPlan, pantry: list[PantryItem]) -> dict[int, Food]:
    """
    Collect the foods a plan needs that the pantry does not have.

    Pantry items match ingredients by food id and only count when their
    quantity is above zero. A meal whose ingredients are all stocked adds
    nothing. The result is keyed by food id, so a food used by several meals
    appears once.
    """
    stocked_ids = {item.food_id for item in pantry if item.quantity > 0}
    needed: dict[int, Food] = {}

    for entry in plan.entries:
        recipe = entry.recipe
        if recipe is None or not recipe.ingredients:
            continue

        required = {ing.food_id: ing.food for ing in recipe.ingredients if ing.food is not None}
        missing = required.keys() - stocked_ids
        if not missing:
            continue

        for food_id in missing:
            needed[food_id] = required[food_id]

    return needed


def _sort_key(item: ShoppingListItem) -> tuple:
    # Uncategorised and free-text items go last
    category = item.food.category if item.food is not None else None
    if category is None:
        return (1, "", (item.food.name.casefold() if item.food else ""), item.id)
    return (0, category.name.casefold(), item.food.name.casefold(), item.id)


class ShoppingListService:
    """Maintains a user's shopping list."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = PlannerRepository(db)

    async def get_shopping_list(self, user_id: int) -> ShoppingListResult:
        """Return the list grouped by category name, then food name."""
        items = sorted(await self.repository.get_shopping_list_items(user_id), key=_sort_key)
        return ShoppingListResult(
            total_count=len(items),
            items=[ShoppingListItemSchema.model_validate(item) for item in items],
        )

    async def generate(self, request: GenerateShoppingListRequest | None, user_id: int) -> None:
        """
        Add what a meal plan needs to the shopping list.

        In append mode foods already on the list are skipped. In restart mode
        the user's whole list is cleared first, including items that came from
        other plans, and purchased flags and notes are lost.
        """
        if request is None:
            raise ArgumentError("Request object is required")

        with LoggingContext(user_id=user_id, plan_id=request.meal_plan_id):
            plan = await self.repository.get_meal_plan(request.meal_plan_id, with_recipes=True)
            if plan is None:
                logger.warning(f"Meal plan {request.meal_plan_id} does not exist")
                raise ValidationError("Valid meal plan id must be given")
            if plan.user_id != user_id:
                logger.warning(f"User {user_id} does not own meal plan {plan.id}")
                raise ValidationError("User does not have permission to access meal plan")

            pantry = await self.repository.get_pantry_items(user_id)
            needed = missing_foods(plan, pantry)

            async with transaction(self.db):
                if request.restart:
                    await self.db.execute(
                        delete(ShoppingListItem).where(ShoppingListItem.user_id == user_id)
                    )
                    to_add = list(needed)
                else:
                    listed = {
                        item.food_id
                        for item in await self.repository.get_shopping_list_items(user_id)
                        if item.food_id is not None
                    }
                    to_add = [food_id for food_id in needed if food_id not in listed]

                self.db.add_all(
                    ShoppingListItem(user_id=user_id, food_id=food_id, purchased=False)
                    for food_id in to_add
                )

            logger.info(
                f"Shopping list {'restarted' if request.restart else 'appended'} "
                f"with {len(to_add)} of {len(needed)} needed foods"
            )

    async def update_shopping_list_item(
        self, request: ShoppingListItemUpdateRequest | None, user_id: int
    ) -> ShoppingListItemSchema:
        """Overwrite one item's food, purchased flag and notes."""
        if request is None:
            raise ArgumentError("Request object is required")
        if request.id is None:
            raise ArgumentError("Id is required for updating a shopping list item")

        items = await self.repository.get_shopping_list_items(user_id)
        item = next((i for i in items if i.id == request.id), None)
        if item is None:
            raise NotFoundError(f"Shopping list item {request.id} not found")

        food = None
        if request.food_id is not None:
            food = await self.repository.get_food(request.food_id)
            if food is None:
                raise ValidationError(f"Food {request.food_id} does not exist")

        async with transaction(self.db):
            item.food_id = request.food_id
            item.food = food
            item.purchased = request.purchased
            item.notes = request.notes

        return ShoppingListItemSchema.model_validate(item)
