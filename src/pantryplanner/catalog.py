"""Recipe and pantry writes that resolve food references."""

from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.database import transaction
from pantryplanner.errors import NotFoundError, ValidationError
from pantryplanner.logging_config import get_logger
from pantryplanner.models import Category, Food, PantryItem, Recipe, RecipeIngredient
from pantryplanner.repository import PlannerRepository
from pantryplanner.schemas import (
    ExistingFoodReference,
    FoodReference,
    NewFoodReference,
    PantryItemRequest,
    RecipeRequest,
)

logger = get_logger(__name__)


async def resolve_food_reference(db: AsyncSession, ref: FoodReference) -> Food:
    """
    Turn a food reference into a Food row.

    Existing references must point at a stored food. New references create
    the food and flush it so its id can be used by the caller in the same
    transaction.
    """
    if isinstance(ref, ExistingFoodReference):
        food = await db.get(Food, ref.id)
        if food is None:
            logger.warning(f"Unknown food id {ref.id}")
            raise ValidationError(f"Food {ref.id} does not exist")
        return food

    if isinstance(ref, NewFoodReference):
        if not ref.name or not ref.name.strip():
            raise ValidationError("Food name is required")
        if await db.get(Category, ref.category_id) is None:
            logger.warning(f"Unknown category id {ref.category_id}")
            raise ValidationError(f"Category {ref.category_id} does not exist")
        food = Food(name=ref.name.strip(), category_id=ref.category_id)
        db.add(food)
        await db.flush()
        logger.info(f"Created food {food.id} '{food.name}'")
        return food

    raise ValidationError(f"Unsupported food reference: {ref!r}")


class CatalogService:
    """Writes to a user's recipe catalog and pantry."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = PlannerRepository(db)

    async def _require_user(self, user_id: int) -> None:
        if not await self.repository.user_exists(user_id):
            raise NotFoundError(f"User {user_id} does not exist")

    async def _build_ingredients(self, request: RecipeRequest) -> list[RecipeIngredient]:
        ingredients = []
        for line in request.ingredients:
            food = await resolve_food_reference(self.db, line.food)
            ingredients.append(
                RecipeIngredient(food_id=food.id, food=food, quantity=line.quantity, unit=line.unit)
            )
        return ingredients

    async def create_recipe(self, user_id: int, request: RecipeRequest) -> Recipe:
        """Create a recipe, creating any new foods it references."""
        if not request.title.strip():
            raise ValidationError("Recipe title is required")
        await self._require_user(user_id)

        async with transaction(self.db):
            recipe = Recipe(
                user_id=user_id,
                title=request.title.strip(),
                instructions=request.instructions,
                source=request.source,
                ingredients=await self._build_ingredients(request),
            )
            self.db.add(recipe)

        logger.info(f"Created recipe {recipe.id} with {len(recipe.ingredients)} ingredients")
        return await self.repository.get_recipe(recipe.id, user_id)

    async def replace_recipe(self, recipe_id: int, user_id: int, request: RecipeRequest) -> Recipe:
        """Overwrite a recipe. The ingredient list is replaced as a whole."""
        recipe = await self.repository.get_recipe(recipe_id, user_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")

        async with transaction(self.db):
            recipe.title = request.title
            recipe.instructions = request.instructions
            recipe.source = request.source
            recipe.ingredients = await self._build_ingredients(request)

        logger.info(f"Replaced recipe {recipe_id}")
        return await self.repository.get_recipe(recipe_id, user_id)

    async def add_pantry_items(
        self, user_id: int, requests: list[PantryItemRequest]
    ) -> list[PantryItem]:
        """Add several pantry items at once."""
        await self._require_user(user_id)

        items = []
        async with transaction(self.db):
            for request in requests:
                food = await resolve_food_reference(self.db, request.food)
                item = PantryItem(
                    user_id=user_id,
                    food_id=food.id,
                    food=food,
                    quantity=request.quantity,
                    unit=request.unit,
                )
                self.db.add(item)
                items.append(item)

        logger.info(f"Added {len(items)} pantry items for user {user_id}")
        added = {item.id for item in items}
        pantry = await self.repository.get_pantry_items(user_id)
        return [item for item in pantry if item.id in added]
