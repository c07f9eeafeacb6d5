"""API routes for adding recipes and pantry items."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.catalog import CatalogService
from pantryplanner.database import get_db
from pantryplanner.routers.dependencies import get_user_id
from pantryplanner.schemas import (
    PantryItemRequest,
    PantryItemSchema,
    PantryItemsResult,
    RecipeRequest,
    RecipeSchema,
)

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.post("/recipes", response_model=RecipeSchema, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    request: RecipeRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> RecipeSchema:
    """Create a recipe. Ingredients may reference existing foods or new ones."""
    recipe = await CatalogService(db).create_recipe(user_id, request)
    return RecipeSchema.model_validate(recipe)


@router.put("/recipes/{recipe_id}", response_model=RecipeSchema)
async def replace_recipe(
    recipe_id: int,
    request: RecipeRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> RecipeSchema:
    recipe = await CatalogService(db).replace_recipe(recipe_id, user_id, request)
    return RecipeSchema.model_validate(recipe)


@router.post("/pantry-items", response_model=PantryItemsResult, status_code=status.HTTP_201_CREATED)
async def add_pantry_items(
    requests: list[PantryItemRequest],
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> PantryItemsResult:
    items = await CatalogService(db).add_pantry_items(user_id, requests)
    return PantryItemsResult(
        total_count=len(items),
        items=[PantryItemSchema.model_validate(item) for item in items],
    )
