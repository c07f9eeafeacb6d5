"""API routes for the shopping list."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.database import get_db
from pantryplanner.plan.shopping_list import ShoppingListService
from pantryplanner.routers.dependencies import get_user_id
from pantryplanner.schemas import (
    GenerateShoppingListRequest,
    ShoppingListItemSchema,
    ShoppingListItemUpdateRequest,
    ShoppingListResult,
)

router = APIRouter(prefix="/api/v1/shopping-list", tags=["shopping-list"])


@router.post("/generate", status_code=status.HTTP_204_NO_CONTENT)
async def generate_shopping_list(
    request: GenerateShoppingListRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Add the foods a meal plan needs and the pantry lacks."""
    await ShoppingListService(db).generate(request, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/", response_model=ShoppingListResult)
async def get_shopping_list(
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> ShoppingListResult:
    return await ShoppingListService(db).get_shopping_list(user_id)


@router.put("/{item_id}", response_model=ShoppingListItemSchema)
async def update_shopping_list_item(
    item_id: int,
    request: ShoppingListItemUpdateRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> ShoppingListItemSchema:
    # The path decides which item is updated
    request = request.model_copy(update={"id": item_id})
    return await ShoppingListService(db).update_shopping_list_item(request, user_id)
