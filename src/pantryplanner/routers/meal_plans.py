"""API routes for meal plan generation and management."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from pantryplanner.database import get_db
from pantryplanner.logging_config import LoggingContext, get_logger
from pantryplanner.plan.external import ExternalSourceOrchestrator
from pantryplanner.plan.generator import MealPlanGenerator
from pantryplanner.plan.meal_plans import MealPlanService
from pantryplanner.routers.dependencies import get_orchestrator, get_user_id
from pantryplanner.schemas import (
    GenerateMealPlanRequest,
    MealPlanDraft,
    MealPlanListResult,
    MealPlanRequest,
    MealPlanSnapshot,
    PantryItemsResult,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


@router.post("/generate", response_model=MealPlanDraft)
async def generate_meal_plan(
    request: GenerateMealPlanRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    orchestrator: ExternalSourceOrchestrator = Depends(get_orchestrator),
) -> MealPlanDraft:
    """
    Suggest an unsaved meal plan with one meal per day.

    Recipes from the caller's catalog that use the most pantry items come
    first. Remaining days are filled from external recipe sources, or every
    day is when ``use_external`` is set.
    """
    with LoggingContext(user_id=user_id):
        generator = MealPlanGenerator(db, orchestrator)
        return await generator.generate_meal_plan(
            user_id,
            request.days,
            request.start_date,
            use_external=request.use_external,
        )


@router.get("/", response_model=MealPlanListResult)
async def list_meal_plans(
    skip: int = Query(0),
    take: int = Query(10),
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> MealPlanListResult:
    """List the caller's meal plans, newest first."""
    return await MealPlanService(db).get_meal_plans(user_id, skip=skip, take=take)


@router.post("/", response_model=MealPlanSnapshot, status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    request: MealPlanRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> MealPlanSnapshot:
    """Save a meal plan, usually an accepted draft."""
    with LoggingContext(user_id=user_id):
        return await MealPlanService(db).add_meal_plan(user_id, request)


@router.get("/{plan_id}", response_model=MealPlanSnapshot)
async def get_meal_plan(
    plan_id: int,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> MealPlanSnapshot:
    return await MealPlanService(db).get_meal_plan(plan_id, user_id)


@router.put("/{plan_id}", response_model=MealPlanSnapshot)
async def update_meal_plan(
    plan_id: int,
    request: MealPlanRequest,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> MealPlanSnapshot:
    """
    Replace the plan's meals with the submitted set.

    Meals with an id are updated, meals without one are added and meals left
    out are deleted.
    """
    return await MealPlanService(db).update_meal_plan(plan_id, user_id, request)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_plan(
    plan_id: int,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await MealPlanService(db).delete_meal_plan(plan_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{plan_id}/cook/{entry_id}", response_model=PantryItemsResult)
async def cook_meal(
    plan_id: int,
    entry_id: int,
    user_id: int = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> PantryItemsResult:
    """Mark a meal as cooked and return the pantry items it used."""
    return await MealPlanService(db).cook_meal(plan_id, entry_id, user_id)
