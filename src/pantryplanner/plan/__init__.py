"""Meal plan generation, reconciliation and shopping lists."""

from pantryplanner.plan.external import ExternalSourceOrchestrator, build_providers
from pantryplanner.plan.generator import MealPlanGenerator
from pantryplanner.plan.meal_plans import MealPlanService
from pantryplanner.plan.scoring import score_recipe
from pantryplanner.plan.selector import deplete_pantry, select_recipes
from pantryplanner.plan.shopping_list import ShoppingListService, missing_foods

__all__ = [
    "ExternalSourceOrchestrator",
    "MealPlanGenerator",
    "MealPlanService",
    "ShoppingListService",
    "build_providers",
    "deplete_pantry",
    "missing_foods",
    "score_recipe",
    "select_recipes",
]
