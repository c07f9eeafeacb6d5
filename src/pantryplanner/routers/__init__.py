"""API routers for the pantryplanner application."""

from pantryplanner.routers.catalog import router as catalog_router
from pantryplanner.routers.meal_plans import router as meal_plans_router
from pantryplanner.routers.shopping_list import router as shopping_list_router

__all__ = [
    "catalog_router",
    "meal_plans_router",
    "shopping_list_router",
]
