"""Connectors for external recipe sources."""

from pantryplanner.connectors.base import (
    ConnectorError,
    ConnectorResponse,
    RecipeProvider,
)
from pantryplanner.connectors.mealdb import (
    MealDBConnector,
    MealDBRecipeProvider,
    MealIngredient,
    ParsedMeal,
)

__all__ = [
    "ConnectorError",
    "ConnectorResponse",
    "MealDBConnector",
    "MealDBRecipeProvider",
    "MealIngredient",
    "ParsedMeal",
    "RecipeProvider",
]
