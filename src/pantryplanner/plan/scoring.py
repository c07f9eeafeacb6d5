"""Pantry coverage scoring for recipes."""

from collections.abc import Iterable

from pantryplanner.models import PantryItem, Recipe

POINTS_PER_STOCKED_INGREDIENT = 2


def _normalize(name: str | None) -> str:
    return (name or "").casefold()


def score_recipe(recipe: Recipe, pantry: Iterable[PantryItem]) -> int:
    """
    Score a recipe by how many of its ingredients are already in the pantry.

    Ingredients match pantry items by food name, ignoring case only, so a pantry
    "Milk" covers an ingredient "milk" even when they are different food rows.
    Quantities are not compared.
    """
    stocked = {_normalize(item.food.name) for item in pantry if item.food is not None}
    score = 0
    for ingredient in recipe.ingredients:
        if ingredient.food is not None and _normalize(ingredient.food.name) in stocked:
            score += POINTS_PER_STOCKED_INGREDIENT
    return score
