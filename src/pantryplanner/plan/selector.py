"""Greedy recipe selection driven by pantry coverage."""

from collections.abc import Sequence

from pantryplanner.logging_config import get_logger
from pantryplanner.models import PantryItem, Recipe
from pantryplanner.plan.scoring import score_recipe

logger = get_logger(__name__)


def deplete_pantry(pantry: list[PantryItem], recipe: Recipe) -> None:
    """
    Remove from ``pantry`` the items a recipe would use up.

    Each ingredient removes at most one pantry item with the same food id.
    Quantities are not tracked, so an item is either available or gone.
    """
    for ingredient in recipe.ingredients:
        for index, item in enumerate(pantry):
            if item.food_id == ingredient.food_id:
                del pantry[index]
                break


def select_recipes(
    requested_count: int,
    recipes: Sequence[Recipe],
    pantry: Sequence[PantryItem],
) -> list[Recipe]:
    """
    Pick up to ``requested_count`` recipes that make the most of the pantry.

    Every round scores the remaining candidates against a working copy of the
    pantry. Candidates scoring zero are dropped for good, the best one is
    picked (earliest in ``recipes`` on ties) and its ingredients are taken out
    of the working pantry before the next round.
    """
    pool = list(recipes)
    working_pantry = list(pantry)
    selected: list[Recipe] = []

    for _ in range(requested_count):
        scored = [(recipe, score_recipe(recipe, working_pantry)) for recipe in pool]
        scored = [(recipe, score) for recipe, score in scored if score > 0]
        pool = [recipe for recipe, _ in scored]

        if not pool:
            logger.debug("No remaining recipes cover the pantry")
            break

        # max() keeps the first of equal scores, so catalog order breaks ties
        best, best_score = max(scored, key=lambda pair: pair[1])
        pool.remove(best)
        deplete_pantry(working_pantry, best)
        selected.append(best)
        logger.debug(f"Selected recipe {best.id} with score {best_score}")

    return selected
