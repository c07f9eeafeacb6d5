"""Tests for greedy recipe selection."""

from conftest import build_food, build_pantry, build_recipe

from pantryplanner.plan.selector import deplete_pantry, select_recipes


class TestDepletePantry:
    """Tests for deplete_pantry."""

    def test_removes_one_item_per_ingredient(self, foods):
        pantry = build_pantry(foods.milk, foods.milk, foods.eggs)

        deplete_pantry(pantry, build_recipe(1, foods.milk))

        assert [item.food_id for item in pantry] == [foods.milk.id, foods.eggs.id]

    def test_matches_by_food_id_only(self):
        pantry = build_pantry(build_food(1, "Milk"))

        deplete_pantry(pantry, build_recipe(1, build_food(7, "milk")))

        assert len(pantry) == 1

    def test_missing_ingredients_are_ignored(self, foods):
        pantry = build_pantry(foods.eggs)

        deplete_pantry(pantry, build_recipe(1, foods.milk, foods.flour))

        assert [item.food_id for item in pantry] == [foods.eggs.id]


class TestSelectRecipes:
    """Tests for select_recipes."""

    def test_picks_highest_coverage_first(self, foods):
        pancakes = build_recipe(1, foods.milk, foods.eggs, foods.flour)
        omelette = build_recipe(2, foods.eggs, foods.milk, foods.tomato)
        risotto = build_recipe(3, foods.rice, foods.onion)
        pantry = build_pantry(foods.milk, foods.eggs, foods.flour, foods.rice, foods.onion)

        selected = select_recipes(2, [risotto, omelette, pancakes], pantry)

        assert [r.id for r in selected] == [1, 3]

    def test_ties_go_to_earliest_recipe(self, foods):
        first = build_recipe(1, foods.milk)
        second = build_recipe(2, foods.eggs)
        pantry = build_pantry(foods.milk, foods.eggs)

        selected = select_recipes(1, [first, second], pantry)

        assert selected == [first]

    def test_never_exceeds_requested_count(self, foods):
        recipes = [build_recipe(i, foods.milk) for i in range(1, 6)]
        pantry = build_pantry(*([foods.milk] * 10))

        assert len(select_recipes(3, recipes, pantry)) == 3

    def test_never_repeats_a_recipe(self, foods):
        recipe = build_recipe(1, foods.milk)
        pantry = build_pantry(*([foods.milk] * 5))

        assert select_recipes(4, [recipe], pantry) == [recipe]

    def test_stops_when_pantry_runs_out(self, foods):
        """The second recipe would score zero once the first used the only milk."""
        first = build_recipe(1, foods.milk)
        second = build_recipe(2, foods.milk)
        pantry = build_pantry(foods.milk)

        assert select_recipes(2, [first, second], pantry) == [first]

    def test_never_selects_zero_score_recipe(self, foods):
        covered = build_recipe(1, foods.milk)
        uncovered = build_recipe(2, foods.tomato)

        selected = select_recipes(2, [uncovered, covered], build_pantry(foods.milk))

        assert selected == [covered]

    def test_depletion_uses_ids_while_scoring_uses_names(self):
        """A name-only match scores but never depletes, so it can be scored again."""
        stocked_milk = build_food(1, "Milk")
        recipe_milk = build_food(7, "milk")
        first = build_recipe(1, recipe_milk)
        second = build_recipe(2, recipe_milk)

        selected = select_recipes(2, [first, second], build_pantry(stocked_milk))

        assert selected == [first, second]

    def test_caller_pantry_is_not_modified(self, foods):
        pantry = build_pantry(foods.milk, foods.eggs)

        select_recipes(2, [build_recipe(1, foods.milk, foods.eggs)], pantry)

        assert len(pantry) == 2

    def test_empty_catalog(self, foods):
        assert select_recipes(3, [], build_pantry(foods.milk)) == []
