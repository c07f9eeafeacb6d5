"""Request and response schemas shared by the services and the HTTP layer."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Foods
# =============================================================================


class CategorySchema(BaseModel):
    """Food category."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class FoodSchema(BaseModel):
    """Food with its category."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_id: int | None = None
    category: CategorySchema | None = None


class ExistingFoodReference(BaseModel):
    """Refer to a food that already exists."""

    mode: Literal["existing"] = "existing"
    id: int


class NewFoodReference(BaseModel):
    """Create a food on the fly from a name and category."""

    mode: Literal["new"] = "new"
    name: str
    category_id: int


FoodReference = Annotated[
    ExistingFoodReference | NewFoodReference,
    Field(discriminator="mode"),
]


# =============================================================================
# Recipes and pantry
# =============================================================================


class RecipeIngredientRequest(BaseModel):
    """Ingredient line submitted with a recipe."""

    food: FoodReference
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    unit: str | None = None


class RecipeRequest(BaseModel):
    """Create or replace a recipe."""

    title: str
    instructions: str = ""
    source: str | None = None
    ingredients: list[RecipeIngredientRequest] = Field(default_factory=list)


class RecipeIngredientSchema(BaseModel):
    """Ingredient line of a stored recipe."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    food_id: int
    food: FoodSchema
    quantity: Decimal
    unit: str | None = None


class RecipeSchema(BaseModel):
    """Stored recipe with its ingredients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    instructions: str
    source: str | None = None
    ingredients: list[RecipeIngredientSchema] = Field(default_factory=list)


class PantryItemRequest(BaseModel):
    """Add a food to the pantry."""

    food: FoodReference
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    unit: str | None = None


class PantryItemSchema(BaseModel):
    """Pantry item as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    food_id: int
    food: FoodSchema
    quantity: Decimal
    unit: str | None = None


class PantryItemsResult(BaseModel):
    """List of pantry items with a total count."""

    total_count: int
    items: list[PantryItemSchema]


# =============================================================================
# Meal plans
# =============================================================================


class MealPlanEntryRequest(BaseModel):
    """Desired state of one meal. No id means a new meal."""

    id: int | None = None
    notes: str | None = None
    recipe_id: int | None = None


class MealPlanRequest(BaseModel):
    """Create or update a meal plan with its full set of meals."""

    id: int | None = None
    start_date: date | None = None
    meals: list[MealPlanEntryRequest] = Field(default_factory=list)


class MealPlanEntrySchema(BaseModel):
    """Persisted meal."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    notes: str | None = None
    recipe_id: int | None = None
    cooked: bool = False


class MealPlanSnapshot(BaseModel):
    """Persisted meal plan and its meals."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    start_date: date | None = None
    meals: list[MealPlanEntrySchema] = Field(default_factory=list)


class MealPlanListResult(BaseModel):
    """Page of meal plans with the total count."""

    total_count: int
    items: list[MealPlanSnapshot]


class GenerateMealPlanRequest(BaseModel):
    """Ask for a generated (unsaved) meal plan."""

    days: int
    start_date: date
    use_external: bool = False


class GeneratedMealPlanEntry(BaseModel):
    """
    A suggested meal.

    Catalog suggestions carry only ``recipe_id``. Suggestions from an external
    source carry ``source`` and ``external_id`` plus enough recipe detail for
    the user to save it into their catalog.
    """

    recipe_id: int | None = None
    source: str = "catalog"
    external_id: str | None = None
    title: str | None = None
    instructions: str | None = None
    source_url: str | None = None
    thumbnail: str | None = None
    ingredients: list[str] = Field(default_factory=list)

    @property
    def is_external(self) -> bool:
        return self.source != "catalog"


class MealPlanDraft(BaseModel):
    """Generated meal plan that has not been saved yet."""

    start_date: date | None = None
    meals: list[GeneratedMealPlanEntry] = Field(default_factory=list)


# =============================================================================
# Shopping list
# =============================================================================


class GenerateShoppingListRequest(BaseModel):
    """Build the shopping list from a meal plan."""

    meal_plan_id: int
    restart: bool = False


class ShoppingListItemSchema(BaseModel):
    """Shopping list entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    food_id: int | None = None
    food: FoodSchema | None = None
    purchased: bool = False
    notes: str | None = None


class ShoppingListResult(BaseModel):
    """A user's shopping list."""

    total_count: int
    items: list[ShoppingListItemSchema]


class ShoppingListItemUpdateRequest(BaseModel):
    """Overwrite a shopping list item."""

    id: int | None = None
    food_id: int | None = None
    purchased: bool = False
    notes: str | None = None
