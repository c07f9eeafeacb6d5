"""SQLAlchemy database models."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pantryplanner.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User account. Authentication lives outside this service."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    recipes: Mapped[list["Recipe"]] = relationship("Recipe", back_populates="user")
    pantry_items: Mapped[list["PantryItem"]] = relationship("PantryItem", back_populates="user")
    meal_plans: Mapped[list["MealPlan"]] = relationship("MealPlan", back_populates="user")


class Category(Base):
    """Food category (Dairy, Produce, ...)."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    foods: Mapped[list["Food"]] = relationship("Food", back_populates="category")


class Food(Base):
    """A food that can be stocked, used in a recipe or bought."""

    __tablename__ = "foods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), nullable=True)

    category: Mapped[Optional["Category"]] = relationship("Category", back_populates="foods")

    __table_args__ = (Index("idx_foods_name", "name"),)


class PantryItem(Base):
    """Food a user currently has on hand."""

    __tablename__ = "pantry_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    food_id: Mapped[int] = mapped_column(ForeignKey("foods.id"), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="pantry_items")
    food: Mapped["Food"] = relationship("Food")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_pantry_items_quantity_non_negative"),
        Index("idx_pantry_items_user_id", "user_id"),
    )


class Recipe(Base):
    """Recipe owned by a single user."""

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="recipes")
    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
    )

    __table_args__ = (Index("idx_recipes_user_id", "user_id"),)


class RecipeIngredient(Base):
    """A food and amount used by a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(ForeignKey("recipes.id"), nullable=False)
    food_id: Mapped[int] = mapped_column(ForeignKey("foods.id"), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"))
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")
    food: Mapped["Food"] = relationship("Food")


class MealPlan(Base):
    """A user's plan of meals starting on a given date."""

    __tablename__ = "meal_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="meal_plans")
    entries: Mapped[list["MealPlanEntry"]] = relationship(
        "MealPlanEntry",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="MealPlanEntry.id",
    )

    __table_args__ = (Index("idx_meal_plans_user_id", "user_id"),)


class MealPlanEntry(Base):
    """One meal within a plan."""

    __tablename__ = "meal_plan_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_plan_id: Mapped[int] = mapped_column(ForeignKey("meal_plans.id"), nullable=False)
    recipe_id: Mapped[int | None] = mapped_column(ForeignKey("recipes.id"), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cooked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    plan: Mapped["MealPlan"] = relationship("MealPlan", back_populates="entries")
    recipe: Mapped[Optional["Recipe"]] = relationship("Recipe")


class ShoppingListItem(Base):
    """Something a user needs to buy. Items without a food are free text."""

    __tablename__ = "shopping_list_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    food_id: Mapped[int | None] = mapped_column(ForeignKey("foods.id"), nullable=True)
    purchased: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    food: Mapped[Optional["Food"]] = relationship("Food")

    __table_args__ = (Index("idx_shopping_list_items_user_id", "user_id"),)
