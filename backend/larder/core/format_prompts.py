"""Insight Prompts — pure builders for the text-generation collaborator.

Invariants:
    - Every builder returns an InsightPrompt (system, user, fallback); no IO
    - `fallback` is the text returned when the model produces nothing
    - Empty-snapshot messages are constants: the shell returns them WITHOUT calling the model
"""

from dataclasses import dataclass
from typing import Sequence

from larder.core.repository_protocols import InventoryItemLike


NO_INVENTORY_DATA = "No inventory data available yet."
NO_REORDER_NEEDED = (
    "All items are sufficiently stocked. No reorder suggestions needed."
)
NO_SPOILAGE_RISK = "No items are at spoilage risk in the next {days} days."
NO_GROCERY_RECIPES = "No recipes found for grocery list."


@dataclass(frozen=True)
class InsightPrompt:
    system: str
    user: str
    fallback: str


def _number(value: float) -> str:
    """2.0 -> '2', 2.5 -> '2.5'."""
    return f"{value:g}"


def demand_prompt(items: Sequence[InventoryItemLike]) -> InsightPrompt:
    lines = "\n".join(
        f"- {i.name}: qty={i.quantity} {i.unit}, price={_number(i.selling_price)}"
        for i in items
    )
    return InsightPrompt(
        system=(
            "You are a retail demand analyst. "
            "Provide a concise demand insight paragraph."
        ),
        user=(
            f"Inventory snapshot:\n{lines}\n\n"
            "Generate a short demand insight paragraph."
        ),
        fallback="No insight generated.",
    )


def reorder_prompt(items: Sequence[InventoryItemLike]) -> InsightPrompt:
    lines = "\n".join(
        f"- {i.name} ({i.category}) qty={i.quantity} {i.unit}, "
        f"supplier={i.supplier}"
        for i in items
    )
    return InsightPrompt(
        system=(
            "You are an inventory planner. "
            "Provide concise reorder quantities and reasoning."
        ),
        user=(
            f"Low stock items:\n{lines}\n\n"
            "Suggest reorder quantities in a short list."
        ),
        fallback="No suggestion generated.",
    )


def spoilage_prompt(items: Sequence[InventoryItemLike]) -> InsightPrompt:
    lines = "\n".join(
        f"- {i.name}: qty={i.quantity} {i.unit}, "
        f"expires={i.expiration_date.isoformat()}"
        for i in items
    )
    return InsightPrompt(
        system=(
            "You analyze perishables. "
            "Suggest discount or action plans to avoid spoilage."
        ),
        user=(
            f"Items expiring soon:\n{lines}\n\n"
            "Recommend discount actions in 3-5 bullets."
        ),
        fallback="No suggestion generated.",
    )


def grocery_list_prompt(ingredients: Sequence[str]) -> InsightPrompt:
    return InsightPrompt(
        system=(
            "You are a kitchen assistant. Turn ingredients into a clean "
            "grocery list grouped by category."
        ),
        user=(
            f"Ingredients:\n{', '.join(ingredients)}\n\n"
            "Generate a grouped grocery list."
        ),
        fallback="No grocery list generated.",
    )


def meal_plan_prompt(preferences: str | None) -> InsightPrompt:
    return InsightPrompt(
        system=(
            "You are a meal planner. Provide a 7-day plan with breakfast, "
            "lunch, and dinner."
        ),
        user=(
            f"Preferences: {preferences or 'none'}\n\n"
            "Generate a 7-day meal plan."
        ),
        fallback="No meal plan generated.",
    )


def recipe_generate_prompt(ingredients: Sequence[str]) -> InsightPrompt:
    return InsightPrompt(
        system=(
            "You are a chef assistant. Create a short, practical recipe with "
            "ingredients and instructions."
        ),
        user=(
            f"Ingredients: {', '.join(ingredients)}\n\n"
            "Generate a recipe with a name, ingredients list, and concise steps."
        ),
        fallback="No recipe generated.",
    )


def recipe_improve_prompt(recipe: str) -> InsightPrompt:
    return InsightPrompt(
        system=(
            "You are a culinary editor. Improve clarity, timing, and flavor "
            "suggestions."
        ),
        user=f"Improve this recipe:\n{recipe}\n\nReturn an improved version.",
        fallback="No improvements generated.",
    )
