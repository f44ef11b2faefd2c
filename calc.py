"""Pure calculation utilities for baker's-percentage recipes."""

from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from errors import IndexOutOfRange, ValidationError
from models import Ingredient, IngredientCategory, NutritionInfo, Recipe, RecipeDraft
from schemas import NutritionReply, ParsedRecipe

DEFAULT_DOUGH_WEIGHT = 1000.0
DEFAULT_NEW_INGREDIENT = "Water"
# Share of water weight lost to evaporation during the bake.
BAKING_WATER_LOSS = 0.20


def compute_ingredient_grams(recipe: Recipe, ingredient: Ingredient) -> float:
    """Absolute weight of one ingredient in grams."""
    return (ingredient.percentage / 100.0) * recipe.total_flour_grams


def total_percentage(recipe: Recipe) -> float:
    return sum(i.percentage for i in recipe.ingredients)


def compute_total_dough_weight(recipe: Recipe) -> float:
    """Sum of all ingredient weights; 0 for a recipe without ingredients."""
    return (total_percentage(recipe) / 100.0) * recipe.total_flour_grams


def rescale_to_dough_weight(recipe: Recipe, desired_dough_weight: float) -> Recipe:
    """Return a copy whose flour weight yields ``desired_dough_weight``.

    Percentages stay fixed. A recipe whose percentages sum to zero has no
    scaling factor and is returned unchanged.
    """
    total_pct = total_percentage(recipe)
    if total_pct <= 0:
        return recipe
    desired = max(float(desired_dough_weight), 0.0)
    return replace(recipe, total_flour_grams=(desired / total_pct) * 100.0)


def is_editable(recipe: Recipe) -> bool:
    return not recipe.is_standard


def _check_index(recipe: Recipe, index: int) -> None:
    if index < 0 or index >= len(recipe.ingredients):
        raise IndexOutOfRange(
            "That ingredient no longer exists.",
            detail=f"index {index} outside 0..{len(recipe.ingredients) - 1} for recipe {recipe.id}",
        )


def set_ingredient_percentage(recipe: Recipe, index: int, new_percentage: float) -> Recipe:
    if recipe.is_standard:
        return recipe
    _check_index(recipe, index)
    items = list(recipe.ingredients)
    items[index] = replace(items[index], percentage=max(float(new_percentage), 0.0))
    return replace(recipe, ingredients=tuple(items))


def set_ingredient_name(recipe: Recipe, index: int, name: str) -> Recipe:
    """Swap the catalog ingredient at ``index``, keeping its percentage."""
    if recipe.is_standard:
        return recipe
    _check_index(recipe, index)
    items = list(recipe.ingredients)
    items[index] = Ingredient(name, items[index].percentage)
    return replace(recipe, ingredients=tuple(items))


def add_ingredient(recipe: Recipe, name: str = DEFAULT_NEW_INGREDIENT) -> Recipe:
    if recipe.is_standard:
        return recipe
    return replace(recipe, ingredients=recipe.ingredients + (Ingredient(name, 0.0),))


def remove_ingredient(recipe: Recipe, index: int) -> Recipe:
    if recipe.is_standard:
        return recipe
    _check_index(recipe, index)
    items = recipe.ingredients[:index] + recipe.ingredients[index + 1:]
    return replace(recipe, ingredients=items)


def update_details(recipe: Recipe, name: Optional[str] = None, description: Optional[str] = None) -> Recipe:
    if recipe.is_standard:
        return recipe
    changes: Dict[str, str] = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    return replace(recipe, **changes) if changes else recipe


def duplicate_recipe(recipe: Recipe, new_id: str, name: Optional[str] = None) -> Recipe:
    """User-owned, editable copy of any recipe (standard ones included)."""
    return replace(
        recipe,
        id=new_id,
        name=name if name is not None else f"{recipe.name} (copy)",
        is_standard=False,
    )


def recipe_from_draft(draft: RecipeDraft, recipe_id: str) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=draft.name,
        description=draft.description,
        total_flour_grams=draft.total_flour_grams,
        ingredients=draft.ingredients,
        is_standard=False,
    )


def _sum_category(recipe: Recipe, category: IngredientCategory) -> float:
    return sum(i.percentage for i in recipe.ingredients if i.category == category)


def flour_percentage(recipe: Recipe) -> float:
    """Sum of flour percentages; 100 for a consistent recipe."""
    return _sum_category(recipe, IngredientCategory.FLOUR)


def hydration(recipe: Recipe) -> float:
    return _sum_category(recipe, IngredientCategory.LIQUID)


def flour_types(recipe: Recipe) -> List[str]:
    return [
        i.name.replace(" Flour", "")
        for i in recipe.ingredients
        if i.category == IngredientCategory.FLOUR
    ]


def ingredient_breakdown(recipe: Recipe) -> List[Tuple[str, float]]:
    return [(i.name, compute_ingredient_grams(recipe, i)) for i in recipe.ingredients]


def baked_ingredient_grams(recipe: Recipe) -> List[Tuple[str, float]]:
    """Ingredient weights after the bake, with part of the water evaporated."""
    out = []
    for name, grams in ingredient_breakdown(recipe):
        if name == "Water":
            grams *= 1.0 - BAKING_WATER_LOSS
        out.append((name, grams))
    return out


# -----------------------------------------------------------------------------
# Validation of AI output
# -----------------------------------------------------------------------------
def _validate(model, data: Union[str, bytes, Dict[str, Any]], message: str):
    try:
        if isinstance(data, (str, bytes)):
            return model.model_validate_json(data)
        return model.model_validate(data)
    except (PydanticValidationError, OverflowError) as e:
        raise ValidationError(message, detail=str(e)) from e


def validate_parsed_recipe(data: Union[str, bytes, Dict[str, Any]]) -> RecipeDraft:
    """Check a parsed recipe (raw JSON text or decoded object) and return a draft.

    Nothing is coerced: a blank name, a non-positive flour weight, a
    negative percentage or an unknown ingredient rejects the whole result.
    """
    parsed = _validate(
        ParsedRecipe, data,
        "The AI model returned a recipe in an unexpected format. "
        "Please try again with a clearer recipe.",
    )
    return parsed.to_draft()


def validate_nutrition(data: Union[str, bytes, Dict[str, Any]]) -> NutritionInfo:
    reply = _validate(NutritionReply, data, "The AI model returned nutrition data in an unexpected format.")
    return reply.to_info()
