"""AI-powered recipe parsing and nutrition estimates through Google Gemini."""

import logging
from typing import Any, Optional, Type

from google import genai
from google.genai import types
from pydantic import BaseModel

from calc import (
    BAKING_WATER_LOSS,
    baked_ingredient_grams,
    compute_total_dough_weight,
    validate_nutrition,
    validate_parsed_recipe,
)
from config import DEFAULT_MODEL, Settings
from errors import ConfigurationError, NutritionError, ParseError, ValidationError
from models import ALL_INGREDIENTS, NutritionInfo, Recipe, RecipeDraft
from schemas import NutritionReply, ParsedRecipe

logger = logging.getLogger(__name__)

PARSE_FAILED = (
    "Failed to parse recipe. The AI model could not understand the provided text "
    "or an API error occurred. Please try again with a clearer recipe format."
)
NUTRITION_FAILED = (
    "Failed to calculate nutrition. The AI model could not process the recipe "
    "or an API error occurred."
)


def build_parse_prompt(text: str) -> str:
    catalog = "\n".join(f"- {i.name} ({i.category.value})" for i in ALL_INGREDIENTS)
    return f"""
You are an expert baker's assistant. Convert the bread recipe below into structured JSON.

1. Identify the recipe's name and write a concise, one-sentence description.
2. Identify all ingredients and their amounts in grams.
3. Calculate the TOTAL FLOUR WEIGHT in grams: the sum of all flour types.
4. For EACH ingredient, calculate its baker's percentage:
   (Ingredient Weight / Total Flour Weight) * 100.
5. Map each ingredient to exactly one of these names (category in brackets):
{catalog}
   Rye or spelt flour maps to 'Other Flour'. Olive oil maps to 'Butter or Oil'.
   Honey or malt syrup maps to 'Sugar / Honey / Malt'. Nuts or seeds map to
   'Inclusion 1' or 'Inclusion 2'.
6. The percentages of all Flour ingredients must sum to 100. Adjust them
   proportionally if your calculation differs slightly.
7. Do not include any ingredient with a percentage of 0.

Recipe text:
---
{text}
---
"""


def build_nutrition_prompt(recipe: Recipe, serving_size_grams: float) -> str:
    baked = baked_ingredient_grams(recipe)
    lines = "\n".join(f"{name}: {grams:.1f}g" for name, grams in baked)
    return f"""
You are an expert nutritionist's assistant. Calculate the nutrition of one serving of baked bread.

The ingredient weights below are for the baked loaf: {BAKING_WATER_LOSS:.0%} of the water
has already been removed to account for evaporation. Calculate the values for the
entire loaf first, then scale them to a single {serving_size_grams:g}g serving.

Ingredients:
---
{lines}
---
Total raw dough weight: {compute_total_dough_weight(recipe):.1f}g
Total baked weight: {sum(g for _, g in baked):.1f}g
Serving size: {serving_size_grams:g}g
"""


class GeminiService:
    """Thin client for the two AI features.

    Build one per session and pass it to whoever needs it; it keeps only
    the API credential and the underlying SDK client. Calls are single
    shot: no retries, no caching.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client: Optional[Any] = None):
        if not api_key and client is None:
            raise ConfigurationError("AI features are disabled. API key is missing.")
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiService":
        if not settings.gemini_api_key:
            logger.error("Gemini API key is not configured. Set GEMINI_API_KEY.")
            raise ConfigurationError("AI features are disabled. API key is missing.")
        return cls(settings.gemini_api_key, model=settings.gemini_model)

    def _generate_json(self, prompt: str, schema: Type[BaseModel]) -> str:
        """Raw JSON text of the reply; validation is up to the caller."""
        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return response.text or ""

    def parse_recipe_from_text(self, text: str) -> RecipeDraft:
        if not text or not text.strip():
            raise ParseError("Please paste recipe text.")
        try:
            data = self._generate_json(build_parse_prompt(text), ParsedRecipe)
        except Exception as e:
            logger.exception("Error parsing recipe with Gemini API")
            raise ParseError(PARSE_FAILED, detail=repr(e)) from e
        try:
            return validate_parsed_recipe(data)
        except ValidationError as e:
            logger.warning("Rejected parsed recipe: %s", e.detail)
            raise

    def estimate_nutrition(self, recipe: Recipe, serving_size_grams: float = 100.0) -> NutritionInfo:
        if serving_size_grams <= 0:
            raise NutritionError("Serving size must be greater than zero.")
        try:
            data = self._generate_json(build_nutrition_prompt(recipe, serving_size_grams), NutritionReply)
        except Exception as e:
            logger.exception("Error fetching nutritional information with Gemini API")
            raise NutritionError(NUTRITION_FAILED, detail=repr(e)) from e
        try:
            return validate_nutrition(data)
        except ValidationError as e:
            logger.warning("Rejected nutrition data: %s", e.detail)
            raise NutritionError(NUTRITION_FAILED, detail=e.detail) from e
