# schemas.py
#
# Pydantic models for the JSON the AI model sends back. They are the
# response schema handed to Gemini and the strict validator for its replies;
# wire names stay camelCase through aliases.

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import Ingredient, NutritionInfo, RecipeDraft, category_of


class _Reply(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ParsedIngredient(_Reply):
    name: str = Field(strict=True, description="The ingredient name from the allowed list.")
    percentage: float = Field(
        strict=True, ge=0, allow_inf_nan=False, description="The ingredient's baker's percentage."
    )

    @field_validator("name")
    @classmethod
    def _in_catalog(cls, v: str) -> str:
        category_of(v)
        return v


class ParsedRecipe(_Reply):
    name: str = Field(strict=True, min_length=1, description="The name of the bread recipe.")
    description: str = Field(
        "", strict=True, description="A short, one-sentence description of the bread."
    )
    total_flour_grams: float = Field(
        alias="totalFlourGrams", strict=True, allow_inf_nan=False,
        description="The total weight of all flours in grams.",
    )
    ingredients: List[ParsedIngredient] = Field(description="Ingredients with baker's percentages.")

    @field_validator("total_flour_grams")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("totalFlourGrams must be greater than zero")
        return v

    def to_draft(self) -> RecipeDraft:
        return RecipeDraft(
            name=self.name,
            description=self.description,
            total_flour_grams=self.total_flour_grams,
            ingredients=tuple(Ingredient(i.name, i.percentage) for i in self.ingredients),
        )


class NutritionReply(_Reply):
    calories: float = Field(strict=True, allow_inf_nan=False, description="Total calories for the serving size.")
    protein_grams: float = Field(
        alias="proteinGrams", strict=True, allow_inf_nan=False,
        description="Grams of protein for the serving size.",
    )
    fat_grams: float = Field(
        alias="fatGrams", strict=True, allow_inf_nan=False,
        description="Grams of fat for the serving size.",
    )
    carbohydrate_grams: float = Field(
        alias="carbohydrateGrams", strict=True, allow_inf_nan=False,
        description="Grams of carbohydrates for the serving size.",
    )
    fiber_grams: float = Field(
        alias="fiberGrams", strict=True, allow_inf_nan=False,
        description="Grams of fiber for the serving size.",
    )

    def to_info(self) -> NutritionInfo:
        return NutritionInfo(
            calories=self.calories,
            protein_grams=self.protein_grams,
            fat_grams=self.fat_grams,
            carbohydrate_grams=self.carbohydrate_grams,
            fiber_grams=self.fiber_grams,
        )
