"""Recipe data model: ingredient catalog, recipes and nutrition values."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from errors import UnknownIngredientError


class IngredientCategory(str, Enum):
    FLOUR = "Flour"
    LIQUID = "Liquid"
    LEAVENING = "Leavening"
    ENRICHMENT = "Enrichment"
    FLAVOR = "Flavor"
    INCLUSION = "Inclusion"


@dataclass(frozen=True)
class IngredientInfo:
    name: str
    category: IngredientCategory


# Everything the editor and the AI parser may refer to.
ALL_INGREDIENTS: Tuple[IngredientInfo, ...] = (
    IngredientInfo("White Flour", IngredientCategory.FLOUR),
    IngredientInfo("Whole Wheat Flour", IngredientCategory.FLOUR),
    IngredientInfo("Other Flour", IngredientCategory.FLOUR),
    IngredientInfo("Water", IngredientCategory.LIQUID),
    IngredientInfo("Milk", IngredientCategory.LIQUID),
    IngredientInfo("Buttermilk", IngredientCategory.LIQUID),
    IngredientInfo("Sourdough Levain", IngredientCategory.LEAVENING),
    IngredientInfo("Fresh Yeast", IngredientCategory.LEAVENING),
    IngredientInfo("Dried Yeast", IngredientCategory.LEAVENING),
    IngredientInfo("Salt", IngredientCategory.FLAVOR),
    IngredientInfo("Sugar / Honey / Malt", IngredientCategory.FLAVOR),
    IngredientInfo("Diastatic Malt Powder", IngredientCategory.ENRICHMENT),
    IngredientInfo("Butter or Oil", IngredientCategory.ENRICHMENT),
    IngredientInfo("Inclusion 1", IngredientCategory.INCLUSION),
    IngredientInfo("Inclusion 2", IngredientCategory.INCLUSION),
)

_CATALOG: Dict[str, IngredientInfo] = {i.name: i for i in ALL_INGREDIENTS}

INGREDIENT_NAMES: Tuple[str, ...] = tuple(_CATALOG)


def ingredient_info(name: str) -> IngredientInfo:
    """Return the catalog entry for ``name``."""
    try:
        return _CATALOG[name]
    except KeyError:
        raise UnknownIngredientError(
            f"Unknown ingredient: {name!r}",
            detail=f"valid names: {', '.join(INGREDIENT_NAMES)}",
        ) from None


def category_of(name: str) -> IngredientCategory:
    return ingredient_info(name).category


def is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


@dataclass(frozen=True)
class Ingredient:
    """A recipe line: catalog name plus baker's percentage."""

    name: str
    percentage: float = 0.0

    def __post_init__(self):
        ingredient_info(self.name)
        if not is_number(self.percentage) or self.percentage < 0:
            raise ValueError(f"percentage must be a non-negative number, got {self.percentage!r}")
        object.__setattr__(self, "percentage", float(self.percentage))

    @property
    def category(self) -> IngredientCategory:
        return category_of(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "percentage": self.percentage}


@dataclass(frozen=True)
class RecipeDraft:
    """A parsed recipe that has not been given an id yet."""

    name: str
    description: str
    total_flour_grams: float
    ingredients: Tuple[Ingredient, ...] = ()


@dataclass(frozen=True)
class Recipe:
    """A bread recipe in baker's-percentage form.

    Recipes are values: every edit produces a new instance, and ``==``
    tells whether an edited copy differs from the saved one.
    """

    id: str
    name: str
    description: str
    total_flour_grams: float
    ingredients: Tuple[Ingredient, ...] = field(default_factory=tuple)
    is_standard: bool = False

    def __post_init__(self):
        if not is_number(self.total_flour_grams) or self.total_flour_grams < 0:
            raise ValueError(f"total_flour_grams must be a non-negative number, got {self.total_flour_grams!r}")
        object.__setattr__(self, "total_flour_grams", float(self.total_flour_grams))
        object.__setattr__(self, "ingredients", tuple(self.ingredients))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "totalFlourGrams": self.total_flour_grams,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "isStandard": self.is_standard,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description", ""),
            total_flour_grams=data["totalFlourGrams"],
            ingredients=tuple(
                Ingredient(i["name"], i["percentage"]) for i in data.get("ingredients", [])
            ),
            is_standard=bool(data.get("isStandard", False)),
        )


@dataclass(frozen=True)
class NutritionInfo:
    calories: float
    protein_grams: float
    fat_grams: float
    carbohydrate_grams: float
    fiber_grams: float


@dataclass(frozen=True)
class User:
    id: str
    name: str = ""
    email: str = ""
    picture: Optional[str] = None
