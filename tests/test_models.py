import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from auth import user_from_claims
from errors import PermissionDenied, UnknownIngredientError
from models import ALL_INGREDIENTS, Ingredient, IngredientCategory, Recipe, category_of, is_number


def test_catalog_names_unique():
    names = [i.name for i in ALL_INGREDIENTS]
    assert len(names) == len(set(names)) == 15
    assert category_of("Buttermilk") is IngredientCategory.LIQUID


def test_unknown_ingredient_unrepresentable():
    with pytest.raises(UnknownIngredientError):
        Ingredient("Rye Flour", 50)


def test_negative_percentage_rejected():
    with pytest.raises(ValueError):
        Ingredient("Water", -5)


def test_from_dict_defaults_to_user_owned():
    r = Recipe.from_dict({
        "id": "user-1",
        "name": "Loaf",
        "totalFlourGrams": 800,
        "ingredients": [{"name": "White Flour", "percentage": 100}],
    })
    assert r.is_standard is False
    assert r.description == ""
    assert Recipe.from_dict(r.to_dict()) == r


def test_recipes_compare_by_value():
    a = Recipe("user-1", "A", "", 500, [Ingredient("Water", 70)])
    b = Recipe("user-1", "A", "", 500.0, (Ingredient("Water", 70.0),))
    assert a == b


def test_user_from_claims():
    user = user_from_claims({"sub": "1234", "name": "Ada", "email": "ada@example.com", "picture": None})
    assert user.id == "1234"
    assert user.picture is None
    with pytest.raises(PermissionDenied):
        user_from_claims({"name": "No Subject"})


def test_is_number():
    assert is_number(2.5) and is_number(0)
    assert not is_number(True)
    assert not is_number(float("nan"))
    assert not is_number(10 ** 400)


def test_huge_flour_weight_rejected():
    with pytest.raises(ValueError):
        Recipe(id="user-1", name="Loaf", description="", total_flour_grams=10 ** 400)
