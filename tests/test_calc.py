import sys
from dataclasses import replace
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from calc import (
    add_ingredient,
    baked_ingredient_grams,
    compute_ingredient_grams,
    compute_total_dough_weight,
    duplicate_recipe,
    flour_percentage,
    flour_types,
    hydration,
    is_editable,
    recipe_from_draft,
    remove_ingredient,
    rescale_to_dough_weight,
    set_ingredient_name,
    set_ingredient_percentage,
    update_details,
    validate_nutrition,
    validate_parsed_recipe,
)
from errors import IndexOutOfRange, ParseError, UnknownIngredientError, ValidationError
from models import Ingredient, Recipe
from standard_recipes import STANDARD_RECIPES


@pytest.fixture
def basic():
    return Recipe(
        id="user-1",
        name="Basic",
        description="",
        total_flour_grams=1000,
        ingredients=(
            Ingredient("White Flour", 90),
            Ingredient("Water", 75),
            Ingredient("Salt", 2),
        ),
    )


@pytest.fixture
def standard(basic):
    return replace(basic, id="std-x", is_standard=True)


def test_total_dough_weight(basic):
    assert compute_total_dough_weight(basic) == pytest.approx(1670.0)


def test_total_dough_weight_matches_percentage_formula():
    for r in STANDARD_RECIPES:
        pct = sum(i.percentage for i in r.ingredients)
        assert compute_total_dough_weight(r) == pytest.approx(pct / 100 * r.total_flour_grams)


def test_total_dough_weight_empty():
    r = Recipe(id="user-2", name="Empty", description="", total_flour_grams=500)
    assert compute_total_dough_weight(r) == 0


def test_rescale_to_dough_weight(basic):
    scaled = rescale_to_dough_weight(basic, 835)
    assert scaled.total_flour_grams == pytest.approx(500.0)
    water = scaled.ingredients[1]
    assert compute_ingredient_grams(scaled, water) == pytest.approx(375.0)
    assert compute_total_dough_weight(scaled) == pytest.approx(835.0)
    assert scaled.ingredients == basic.ingredients
    assert basic.total_flour_grams == 1000


def test_rescale_twice_is_stable(basic):
    once = rescale_to_dough_weight(basic, 1234.5)
    twice = rescale_to_dough_weight(once, 1234.5)
    assert twice.total_flour_grams == pytest.approx(once.total_flour_grams)


def test_rescale_clamps_negative_target(basic):
    assert rescale_to_dough_weight(basic, -50).total_flour_grams == 0


def test_rescale_zero_percentages_is_noop():
    r = Recipe(
        id="user-3", name="Zero", description="", total_flour_grams=700,
        ingredients=(Ingredient("Water", 0),),
    )
    assert rescale_to_dough_weight(r, 2000) is r


def test_set_ingredient_percentage(basic):
    edited = set_ingredient_percentage(basic, 1, 80)
    assert edited.ingredients[1].percentage == 80
    assert basic.ingredients[1].percentage == 75
    assert edited != basic


def test_set_ingredient_percentage_clamps(basic):
    assert set_ingredient_percentage(basic, 2, -3).ingredients[2].percentage == 0


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_index_out_of_range(basic, index):
    with pytest.raises(IndexOutOfRange):
        set_ingredient_percentage(basic, index, 10)
    with pytest.raises(IndexOutOfRange):
        remove_ingredient(basic, index)


def test_standard_recipe_mutations_are_noops(standard):
    assert set_ingredient_percentage(standard, 0, 50) is standard
    assert set_ingredient_name(standard, 0, "Other Flour") is standard
    assert add_ingredient(standard, "Milk") is standard
    assert remove_ingredient(standard, 0) is standard
    assert update_details(standard, name="Mine") is standard
    assert not is_editable(standard)


def test_add_and_remove_ingredient(basic):
    added = add_ingredient(basic, "Sourdough Levain")
    assert added.ingredients[-1] == Ingredient("Sourdough Levain", 0)
    assert len(added.ingredients) == 4
    removed = remove_ingredient(added, 0)
    assert [i.name for i in removed.ingredients] == ["Water", "Salt", "Sourdough Levain"]


def test_add_unknown_ingredient_rejected(basic):
    with pytest.raises(UnknownIngredientError):
        add_ingredient(basic, "Cheese")


def test_set_ingredient_name_keeps_percentage(basic):
    edited = set_ingredient_name(basic, 0, "Whole Wheat Flour")
    assert edited.ingredients[0] == Ingredient("Whole Wheat Flour", 90)


def test_update_details(basic):
    edited = update_details(basic, name="Renamed", description="Nice")
    assert (edited.name, edited.description) == ("Renamed", "Nice")
    assert update_details(basic) is basic


def test_duplicate_standard_is_editable(standard):
    copy = duplicate_recipe(standard, "user-9")
    assert copy.id == "user-9"
    assert copy.name == "Basic (copy)"
    assert is_editable(copy)
    assert copy.ingredients == standard.ingredients


def test_summary_values():
    rye = STANDARD_RECIPES[1]
    assert flour_percentage(rye) == pytest.approx(100)
    assert hydration(rye) == pytest.approx(80)
    assert flour_types(rye) == ["White", "Other"]


def test_baked_ingredient_grams_reduces_water(basic):
    baked = dict(baked_ingredient_grams(basic))
    assert baked["Water"] == pytest.approx(600.0)
    assert baked["White Flour"] == pytest.approx(900.0)


def test_validate_parsed_recipe():
    draft = validate_parsed_recipe({
        "name": "Country Loaf",
        "description": "Open crumb.",
        "totalFlourGrams": 1000,
        "ingredients": [
            {"name": "White Flour", "percentage": 80},
            {"name": "Whole Wheat Flour", "percentage": 20},
            {"name": "Water", "percentage": 72},
        ],
    })
    recipe = recipe_from_draft(draft, "user-5")
    assert flour_percentage(recipe) == pytest.approx(100)
    assert recipe.total_flour_grams == 1000
    assert is_editable(recipe)


def test_validate_parsed_recipe_empty_name():
    with pytest.raises(ValidationError):
        validate_parsed_recipe({"name": "", "totalFlourGrams": 1000, "ingredients": []})


@pytest.mark.parametrize("data", [
    [],
    {"name": "X", "totalFlourGrams": 0, "ingredients": []},
    {"name": "X", "totalFlourGrams": "1000", "ingredients": []},
    {"name": "X", "totalFlourGrams": 1000, "ingredients": {}},
    {"name": "X", "totalFlourGrams": 1000, "ingredients": [{"name": "Water", "percentage": -1}]},
    {"name": "X", "totalFlourGrams": 1000, "ingredients": [{"name": "Rye", "percentage": 50}]},
    {"name": "X", "totalFlourGrams": 1000, "ingredients": [{"percentage": 50}]},
    {"name": "X", "totalFlourGrams": 10 ** 400, "ingredients": []},
    {"name": "X", "totalFlourGrams": 1000, "ingredients": [{"name": "Water", "percentage": 10 ** 400}]},
])
def test_validate_parsed_recipe_rejects(data):
    with pytest.raises(ParseError):
        validate_parsed_recipe(data)


def test_validate_nutrition():
    info = validate_nutrition({
        "calories": 250, "proteinGrams": 8.5, "fatGrams": 1.2,
        "carbohydrateGrams": 50, "fiberGrams": 2.5,
    })
    assert info.calories == 250
    assert info.fiber_grams == 2.5
    with pytest.raises(ValidationError):
        validate_nutrition({"calories": 250})


def test_validate_nutrition_from_json_text():
    info = validate_nutrition(
        '{"calories": 250, "proteinGrams": 8, "fatGrams": 1, "carbohydrateGrams": 50, "fiberGrams": 2}'
    )
    assert info.protein_grams == 8
    with pytest.raises(ValidationError):
        validate_nutrition('{"calories": 250, "proteinGrams": 8, "fatGrams": 1, '
                           '"carbohydrateGrams": 50, "fiberGrams": true}')
