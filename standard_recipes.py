"""Built-in, read-only recipes shipped with the app."""

from models import Ingredient, Recipe

STANDARD_RECIPES = (
    Recipe(
        id="std-1",
        name="Artisanal Sourdough",
        description="A classic, open-crumb sourdough with a crispy crust. Perfect for toast or sandwiches.",
        total_flour_grams=1000,
        is_standard=True,
        ingredients=(
            Ingredient("White Flour", 90),
            Ingredient("Whole Wheat Flour", 10),
            Ingredient("Water", 75),
            Ingredient("Sourdough Levain", 20),
            Ingredient("Salt", 2.2),
        ),
    ),
    Recipe(
        id="std-2",
        name="Hearty Rye Bread",
        description="A dense and flavorful rye bread with a tight crumb, great for savory toppings.",
        total_flour_grams=1000,
        is_standard=True,
        ingredients=(
            Ingredient("White Flour", 50),
            Ingredient("Other Flour", 50),  # rye
            Ingredient("Water", 80),
            Ingredient("Sourdough Levain", 30),
            Ingredient("Salt", 2),
            Ingredient("Sugar / Honey / Malt", 3),
        ),
    ),
    Recipe(
        id="std-3",
        name="Soft Sandwich Sourdough",
        description="A softer sourdough loaf enriched with milk and butter, ideal for sandwiches.",
        total_flour_grams=900,
        is_standard=True,
        ingredients=(
            Ingredient("White Flour", 100),
            Ingredient("Milk", 65),
            Ingredient("Sourdough Levain", 25),
            Ingredient("Salt", 2),
            Ingredient("Sugar / Honey / Malt", 5),
            Ingredient("Butter or Oil", 8),
        ),
    ),
    Recipe(
        id="std-4",
        name="Sourdough Pizza Base",
        description="A tangy and chewy pizza crust with great flavor development from sourdough.",
        total_flour_grams=500,
        is_standard=True,
        ingredients=(
            Ingredient("White Flour", 100),
            Ingredient("Water", 68),
            Ingredient("Sourdough Levain", 15),
            Ingredient("Salt", 2.5),
            Ingredient("Butter or Oil", 3),  # olive oil
        ),
    ),
)
