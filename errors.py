"""Error kinds surfaced by the bread calculator.

Every error carries a short message that is safe to show in the UI
(``str(exc)``) and an optional ``detail`` that only goes to the log.
"""

from typing import Optional


class BreadCalcError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ParseError(BreadCalcError):
    """The AI service could not turn text into a recipe."""


class ValidationError(ParseError):
    """AI output did not satisfy the recipe or nutrition schema."""


class NutritionError(BreadCalcError):
    """The AI service could not estimate nutrition."""


class IndexOutOfRange(BreadCalcError, IndexError):
    """Ingredient position outside the recipe's ingredient sequence."""


class UnknownIngredientError(BreadCalcError, ValueError):
    """Ingredient name is not part of the catalog."""


class PermissionDenied(BreadCalcError):
    """Mutation of a standard recipe, or a save without a signed-in user."""


class RecipeNotFound(BreadCalcError, KeyError):
    """Recipe id is not in the user's saved set."""

    def __str__(self) -> str:
        return self.message


class StorageError(BreadCalcError):
    """Saved recipes could not be read or written."""


class ConfigurationError(BreadCalcError):
    pass
