"""Per-user recipe persistence in local JSON files."""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Iterable, Optional, Tuple

from errors import PermissionDenied, RecipeNotFound, StorageError
from models import Recipe
from standard_recipes import STANDARD_RECIPES

logger = logging.getLogger(__name__)


def _hash_key(key: str) -> str:
    """Return SHA-256 hex digest of the given key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def storage_key(user_id: str) -> str:
    """File stem for a user's recipes; stable and distinct per user id."""
    return f"userRecipes-{_hash_key(user_id)}"


def new_recipe_id() -> str:
    return f"user-{int(time.time() * 1000)}"


class RecipeStore:
    """Standard recipes plus each user's own recipes, one JSON file per user.

    Every mutation rewrites the user's whole set; the last write wins.
    """

    def __init__(self, data_dir: Path, standard: Iterable[Recipe] = STANDARD_RECIPES):
        self.data_dir = Path(data_dir)
        self.standard: Tuple[Recipe, ...] = tuple(standard)
        self._standard_ids = {r.id for r in self.standard}

    def _path(self, user_id: str) -> Path:
        return self.data_dir / f"{storage_key(user_id)}.json"

    def load_user_recipes(self, user_id: Optional[str]) -> Tuple[Recipe, ...]:
        if not user_id:
            return ()
        path = self._path(user_id)
        if not path.exists():
            return ()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise TypeError(f"expected a list of recipes, got {type(data).__name__}")
            return tuple(Recipe.from_dict(d) for d in data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.exception("Could not read saved recipes from %s", path)
            raise StorageError("Your saved recipes could not be loaded.", detail=str(e)) from e

    def _write(self, user_id: str, recipes: Iterable[Recipe]) -> None:
        path = self._path(user_id)
        records = [r.to_dict() for r in recipes]
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.exception("Could not write saved recipes to %s", path)
            raise StorageError("Your recipes could not be saved.", detail=str(e)) from e
        logger.info("Persisted %d recipe(s) for %s", len(records), storage_key(user_id))

    def list_recipes(self, user_id: Optional[str]) -> Tuple[Recipe, ...]:
        """Standard recipes first, then the user's own."""
        return self.standard + self.load_user_recipes(user_id)

    def save_recipe(self, user_id: Optional[str], recipe: Recipe) -> Tuple[Recipe, ...]:
        """Insert or replace ``recipe`` in the user's set and persist it."""
        if not user_id:
            raise PermissionDenied("Please sign in to save recipes.")
        if recipe.is_standard or recipe.id in self._standard_ids:
            raise PermissionDenied(
                "Standard recipes can't be changed.",
                detail=f"save rejected for standard recipe {recipe.id}",
            )
        current = self.load_user_recipes(user_id)
        if any(r.id == recipe.id for r in current):
            updated = tuple(recipe if r.id == recipe.id else r for r in current)
        else:
            updated = current + (recipe,)
        self._write(user_id, updated)
        return updated

    def delete_recipe(self, user_id: Optional[str], recipe_id: str) -> Tuple[Recipe, ...]:
        if not user_id:
            raise PermissionDenied("Please sign in to delete recipes.")
        if recipe_id in self._standard_ids:
            raise PermissionDenied(
                "Standard recipes can't be deleted.",
                detail=f"delete rejected for standard recipe {recipe_id}",
            )
        current = self.load_user_recipes(user_id)
        updated = tuple(r for r in current if r.id != recipe_id)
        if len(updated) == len(current):
            raise RecipeNotFound("That recipe was not found.", detail=f"no saved recipe with id {recipe_id}")
        self._write(user_id, updated)
        return updated
