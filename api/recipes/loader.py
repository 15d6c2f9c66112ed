"""
One-time bulk load of the recipe JSON document.

The document is a single JSON object whose member keys are ignored and whose
values are recipe objects. Each member is converted on its own: a bad member
is skipped and counted, it never aborts the batch. Only failing to read or
parse the document as a whole is an error.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.settings import Settings

from .records import Recipe, recipe_from_json
from .repository import RecipeStore

logger = logging.getLogger(__name__)

BUNDLED_DATA_FILE = Path(__file__).resolve().parent / "data" / "US_recipes.json"

PROGRESS_EVERY = 1000


class DocumentError(RuntimeError):
    pass


@dataclass(frozen=True)
class LoadResult:
    # disabled | already_loaded | source_missing | empty | loaded
    status: str
    loaded: int = 0
    skipped: int = 0


def data_file_path(settings: Settings) -> Path:
    return settings.data_file or BUNDLED_DATA_FILE


def read_document(path: Path) -> dict[str, Any]:
    """
    Parse the source file. NaN/Infinity literals are accepted by `json`.
    """
    try:
        with path.open("rb") as fh:
            root = json.load(fh)
    except (OSError, ValueError) as e:
        raise DocumentError(f"Could not read recipe document {path}: {e}") from e

    if not isinstance(root, dict):
        raise DocumentError(
            f"Recipe document {path} must contain a JSON object, got {type(root).__name__}."
        )
    return root


def build_recipes(root: dict[str, Any]) -> tuple[list[Recipe], int]:
    """
    Returns (recipes, skipped_count).
    """
    recipes: list[Recipe] = []
    skipped = 0

    for index, node in enumerate(root.values()):
        try:
            recipes.append(recipe_from_json(node))
        except Exception as e:
            skipped += 1
            logger.warning("recipe_skipped index=%s error=%s", index, e)
            continue

        if len(recipes) % PROGRESS_EVERY == 0:
            logger.debug("recipes_processed count=%s", len(recipes))

    return recipes, skipped


class RecipeLoader:
    """
    Loads the document into an empty store.

    The emptiness check and the insert run under one lock so two concurrent
    triggers in this process cannot both insert a batch.
    """

    def __init__(self, store: RecipeStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings
        self._lock = asyncio.Lock()

    async def load_if_needed(self) -> LoadResult:
        if not self.settings.load_data:
            logger.info("recipe_load_disabled")
            return LoadResult(status="disabled")

        async with self._lock:
            existing = await self.store.count()
            if existing > 0:
                logger.info("recipe_load_skipped reason=already_loaded count=%s", existing)
                return LoadResult(status="already_loaded")

            path = data_file_path(self.settings)
            if not path.is_file():
                logger.warning("recipe_source_missing path=%s", path)
                return LoadResult(status="source_missing")

            logger.info("recipe_load_started path=%s", path)
            # Parsing a large document is CPU-bound; keep it off the event loop.
            root = await asyncio.to_thread(read_document, path)
            recipes, skipped = await asyncio.to_thread(build_recipes, root)
            logger.info("recipe_parse_complete valid=%s skipped=%s", len(recipes), skipped)

            if not recipes:
                logger.warning("recipe_load_empty skipped=%s", skipped)
                return LoadResult(status="empty", skipped=skipped)

            loaded = await self.store.insert_many(recipes)
            logger.info("recipe_load_complete loaded=%s skipped=%s", loaded, skipped)
            return LoadResult(status="loaded", loaded=loaded, skipped=skipped)


async def load_on_startup(loader: RecipeLoader) -> LoadResult | None:
    """
    Lifespan entrypoint.

    This must never raise: the API keeps serving (with zero recipes) when the
    initial load fails.
    """
    try:
        return await loader.load_if_needed()
    except Exception:
        logger.exception("recipe_startup_load_failed")
        logger.info("recipe_startup_continuing_without_data")
        return None
