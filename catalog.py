from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Protocol

from loguru import logger


class ContentSource(Protocol):
    def get_text(self, content_id: str) -> str | None:
        ...


class JsonCatalog:
    """Flat-file catalog of untranslated text.

    Accepts either ``{"<id>": "<text>"}`` or the listing layout
    ``[{"id": 1, "games": [{"id": 7, "detail": "..."}]}]``; in the latter,
    content ids are ``"<categoryId>:<gameId>"``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._texts: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning(f"Catalog {self.path} unavailable, serving nothing: {exc}")
            return {}

        if isinstance(data, dict):
            return {str(key): value for key, value in data.items() if isinstance(value, str)}
        if isinstance(data, list):
            return _flatten_categories(data)
        logger.warning(f"Catalog {self.path} has unexpected top-level type {type(data).__name__}")
        return {}

    def get_text(self, content_id: str) -> str | None:
        return self._texts.get(content_id)

    def __len__(self) -> int:
        return len(self._texts)


def _flatten_categories(categories: list[Any]) -> Dict[str, str]:
    texts: Dict[str, str] = {}
    for category in categories:
        if not isinstance(category, dict):
            continue
        for game in category.get("games") or []:
            if isinstance(game, dict) and isinstance(game.get("detail"), str):
                texts[f"{category.get('id')}:{game.get('id')}"] = game["detail"]
    return texts
