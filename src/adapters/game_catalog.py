"""JSON game catalog (data-driven).

Supported format:
- {"games": [GameRequirement, ...]} with the marketplace's camelCase keys.

The catalog feeds the compatibility scorer directly and the estimation
service through `GameRequirement.to_fps_profile()`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from core.domain.models import GameRequirement


class GameCatalog(BaseModel):
    games: list[GameRequirement] = Field(default_factory=list)

    def find(self, name: str) -> GameRequirement | None:
        wanted = name.strip().lower()
        for game in self.games:
            if game.name.lower() == wanted:
                return game
        return None

    def select(self, names: Iterable[str]) -> tuple[list[GameRequirement], list[str]]:
        """Resolve `names`; returns (found, missing). Empty `names` selects every game."""

        names = [n for n in names if n.strip()]
        if not names:
            return list(self.games), []
        found: list[GameRequirement] = []
        missing: list[str] = []
        for name in names:
            game = self.find(name)
            if game is None:
                missing.append(name)
            else:
                found.append(game)
        return found, missing


def load_game_catalog(path: Path) -> GameCatalog:
    raw = path.read_text(encoding="utf-8")
    data = json.loads(raw)
    return GameCatalog.model_validate(data)
