from __future__ import annotations

from pathlib import Path
from typing import Any

from storage.json_files import JsonFileStore


class FeedbackStore:
    def __init__(self, path: str | Path) -> None:
        self.store: JsonFileStore[list[dict[str, Any]]] = JsonFileStore(path, list, label="Feedback")

    def load(self) -> list[dict[str, Any]]:
        raw = self.store.load()
        if not isinstance(raw, list):
            return []
        return [entry for entry in raw if isinstance(entry, dict)]

    def add(self, entry: dict[str, Any]) -> bool:
        entries = self.load()
        entries.append(dict(entry))
        return self.store.save(entries)

    def stats(self) -> tuple[int, str]:
        """(total, average rating formatted to one decimal)."""
        ratings: list[int] = []
        for entry in self.load():
            try:
                ratings.append(int(entry.get("rating")))
            except (TypeError, ValueError):
                continue
        if not ratings:
            return (0, "0")
        return (len(ratings), f"{sum(ratings) / len(ratings):.1f}")
