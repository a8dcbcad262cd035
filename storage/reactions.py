from __future__ import annotations

from pathlib import Path
from typing import Any

from storage.json_files import JsonFileStore

DEFAULT_REACTIONS = ["🎮", "🔥", "🙌"]


def default_reactions_config() -> dict[str, Any]:
    return {"enabled": True, "reactions": list(DEFAULT_REACTIONS)}


class ReactionsConfigStore:
    def __init__(self, path: str | Path) -> None:
        self.store: JsonFileStore[dict[str, Any]] = JsonFileStore(path, default_reactions_config, label="Reactions")

    def load(self) -> dict[str, Any]:
        raw = self.store.load()
        merged = default_reactions_config()
        if isinstance(raw, dict):
            merged.update(raw)
        merged["enabled"] = bool(merged.get("enabled"))
        reactions = merged.get("reactions")
        merged["reactions"] = [str(r) for r in reactions if str(r).strip()] if isinstance(reactions, list) else []
        return merged

    def update(self, **updates: Any) -> dict[str, Any]:
        current = self.load()
        current.update(updates)
        self.store.save(current)
        return current

    def reset(self) -> dict[str, Any]:
        current = default_reactions_config()
        self.store.save(current)
        return current

    def active_reactions(self) -> list[str]:
        config = self.load()
        if not config["enabled"]:
            return []
        return list(config["reactions"])
