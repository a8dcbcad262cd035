from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping

from config.defaults import CHANNEL_KINDS
from storage.json_files import JsonFileStore


def default_channel_config() -> dict[str, Any]:
    return {"channels": {kind: None for kind in CHANNEL_KINDS}}


class ChannelConfigStore:
    def __init__(self, path: str | Path, *, env_fallbacks: Mapping[str, str | None] | None = None) -> None:
        self.store: JsonFileStore[dict[str, Any]] = JsonFileStore(path, default_channel_config, label="Config")
        self.env_fallbacks = {k: v for k, v in (env_fallbacks or {}).items() if v}

    def load(self) -> dict[str, Any]:
        raw = self.store.load()
        merged = default_channel_config()
        if isinstance(raw, dict) and isinstance(raw.get("channels"), dict):
            merged["channels"].update(raw["channels"])
            for key, value in raw.items():
                if key != "channels":
                    merged[key] = copy.deepcopy(value)
        return merged

    def get_channel(self, kind: str) -> str | None:
        value = self.load()["channels"].get(kind)
        if value:
            return str(value)
        return None

    def resolve_channel(self, kind: str) -> str | None:
        """Stored value first, then the environment/default fallback for that kind."""
        return self.get_channel(kind) or self.env_fallbacks.get(kind)

    def set_channel(self, kind: str, channel_id: str | int | None) -> bool:
        if kind not in CHANNEL_KINDS:
            raise ValueError(f"Unknown channel kind: {kind}")
        config = self.load()
        config["channels"][kind] = str(channel_id) if channel_id else None
        return self.store.save(config)
