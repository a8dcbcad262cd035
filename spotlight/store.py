from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

import yaml

from storage.json_files import JsonFileStore


class RandomSource(Protocol):
    def choice(self, seq: Sequence[Any]) -> Any: ...


@dataclass(frozen=True, slots=True)
class AthleteRecord:
    name: str
    nationality: str = ""
    sport: str = ""
    category: str = ""
    description: str = ""
    profile_image_url: str = ""
    card_image_url: str = ""
    profile_url: str = ""
    instagram_url: str = ""
    birthdate: str = ""
    city: str = ""
    club: str = ""
    goal: str = ""
    achievements: tuple[str, ...] = field(default_factory=tuple)

    @property
    def location(self) -> str:
        return f"{self.city} {self.club}".strip()

    @property
    def display_name(self) -> str:
        return self.name.upper()


def _pick(raw: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def athlete_from_mapping(raw: dict[str, Any]) -> AthleteRecord | None:
    """Builds a record from either the short catalog keys or the long export keys."""
    name = _pick(raw, "name")
    if not name:
        return None
    achievements = raw.get("achievements")
    if isinstance(achievements, list):
        prizes = tuple(str(a).strip() for a in achievements if str(a).strip())
    else:
        prizes = tuple(p for p in (_pick(raw, f"prize{i}") for i in range(1, 6)) if p)
    return AthleteRecord(
        name=name,
        nationality=_pick(raw, "nationality", "main_nationality"),
        sport=_pick(raw, "sport", "occupation"),
        category=_pick(raw, "category", "main_category"),
        description=_pick(raw, "description"),
        profile_image_url=_pick(raw, "talent_profile_image_url", "image"),
        card_image_url=_pick(raw, "talent_card_image_url", "image"),
        profile_url=_pick(raw, "peaxelLink", "profile_url"),
        instagram_url=_pick(raw, "instagram_talent", "instagram"),
        birthdate=_pick(raw, "birthdate"),
        city=_pick(raw, "city"),
        club=_pick(raw, "club"),
        goal=_pick(raw, "goal"),
        achievements=prizes,
    )


def load_catalog(path: str | Path) -> list[AthleteRecord]:
    p = Path(path)
    if not p.exists():
        print(f"[Spotlight] catalog not found at {p}")
        return []
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as e:
        print(f"[Spotlight] failed to parse catalog {p}: {e}")
        return []

    if isinstance(raw, dict):
        raw = raw.get("athletes")
    if not isinstance(raw, list):
        print(f"[Spotlight] catalog {p} is not a list of athletes")
        return []

    out: list[AthleteRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        record = athlete_from_mapping(item)
        if record is not None:
            out.append(record)
    return out


class SpotlightPool:
    """
    Catalog plus the append-only list of names already spotlighted.

    Identity is the display name. Duplicate names in the catalog are not
    detected and are treated as one athlete once drawn.
    """

    def __init__(self, catalog_path: str | Path, state_path: str | Path, *, rng: RandomSource | None = None) -> None:
        self.catalog_path = Path(catalog_path)
        self.state: JsonFileStore[list[str]] = JsonFileStore(state_path, list, label="Spotlight")
        self.rng: RandomSource = rng or random.Random()

    def catalog(self) -> list[AthleteRecord]:
        return load_catalog(self.catalog_path)

    def posted_names(self) -> list[str]:
        raw = self.state.load()
        if not isinstance(raw, list):
            return []
        return [str(name) for name in raw]

    def draw_unposted(self) -> AthleteRecord | None:
        catalog = self.catalog()
        if not catalog:
            return None
        posted = self.posted_names()
        seen = set(posted)
        remaining = [a for a in catalog if a.name not in seen]
        if not remaining:
            print("[Spotlight] pool exhausted: every athlete has been spotlighted")
            return None

        selected = self.rng.choice(remaining)
        posted.append(selected.name)
        self.state.save(posted)
        print(f"[Spotlight] selected {selected.name} ({len(remaining) - 1} left)")
        return selected

    def preview_sample(self) -> AthleteRecord | None:
        catalog = self.catalog()
        if not catalog:
            return None
        return self.rng.choice(catalog)

    def unposted_count(self) -> int:
        catalog = self.catalog()
        seen = set(self.posted_names())
        return sum(1 for a in catalog if a.name not in seen)
