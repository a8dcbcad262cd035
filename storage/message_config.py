from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from config.defaults import ANNOUNCEMENT_TYPES
from config.defaults import LEADERBOARD_URL
from config.defaults import PLAY_URL
from storage.json_files import JsonFileStore

WEEK_PLACEHOLDER = "{WEEK_NUMBER}"
FALLBACK_COLOR = 0xA855F7

BOOL_FIELDS = {"showPlayButton", "showLeaderboardButton", "showFeedbackButton"}
STRING_FIELDS = {
    "title",
    "description",
    "imageName",
    "color",
    "footerText",
    "playUrl",
    "leaderboardUrl",
    "playButtonLabel",
    "leaderboardButtonLabel",
}

DEFAULT_MESSAGE_CONFIG: dict[str, dict[str, Any]] = {
    "opening": {
        "title": "🚀 ACE NOTIFICATION | LINEUP IS NOW OPEN FOR WEEK {WEEK_NUMBER}",
        "description": (
            "Hello Managers, Ace here! The gates are open and the scouting season for "
            "**Game Week {WEEK_NUMBER}** has officially begun. 🏟️\n\n"
            "It's time to step into your role as an **Athlete Manager** and build your winning squad! 🔥\n\n"
            "**Action Plan:**\n"
            "🔹 **Scout:** Look through your cards and pick your top-performing athletes.\n"
            "🔹 **Strategize:** Build a lineup to dominate the leaderboard.\n"
            "🔹 **Earn:** Compete for XP and exclusive rewards.\n\n"
            "*Good luck, Managers! Let's see those dream teams.* 🌶️"
        ),
        "imageName": "opening-banner.png",
        "color": "#6366F1",
        "footerText": "Peaxel • Weekly Game Challenge",
        "playUrl": PLAY_URL,
        "leaderboardUrl": LEADERBOARD_URL,
        "playButtonLabel": "🎮 Play Now",
        "leaderboardButtonLabel": "📊 Leaderboard",
        "showPlayButton": True,
        "showLeaderboardButton": True,
        "showFeedbackButton": True,
    },
    "closing": {
        "title": "⚠️ ACE FINAL WARNING | LINEUP CLOSING FOR WEEK {WEEK_NUMBER} ⏱️",
        "description": (
            "Hello Managers, this is a final call from **Ace**! The clock is ticking for "
            "**Game Week {WEEK_NUMBER}** and the locker room doors are about to close.\n\n"
            "🛠️ **Last-Minute Check:**\n"
            "1️⃣ Are your best **Rising Stars** in the starting positions?\n"
            "2️⃣ Have you optimized your team for maximum points?\n"
            "3️⃣ Did you remember to save your changes?\n\n"
            "Once the deadline hits, your team is set in stone. 🏆"
        ),
        "imageName": "closing-banner.png",
        "color": "#EF4444",
        "footerText": "Peaxel • Last Chance to Join",
        "playUrl": PLAY_URL,
        "leaderboardUrl": LEADERBOARD_URL,
        "playButtonLabel": "🎮 Play Now",
        "leaderboardButtonLabel": "📊 Leaderboard",
        "showPlayButton": True,
        "showLeaderboardButton": True,
        "showFeedbackButton": True,
    },
}


def default_message_config() -> dict[str, dict[str, Any]]:
    return {key: dict(value) for key, value in DEFAULT_MESSAGE_CONFIG.items()}


def normalize_type(message_type: str | None) -> str:
    t = (message_type or "").strip().lower()
    return t if t in ANNOUNCEMENT_TYPES else "opening"


def parse_color(hex_color: str | None) -> int:
    text = (hex_color or "").strip().lstrip("#")
    if not re.fullmatch(r"[0-9A-Fa-f]{6}", text):
        return FALLBACK_COLOR
    return int(text, 16)


def format_template(template: str, week_number: int) -> str:
    return (template or "").replace(WEEK_PLACEHOLDER, str(week_number))


class MessageConfigStore:
    def __init__(self, path: str | Path) -> None:
        self.store: JsonFileStore[dict[str, Any]] = JsonFileStore(path, default_message_config, label="Config")

    def load(self) -> dict[str, dict[str, Any]]:
        raw = self.store.load()
        merged = default_message_config()
        if not isinstance(raw, dict):
            return merged
        for key in ANNOUNCEMENT_TYPES:
            section = raw.get(key)
            if isinstance(section, dict):
                merged[key].update(section)
        return merged

    def save(self, config: dict[str, dict[str, Any]]) -> bool:
        return self.store.save(config)

    def get(self, message_type: str) -> dict[str, Any]:
        return self.load()[normalize_type(message_type)]

    def update(self, message_type: str, updates: dict[str, Any]) -> dict[str, Any]:
        key = normalize_type(message_type)
        current = self.load()
        current[key] = {**current[key], **updates}
        self.save(current)
        return current[key]

    def reset(self, message_type: str) -> dict[str, Any]:
        key = normalize_type(message_type)
        current = self.load()
        current[key] = dict(DEFAULT_MESSAGE_CONFIG[key])
        self.save(current)
        return current[key]

    def formatted_title(self, week_number: int, message_type: str = "opening") -> str:
        return format_template(self.get(message_type).get("title") or "", week_number)

    def formatted_description(self, week_number: int, message_type: str = "opening") -> str:
        return format_template(self.get(message_type).get("description") or "", week_number)

    def image_name(self, message_type: str) -> str:
        return str(self.get(message_type).get("imageName") or "")
