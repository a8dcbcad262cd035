from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import discord

from misc.week_clock import display_week_number
from misc.week_clock import now_in_zone


def presence_text(weekday: int, hour: int, week_number: int, override: str | None = None) -> str:
    """
    Short status line for the bot's "watching" activity.

    weekday uses datetime.weekday() numbering (0=Monday). A non-empty
    override is returned unchanged.
    """
    if override and override.strip():
        return override.strip()

    base = f"Gameweek : {week_number}"
    if weekday == 0:
        return f"{base} | LIVE 🟢"
    if weekday == 1 and hour >= 19:
        return f"{base} | Quiz Time 🎲"
    if weekday == 2 and hour >= 16:
        return f"{base} | Spotlight 🌟"
    if weekday == 3:
        if hour < 19:
            return f"{base} | Closing Soon ⏳"
        return f"{base} | Locked 🚫"
    return base


class PresenceUpdater:
    def __init__(self, bot, *, timezone_name: str, clock: Callable[[], datetime] | None = None) -> None:
        self.bot = bot
        self.timezone_name = timezone_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def current_text(self, override: str | None = None) -> str:
        local = now_in_zone(self.timezone_name, self.clock())
        return presence_text(local.weekday(), local.hour, display_week_number(local), override)

    async def refresh(self, override: str | None = None) -> str | None:
        if getattr(self.bot, "user", None) is None:
            return None
        text = self.current_text(override)
        try:
            await self.bot.change_presence(activity=discord.Activity(type=discord.ActivityType.watching, name=text))
        except Exception as e:
            print(f"[Presence] update failed: {e}")
            return None
        print(f"[Presence] status updated to: {text}")
        return text
