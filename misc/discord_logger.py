from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

import discord

from misc.discord_channels import get_channel
from storage.channels import ChannelConfigStore


@dataclass(frozen=True, slots=True)
class LogLevel:
    color: int
    emoji: str
    label: str


LOG_LEVELS = {
    "info": LogLevel(0x3B82F6, "ℹ️", "INFO"),
    "success": LogLevel(0x22C55E, "✅", "SUCCESS"),
    "warning": LogLevel(0xF59E0B, "⚠️", "WARNING"),
    "error": LogLevel(0xEF4444, "❌", "ERROR"),
    "activity": LogLevel(0x8B5CF6, "📊", "ACTIVITY"),
}


def build_log_embed(level: str, title: str, description: str, fields: Mapping[str, Any] | None = None) -> discord.Embed:
    style = LOG_LEVELS.get(level, LOG_LEVELS["info"])
    embed = discord.Embed(
        title=f"{style.emoji} {title}",
        description=description,
        color=style.color,
        timestamp=datetime.now(timezone.utc),
    )
    embed.set_footer(text=f"Peaxel • {style.label}")
    for name, value in (fields or {}).items():
        embed.add_field(name=str(name), value=str(value)[:1024] or "-", inline=True)
    return embed


class AuditLogger:
    """
    Mirrors notable events into the configured `logs` channel.

    Every entry is printed first; the channel copy is best effort and a
    missing or unreachable log channel only disables the mirror.
    """

    def __init__(self, bot, channel_store: ChannelConfigStore) -> None:
        self.bot = bot
        self.channel_store = channel_store

    async def _log_channel(self):
        channel_id = await asyncio.to_thread(self.channel_store.get_channel, "logs")
        if not channel_id:
            return None
        return await get_channel(self.bot, channel_id)

    async def log(self, level: str, title: str, description: str, fields: Mapping[str, Any] | None = None) -> bool:
        print(f"[Logger] [{level.upper()}] {title}: {description}")
        channel = await self._log_channel()
        if channel is None:
            return False
        try:
            await channel.send(embed=build_log_embed(level, title, description, fields))
            return True
        except Exception as e:
            print(f"[Logger] log channel send failed: {e}")
            return False

    async def announce_online(self) -> bool:
        channel = await self._log_channel()
        if channel is None:
            print("[Logger] no logs channel configured; channel logging disabled")
            return False
        return await self.log(
            "info",
            "System Online",
            "Ace has successfully started.",
            {"Servers": str(len(getattr(self.bot, "guilds", []) or []))},
        )

    async def log_weekly_post(self, *, is_manual: bool, week_number: int, channel_name: str, message_type: str) -> bool:
        return await self.log(
            "success",
            "Announcement Published",
            f"Weekly {message_type} message for **Week {week_number}** is live.",
            {
                "Method": "Manual (!weekly.send_now)" if is_manual else "Scheduled",
                "Channel": f"#{channel_name}",
            },
        )

    async def log_feedback_received(self, username: str, rating: int) -> bool:
        return await self.log(
            "activity",
            "New Feedback",
            f"User **{username}** submitted a rating.",
            {"Rating": f"{'⭐' * rating} ({rating}/5)"},
        )

    async def log_error(self, context: str, error: BaseException | str) -> bool:
        return await self.log(
            "error",
            f"Error: {context}",
            f"```{error}```",
            {"Location": context},
        )

    async def log_command_usage(self, command_name: str, username: str, guild_name: str | None) -> bool:
        return await self.log(
            "info",
            "Command Executed",
            f"User used **!{command_name}**",
            {"User": username, "Guild": guild_name or "DMs"},
        )

    async def log_config_change(self, setting: str, username: str) -> bool:
        return await self.log(
            "warning",
            "Config Modified",
            "A configuration setting was updated.",
            {"Target": setting, "Admin": username},
        )
