from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import discord

from announce.presence import PresenceUpdater
from config.defaults import BRAND_COLOR
from config.defaults import PLAY_URL
from misc.discord_channels import get_channel
from misc.discord_logger import AuditLogger
from spotlight.store import AthleteRecord
from spotlight.store import SpotlightPool
from storage.activity import ActivityStore
from storage.channels import ChannelConfigStore

SPACER = "\u200b"


def _or_na(value: str, fallback: str = "N/A") -> str:
    return (value or "").strip()[:1024] or fallback


def build_spotlight_embed(athlete: AthleteRecord, *, general_channel_id: str | None = None) -> discord.Embed:
    name = athlete.display_name
    embed = discord.Embed(
        title=f"🌟 SPOTLIGHT OF THE WEEK: {name}",
        url=athlete.profile_url or PLAY_URL,
        description="Discover this week's featured talent from the Peaxel ecosystem!",
        color=BRAND_COLOR,
        timestamp=datetime.now(timezone.utc),
    )
    if athlete.profile_image_url:
        embed.set_thumbnail(url=athlete.profile_image_url)
    if athlete.card_image_url:
        embed.set_image(url=athlete.card_image_url)

    embed.add_field(name="🌍 Nationality", value=_or_na(athlete.nationality), inline=True)
    embed.add_field(name="🗂️ Category", value=_or_na(athlete.category), inline=True)
    embed.add_field(name="🏆 Sport", value=_or_na(athlete.sport), inline=True)
    embed.add_field(name="📝 Description", value=_or_na(athlete.description, "No description available."), inline=False)

    if athlete.birthdate or athlete.location:
        embed.add_field(name="🎂 Birthdate", value=_or_na(athlete.birthdate), inline=True)
        embed.add_field(name="📍 Location & Club", value=_or_na(athlete.location), inline=True)
    if athlete.goal:
        embed.add_field(name="🎯 Personal Goal", value=_or_na(athlete.goal), inline=False)
    if athlete.achievements:
        embed.add_field(name="⭐ Achievements", value="\n".join(f"• {a}" for a in athlete.achievements)[:1024], inline=False)

    if general_channel_id:
        embed.add_field(name=SPACER, value=SPACER, inline=False)
        embed.add_field(
            name="📣 COACH ACE CHALLENGE",
            value=(
                f"Is **{name}** part of your strategy? 🔥\n"
                f"Drop a screenshot in <#{general_channel_id}> if you have this athlete! 🏟️"
            ),
            inline=False,
        )
    embed.set_footer(text="Peaxel • Athlete Spotlight Series")
    return embed


def build_spotlight_view(athlete: AthleteRecord) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(label="View Profile 🃏", style=discord.ButtonStyle.link, url=athlete.profile_url or PLAY_URL))
    view.add_item(discord.ui.Button(label="Play on Peaxel 🎮", style=discord.ButtonStyle.link, url=PLAY_URL))
    if athlete.instagram_url:
        view.add_item(discord.ui.Button(label="Instagram", style=discord.ButtonStyle.link, url=athlete.instagram_url))
    return view


class SpotlightService:
    def __init__(
        self,
        *,
        bot,
        pool: SpotlightPool,
        channel_store: ChannelConfigStore,
        activity_store: ActivityStore,
        presence: PresenceUpdater | None,
        audit: AuditLogger | None,
        general_channel_id: str | None,
    ) -> None:
        self.bot = bot
        self.pool = pool
        self.channel_store = channel_store
        self.activity_store = activity_store
        self.presence = presence
        self.audit = audit
        self.general_channel_id = (general_channel_id or "").strip() or None

    async def post_weekly_spotlight(self) -> bool:
        """Draws from the non-repeating pool and posts the profile. Pool exhaustion is a logged no-op."""
        channel_id = await asyncio.to_thread(self.channel_store.resolve_channel, "spotlight")
        channel = await get_channel(self.bot, channel_id)
        if channel is None:
            print(f"[Spotlight] spotlight channel not reachable: {channel_id}")
            return False

        athlete = await asyncio.to_thread(self.pool.draw_unposted)
        if athlete is None:
            print("[Spotlight] no unposted athlete left; skipping this week's spotlight")
            return False

        try:
            await channel.send(
                content="✨ **New Athlete Spotlight is live!**",
                embed=build_spotlight_embed(athlete, general_channel_id=self.general_channel_id),
                view=build_spotlight_view(athlete),
            )
        except Exception as e:
            print(f"[Spotlight] send failed for {athlete.name}: {e}")
            await asyncio.to_thread(self.activity_store.record_error, f"spotlight send: {e}")
            if self.audit is not None:
                await self.audit.log_error("spotlight", e)
            return False

        print(f"[Spotlight] posted {athlete.name} to #{getattr(channel, 'name', channel_id)}")
        if self.presence is not None:
            await self.presence.refresh()
        return True

    async def post_preview(self, channel) -> tuple[bool, str]:
        athlete = await asyncio.to_thread(self.pool.preview_sample)
        if athlete is None:
            return False, "No athlete found in the catalog."
        try:
            await channel.send(
                content="👀 **Spotlight preview** (not counted as posted)",
                embed=build_spotlight_embed(athlete, general_channel_id=self.general_channel_id),
                view=build_spotlight_view(athlete),
            )
        except Exception as e:
            return False, f"Preview failed: {e}"
        remaining = await asyncio.to_thread(self.pool.unposted_count)
        return True, f"Previewed {athlete.name}. {remaining} athlete(s) left in the spotlight pool."
