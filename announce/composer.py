from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import discord

from config.defaults import CLOSING_AT
from misc.adhoc_modules.feedback_panel import FEEDBACK_BUTTON_ID
from misc.discord_channels import get_channel
from misc.discord_logger import AuditLogger
from misc.discord_timestamps import countdown_block
from misc.discord_timestamps import same_or_next_weekday_time
from misc.week_clock import display_week_number
from misc.week_clock import now_in_zone
from storage.activity import ActivityStore
from storage.channels import ChannelConfigStore
from storage.message_config import MessageConfigStore
from storage.message_config import format_template
from storage.message_config import normalize_type
from storage.message_config import parse_color
from storage.reactions import ReactionsConfigStore


@dataclass(slots=True)
class ComposedAnnouncement:
    message_type: str
    week_number: int
    title: str
    description: str
    color: int
    footer: str
    image_path: Path | None
    buttons: list[tuple[str, str]]
    show_feedback: bool


def effective_week_number(message_type: str, local_now: datetime) -> int:
    # Only closing treats Sunday as the tail of the previous game week.
    return display_week_number(local_now, sunday_rolls_back=(message_type == "closing"))


def compose_announcement(
    message_type: str,
    *,
    config: dict[str, dict[str, Any]],
    local_now: datetime,
    timezone_name: str,
    assets_dir: str | Path,
) -> ComposedAnnouncement:
    kind = normalize_type(message_type)
    section = config[kind]
    week = effective_week_number(kind, local_now)

    description = format_template(str(section.get("description") or ""), week)
    if kind == "closing":
        weekday, hour, minute = CLOSING_AT
        deadline = same_or_next_weekday_time(weekday, hour, minute, timezone_name, now=local_now)
        description += countdown_block(deadline)

    image_name = str(section.get("imageName") or "").strip()
    image_path: Path | None = None
    if image_name:
        candidate = Path(assets_dir) / image_name
        if candidate.is_file():
            image_path = candidate
        else:
            print(f"[Composer] image not found: {candidate}")

    buttons: list[tuple[str, str]] = []
    if section.get("showPlayButton") and section.get("playUrl"):
        buttons.append((str(section.get("playButtonLabel") or "Play"), str(section["playUrl"])))
    if section.get("showLeaderboardButton") and section.get("leaderboardUrl"):
        buttons.append((str(section.get("leaderboardButtonLabel") or "Leaderboard"), str(section["leaderboardUrl"])))

    return ComposedAnnouncement(
        message_type=kind,
        week_number=week,
        title=format_template(str(section.get("title") or ""), week),
        description=description,
        color=parse_color(section.get("color")),
        footer=str(section.get("footerText") or ""),
        image_path=image_path,
        buttons=buttons,
        show_feedback=bool(config["opening"].get("showFeedbackButton") or section.get("showFeedbackButton")),
    )


def build_announcement_embed(composed: ComposedAnnouncement) -> discord.Embed:
    embed = discord.Embed(
        title=composed.title[:256],
        description=composed.description[:4096],
        color=composed.color,
        timestamp=datetime.now(timezone.utc),
    )
    if composed.footer:
        embed.set_footer(text=composed.footer)
    if composed.image_path is not None:
        embed.set_image(url=f"attachment://{composed.image_path.name}")
    return embed


def build_announcement_view(composed: ComposedAnnouncement) -> discord.ui.View | None:
    if not composed.buttons and not composed.show_feedback:
        return None
    view = discord.ui.View(timeout=None)
    for label, url in composed.buttons:
        view.add_item(discord.ui.Button(label=label, style=discord.ButtonStyle.link, url=url))
    if composed.show_feedback:
        view.add_item(
            discord.ui.Button(
                label="💬 Give Feedback",
                style=discord.ButtonStyle.primary,
                custom_id=FEEDBACK_BUTTON_ID,
            )
        )
    return view


class WeeklyComposer:
    def __init__(
        self,
        *,
        bot,
        channel_store: ChannelConfigStore,
        message_store: MessageConfigStore,
        reactions_store: ReactionsConfigStore,
        activity_store: ActivityStore,
        audit: AuditLogger | None,
        assets_dir: str | Path,
        timezone_name: str,
        announce_role_id: str | None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.bot = bot
        self.channel_store = channel_store
        self.message_store = message_store
        self.reactions_store = reactions_store
        self.activity_store = activity_store
        self.audit = audit
        self.assets_dir = Path(assets_dir)
        self.timezone_name = timezone_name
        self.announce_role_id = (announce_role_id or "").strip()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def _react_all(self, message, emojis: list[str]) -> int:
        added = 0
        for emoji in emojis:
            try:
                await message.add_reaction(emoji)
                added += 1
            except Exception as e:
                print(f"[Composer] reaction {emoji!r} failed: {e}")
        return added

    async def _record_failure(self, context: str, error: BaseException | str) -> None:
        print(f"[Composer] {context}: {error}")
        await asyncio.to_thread(self.activity_store.record_error, f"{context}: {error}")
        if self.audit is not None:
            await self.audit.log_error(context, error)

    async def send_weekly_message(self, message_type: str = "opening", *, is_manual: bool = False) -> bool:
        """
        Composes and posts the opening or closing announcement.

        Returns False on any failure (missing destination, send error);
        never raises to the caller.
        """
        kind = normalize_type(message_type)

        channel_id = await asyncio.to_thread(self.channel_store.resolve_channel, "announce")
        if not channel_id:
            print("[Composer] no announce channel configured; nothing sent")
            return False
        channel = await get_channel(self.bot, channel_id)
        if channel is None:
            print(f"[Composer] announce channel not reachable: {channel_id}")
            return False

        try:
            local_now = now_in_zone(self.timezone_name, self.clock())
            config = await asyncio.to_thread(self.message_store.load)
            composed = compose_announcement(
                kind,
                config=config,
                local_now=local_now,
                timezone_name=self.timezone_name,
                assets_dir=self.assets_dir,
            )
            emojis = await asyncio.to_thread(self.reactions_store.active_reactions)

            kwargs: dict[str, Any] = {"embed": build_announcement_embed(composed)}
            if self.announce_role_id:
                kwargs["content"] = f"<@&{self.announce_role_id}>"
            view = build_announcement_view(composed)
            if view is not None:
                kwargs["view"] = view
            if composed.image_path is not None:
                kwargs["file"] = discord.File(str(composed.image_path), filename=composed.image_path.name)

            sent = await channel.send(**kwargs)
        except Exception as e:
            await self._record_failure(f"weekly {kind} send", e)
            return False

        await self._react_all(sent, emojis)

        await asyncio.to_thread(
            self.activity_store.record_weekly_post,
            is_manual=is_manual,
            week_number=composed.week_number,
            message_type=kind,
        )
        channel_name = str(getattr(channel, "name", channel_id))
        if self.audit is not None:
            await self.audit.log_weekly_post(
                is_manual=is_manual,
                week_number=composed.week_number,
                channel_name=channel_name,
                message_type=kind,
            )
        print(f"[Composer] weekly {kind} sent to #{channel_name} (week={composed.week_number} manual={is_manual})")
        return True
