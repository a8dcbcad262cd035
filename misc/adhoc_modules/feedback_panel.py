from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable

import discord

from misc.discord_channels import get_channel
from misc.discord_logger import AuditLogger
from storage.activity import ActivityStore
from storage.activity import utc_iso
from storage.analytics import AnalyticsStore
from storage.channels import ChannelConfigStore
from storage.feedback import FeedbackStore

FEEDBACK_BUTTON_ID = "feedback_button"
NO_RESPONSE = "No response"

RATING_COLORS = {1: 0xEF4444, 2: 0xF97316, 3: 0xEAB308, 4: 0x84CC16, 5: 0x22C55E}


def parse_rating(raw: Any) -> int | None:
    try:
        value = int(str(raw or "").strip())
    except ValueError:
        return None
    if value < 1 or value > 5:
        return None
    return value


def rating_stars(rating: int) -> str:
    return "⭐" * rating + "☆" * (5 - rating)


def build_feedback_embed(entry: dict[str, Any]) -> discord.Embed:
    rating = int(entry["rating"])
    embed = discord.Embed(
        title="📝 New Game Feedback",
        color=RATING_COLORS.get(rating, 0x6366F1),
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(name="👤 User", value=str(entry["username"]), inline=True)
    embed.add_field(name="⭐ Rating", value=f"{rating_stars(rating)} ({rating}/5)", inline=True)
    embed.add_field(name="💚 Liked", value=str(entry["liked"])[:1024], inline=False)
    embed.add_field(name="💡 Suggestions", value=str(entry["improve"])[:1024], inline=False)
    embed.add_field(name="💬 Comments", value=str(entry["comments"])[:1024], inline=False)
    embed.set_footer(text=f"User ID: {entry['userId']}")
    return embed


class FeedbackRecorder:
    """Validates a feedback submission, stores it and fans it out to stats, the feedback channel and the audit log."""

    def __init__(
        self,
        *,
        bot,
        feedback_store: FeedbackStore,
        activity_store: ActivityStore,
        analytics_store: AnalyticsStore,
        channel_store: ChannelConfigStore,
        audit: AuditLogger | None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.bot = bot
        self.feedback_store = feedback_store
        self.activity_store = activity_store
        self.analytics_store = analytics_store
        self.channel_store = channel_store
        self.audit = audit
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def _forward(self, entry: dict[str, Any]) -> None:
        channel_id = await asyncio.to_thread(self.channel_store.get_channel, "feedback")
        channel = await get_channel(self.bot, channel_id)
        if channel is None:
            return
        try:
            await channel.send(embed=build_feedback_embed(entry))
        except Exception as e:
            print(f"[Feedback] forward failed: {e}")

    async def submit(
        self,
        *,
        user_id: int,
        username: str,
        rating_raw: Any,
        liked: str = "",
        improve: str = "",
        comments: str = "",
    ) -> tuple[bool, str]:
        rating = parse_rating(rating_raw)
        if rating is None:
            return False, "❌ Invalid rating. Please enter a number from 1 to 5."

        entry = {
            "userId": str(user_id),
            "username": username,
            "rating": rating,
            "liked": (liked or "").strip() or NO_RESPONSE,
            "improve": (improve or "").strip() or NO_RESPONSE,
            "comments": (comments or "").strip() or NO_RESPONSE,
            "timestamp": utc_iso(self.clock()),
        }
        saved = await asyncio.to_thread(self.feedback_store.add, entry)
        if not saved:
            return False, "❌ Could not save your feedback right now. Please try again later."

        await asyncio.to_thread(self.activity_store.record_feedback)
        await asyncio.to_thread(self.analytics_store.track, "feedbacksReceived")
        if self.audit is not None:
            await self.audit.log_feedback_received(username, rating)
        await self._forward(entry)
        print(f"[Feedback] {username} rated {rating}/5")
        return True, (
            "✅ **Thank you for your feedback!**\n\n"
            f"Your rating: {rating_stars(rating)}\n"
            "We appreciate your help in improving Peaxel!"
        )


def build_feedback_modal(recorder: FeedbackRecorder) -> discord.ui.Modal:
    class FeedbackModal(discord.ui.Modal, title="💬 Game Feedback"):
        rating = discord.ui.TextInput(
            label="Rate this week's game (1-5)",
            placeholder="Enter a number from 1 to 5",
            style=discord.TextStyle.short,
            required=True,
            min_length=1,
            max_length=1,
        )
        liked = discord.ui.TextInput(
            label="What did you enjoy?",
            placeholder="Tell us what worked well...",
            style=discord.TextStyle.paragraph,
            required=False,
            max_length=500,
        )
        improve = discord.ui.TextInput(
            label="What could be improved?",
            placeholder="Share your suggestions...",
            style=discord.TextStyle.paragraph,
            required=False,
            max_length=500,
        )
        comments = discord.ui.TextInput(
            label="Any other comments?",
            placeholder="Anything else you'd like to share...",
            style=discord.TextStyle.paragraph,
            required=False,
            max_length=500,
        )

        async def on_submit(self, interaction: discord.Interaction):
            ok, msg = await recorder.submit(
                user_id=int(interaction.user.id),
                username=str(interaction.user),
                rating_raw=self.rating.value,
                liked=self.liked.value,
                improve=self.improve.value,
                comments=self.comments.value,
            )
            await interaction.response.send_message(msg, ephemeral=True)

    return FeedbackModal()


def build_feedback_panel(recorder: FeedbackRecorder) -> discord.ui.View:
    class FeedbackPanel(discord.ui.View):
        def __init__(self):
            super().__init__(timeout=None)

        @discord.ui.button(
            label="💬 Give Feedback",
            style=discord.ButtonStyle.primary,
            custom_id=FEEDBACK_BUTTON_ID,
        )
        async def feedback_button(self, interaction: discord.Interaction, button: discord.ui.Button):
            await interaction.response.send_modal(build_feedback_modal(recorder))

    return FeedbackPanel()
