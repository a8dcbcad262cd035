from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

import discord

from announce.presence import PresenceUpdater
from config.defaults import BRAND_COLOR
from config.defaults import QUIZ_WINDOW_SECONDS
from config.defaults import WIN_COLOR
from misc.discord_channels import get_channel
from misc.discord_channels import parse_channel_id
from misc.discord_logger import AuditLogger
from spotlight.store import AthleteRecord
from spotlight.store import SpotlightPool
from storage.activity import ActivityStore
from storage.channels import ChannelConfigStore

QUIZ_LISTENING = "listening"
QUIZ_MATCHED = "matched"
QUIZ_TIMED_OUT = "timed_out"

QUIZ_PRESENCE = "Quiz Time 🎲"


def normalize_guess(text: str | None) -> str:
    return (text or "").strip().casefold()


@dataclass(slots=True)
class QuizRound:
    """
    One-shot answer window: listening, then matched or timed_out.

    The first non-bot message in the watched channel whose trimmed text
    equals the answer (ignoring case) closes the round.
    """

    answer: str
    channel_id: int
    window_seconds: float = QUIZ_WINDOW_SECONDS
    state: str = QUIZ_LISTENING
    winner: Any = None

    def matches(self, message) -> bool:
        if self.state != QUIZ_LISTENING:
            return False
        author = getattr(message, "author", None)
        if author is None or getattr(author, "bot", False):
            return False
        channel = getattr(message, "channel", None)
        if getattr(channel, "id", None) != self.channel_id:
            return False
        return normalize_guess(getattr(message, "content", "")) == normalize_guess(self.answer)

    async def listen(self, wait_for: Callable[..., Awaitable[Any]]) -> Any | None:
        if self.state != QUIZ_LISTENING:
            return self.winner
        try:
            message = await wait_for("message", check=self.matches, timeout=self.window_seconds)
        except asyncio.TimeoutError:
            self.state = QUIZ_TIMED_OUT
            return None
        self.state = QUIZ_MATCHED
        self.winner = message
        return message


def build_quiz_embed(athlete: AthleteRecord, *, general_channel_id: str) -> discord.Embed:
    hint = athlete.name[:1].upper()
    embed = discord.Embed(
        title="🎲 SCOUT QUIZ: Guess the Athlete!",
        description=(
            "Find the **IN-GAME PSEUDO** of this athlete to win a reward!\n\n"
            "👉 **HOW TO PLAY:**\n"
            f"Go to <#{general_channel_id}> and type the **EXACT** pseudo."
        ),
        color=BRAND_COLOR,
    )
    embed.add_field(name="📍 Nationality", value=athlete.nationality or "Unknown", inline=True)
    embed.add_field(name="🏆 Sport", value=athlete.sport or "Unknown", inline=True)
    embed.add_field(name="🗂️ Category", value=athlete.category or "Unknown", inline=True)
    embed.add_field(name="💡 Hint", value=f"The pseudo starts with **{hint}**", inline=False)
    embed.set_footer(text="Note: You must provide the exact in-game pseudo.")
    return embed


def build_winner_embed(athlete: AthleteRecord, *, winner_id: int, ticket_channel_id: str | None) -> discord.Embed:
    description = f"Congratulations <@{winner_id}>! You found the correct athlete: **{athlete.display_name}**."
    if ticket_channel_id:
        description += f"\n\n📩 To claim your reward, please open a ticket here: <#{ticket_channel_id}>"
    embed = discord.Embed(
        title="🏆 WE HAVE A WINNER!",
        description=description,
        color=WIN_COLOR,
        timestamp=datetime.now(timezone.utc),
    )
    if athlete.profile_image_url:
        embed.set_thumbnail(url=athlete.profile_image_url)
    return embed


def timeout_text(athlete: AthleteRecord) -> str:
    return f"⏰ **Quiz Ended!** No one found the answer. It was **{athlete.display_name}**."


class QuizService:
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
        ticket_channel_id: str | None,
        window_seconds: float = QUIZ_WINDOW_SECONDS,
    ) -> None:
        self.bot = bot
        self.pool = pool
        self.channel_store = channel_store
        self.activity_store = activity_store
        self.presence = presence
        self.audit = audit
        self.general_channel_id = (general_channel_id or "").strip()
        self.ticket_channel_id = (ticket_channel_id or "").strip() or None
        self.window_seconds = float(window_seconds)
        self._tasks: set[asyncio.Task] = set()

    async def start_round(self) -> tuple[bool, str]:
        """
        Posts the prompt and starts listening in the background.

        Returns as soon as the prompt is out; the answer window runs as a
        tracked task and reports its own outcome.
        """
        athlete = await asyncio.to_thread(self.pool.preview_sample)
        if athlete is None:
            return False, "No athlete available for the quiz. Check the athlete catalog."

        announce_id = await asyncio.to_thread(self.channel_store.resolve_channel, "announce")
        announce = await get_channel(self.bot, announce_id)
        general = await get_channel(self.bot, self.general_channel_id)
        if announce is None or general is None:
            return False, "Could not find the announce or general channel."

        try:
            await announce.send(
                content="✨ **Weekly Scout Quiz is LIVE!** @everyone",
                embed=build_quiz_embed(athlete, general_channel_id=self.general_channel_id),
            )
        except Exception as e:
            await asyncio.to_thread(self.activity_store.record_error, f"quiz prompt: {e}")
            if self.audit is not None:
                await self.audit.log_error("quiz prompt", e)
            return False, f"Quiz prompt failed: {e}"

        if self.presence is not None:
            await self.presence.refresh(QUIZ_PRESENCE)

        quiz = QuizRound(
            answer=athlete.name,
            channel_id=parse_channel_id(getattr(general, "id", self.general_channel_id)),
            window_seconds=self.window_seconds,
        )
        task = asyncio.create_task(self._run_round(quiz, athlete, announce))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        print(f"[Quiz] round started (answer hint {athlete.name[:1].upper()}, window {int(self.window_seconds)}s)")
        return True, f"Quiz launched in <#{announce_id}>. Answers tracked in <#{self.general_channel_id}>."

    async def _run_round(self, quiz: QuizRound, athlete: AthleteRecord, announce) -> str:
        try:
            message = await quiz.listen(self.bot.wait_for)
            if message is None:
                await announce.send(timeout_text(athlete))
                print(f"[Quiz] no winner; answer was {athlete.name}")
            else:
                winner_id = message.author.id
                await announce.send(
                    content=f"🎊 Congratulations <@{winner_id}>!",
                    embed=build_winner_embed(athlete, winner_id=winner_id, ticket_channel_id=self.ticket_channel_id),
                )
                await message.reply(f"🏆 **Correct!** You won the Scout Quiz! Check <#{announce.id}> for details.")
                print(f"[Quiz] winner {winner_id} for {athlete.name}")
        except Exception as e:
            print(f"[Quiz] round error: {e}")
            await asyncio.to_thread(self.activity_store.record_error, f"quiz round: {e}")
        finally:
            if self.presence is not None:
                await self.presence.refresh()
        return quiz.state
