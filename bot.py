import os
from pathlib import Path

import discord
from discord.ext import commands

from announce.composer import WeeklyComposer
from announce.presence import PresenceUpdater
from config.defaults import DEFAULT_ANNOUNCE_CHANNEL_ID
from config.defaults import DEFAULT_ANNOUNCE_ROLE_ID
from config.defaults import DEFAULT_ASSETS_DIR
from config.defaults import DEFAULT_ATHLETES_PATH
from config.defaults import DEFAULT_DATA_DIR
from config.defaults import DEFAULT_GENERAL_CHANNEL_ID
from config.defaults import DEFAULT_SPOTLIGHT_CHANNEL_ID
from config.defaults import DEFAULT_TICKET_CHANNEL_ID
from config.defaults import DEFAULT_TIMEZONE
from config.defaults import QUIZ_WINDOW_SECONDS
from jobs.weekly import WeeklyJobs
from jobs.weekly import WeeklyScheduleState
from jobs.weekly import build_scheduler
from jobs.weekly import describe_schedule
from misc.adhoc_modules.feedback_panel import FeedbackRecorder
from misc.adhoc_modules.feedback_panel import build_feedback_panel
from misc.discord_gates import member_is_admin
from misc.discord_gates import parse_user_ids
from misc.discord_logger import AuditLogger
from misc.runtime_wiring import wire_bot_runtime
from misc.week_clock import resolve_timezone
from spotlight.quiz import QuizService
from spotlight.service import SpotlightService
from spotlight.store import SpotlightPool
from storage.activity import ActivityStore
from storage.analytics import AnalyticsStore
from storage.channels import ChannelConfigStore
from storage.feedback import FeedbackStore
from storage.message_config import MessageConfigStore
from storage.reactions import ReactionsConfigStore

# =========================
# ENV
# =========================
DISCORD_TOKEN = (os.getenv("DISCORD_TOKEN") or "").strip()

if not DISCORD_TOKEN:
    raise RuntimeError("Missing DISCORD_TOKEN env var")

TIMEZONE_NAME = os.getenv("ACE_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
# Fatal on an unknown zone: every schedule depends on it.
resolve_timezone(TIMEZONE_NAME)

DATA_DIR = Path(os.getenv("ACE_DATA_DIR", DEFAULT_DATA_DIR).strip() or DEFAULT_DATA_DIR)
ASSETS_DIR = Path(os.getenv("ACE_ASSETS_DIR", DEFAULT_ASSETS_DIR).strip() or DEFAULT_ASSETS_DIR)
ATHLETES_PATH = Path(os.getenv("ACE_ATHLETES_PATH", DEFAULT_ATHLETES_PATH).strip() or DEFAULT_ATHLETES_PATH)

ANNOUNCE_CHANNEL_ID = os.getenv("ACE_ANNOUNCE_CHANNEL_ID", DEFAULT_ANNOUNCE_CHANNEL_ID).strip()
SPOTLIGHT_CHANNEL_ID = os.getenv("ACE_SPOTLIGHT_CHANNEL_ID", DEFAULT_SPOTLIGHT_CHANNEL_ID).strip()
GENERAL_CHANNEL_ID = os.getenv("ACE_GENERAL_CHANNEL_ID", DEFAULT_GENERAL_CHANNEL_ID).strip()
TICKET_CHANNEL_ID = os.getenv("ACE_TICKET_CHANNEL_ID", DEFAULT_TICKET_CHANNEL_ID).strip()
ANNOUNCE_ROLE_ID = os.getenv("ACE_ANNOUNCE_ROLE_ID", DEFAULT_ANNOUNCE_ROLE_ID).strip()
OWNER_USER_IDS = parse_user_ids(os.getenv("ACE_OWNER_USER_IDS", ""))

SCHEDULER_ENABLED = os.getenv("ACE_SCHEDULER_ENABLED", "1").strip() == "1"
try:
    QUIZ_WINDOW = max(60, int(os.getenv("ACE_QUIZ_WINDOW_SECONDS", str(QUIZ_WINDOW_SECONDS)).strip()))
except ValueError:
    print(f"[CFG] invalid ACE_QUIZ_WINDOW_SECONDS; falling back to {QUIZ_WINDOW_SECONDS}")
    QUIZ_WINDOW = QUIZ_WINDOW_SECONDS

print(
    f"[CFG] timezone={TIMEZONE_NAME} data_dir={DATA_DIR} assets_dir={ASSETS_DIR} "
    f"athletes={ATHLETES_PATH}"
)
print(
    f"[CFG] announce_fallback={ANNOUNCE_CHANNEL_ID or '-'} spotlight_fallback={SPOTLIGHT_CHANNEL_ID or '-'} "
    f"general={GENERAL_CHANNEL_ID or '-'} ticket={TICKET_CHANNEL_ID or '-'} role={ANNOUNCE_ROLE_ID or '-'} "
    f"owners={len(OWNER_USER_IDS)}"
)
print(f"[CFG] scheduler_enabled={SCHEDULER_ENABLED} quiz_window={QUIZ_WINDOW}s")
for _line in describe_schedule(TIMEZONE_NAME):
    print(f"[CFG] schedule {_line}")

# =========================
# DISCORD BOT
# =========================
intents = discord.Intents.default()
intents.message_content = True
intents.members = True

# `!help` is the Peaxel help centre, not the default command list.
bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

DISCORD_MAX_MESSAGE_LEN = 1900  # keep under 2000 hard limit


def chunk_text(text: str, limit: int = DISCORD_MAX_MESSAGE_LEN) -> list[str]:
    text = text or ""
    if len(text) <= limit:
        return [text]

    chunks = []
    remaining = text

    while len(remaining) > limit:
        # Prefer splitting on newline, then space
        split_at = remaining.rfind("\n", 0, limit)
        if split_at == -1:
            split_at = remaining.rfind(" ", 0, limit)
        if split_at == -1:
            split_at = limit

        chunk = remaining[:split_at].strip()
        if chunk:
            chunks.append(chunk)

        remaining = remaining[split_at:].strip()

    if remaining:
        chunks.append(remaining)
    return chunks


async def send_chunked(channel: discord.abc.Messageable, text: str) -> None:
    for part in chunk_text(text, DISCORD_MAX_MESSAGE_LEN):
        await channel.send(part)


def user_is_admin(member) -> bool:
    return member_is_admin(member, OWNER_USER_IDS)


# =========================
# STORES
# =========================
channel_store = ChannelConfigStore(
    DATA_DIR / "config.json",
    env_fallbacks={"announce": ANNOUNCE_CHANNEL_ID, "spotlight": SPOTLIGHT_CHANNEL_ID},
)
message_store = MessageConfigStore(DATA_DIR / "message-config.json")
reactions_store = ReactionsConfigStore(DATA_DIR / "reactions-config.json")
activity_store = ActivityStore(DATA_DIR / "activity.json")
analytics_store = AnalyticsStore(DATA_DIR / "analytics.json")
feedback_store = FeedbackStore(DATA_DIR / "feedbacks.json")
spotlight_pool = SpotlightPool(ATHLETES_PATH, DATA_DIR / "spotlight-state.json")

# =========================
# SERVICES
# =========================
audit = AuditLogger(bot, channel_store)
presence = PresenceUpdater(bot, timezone_name=TIMEZONE_NAME)
schedule_state = WeeklyScheduleState()

composer = WeeklyComposer(
    bot=bot,
    channel_store=channel_store,
    message_store=message_store,
    reactions_store=reactions_store,
    activity_store=activity_store,
    audit=audit,
    assets_dir=ASSETS_DIR,
    timezone_name=TIMEZONE_NAME,
    announce_role_id=ANNOUNCE_ROLE_ID,
)
spotlight_service = SpotlightService(
    bot=bot,
    pool=spotlight_pool,
    channel_store=channel_store,
    activity_store=activity_store,
    presence=presence,
    audit=audit,
    general_channel_id=GENERAL_CHANNEL_ID,
)
quiz_service = QuizService(
    bot=bot,
    pool=spotlight_pool,
    channel_store=channel_store,
    activity_store=activity_store,
    presence=presence,
    audit=audit,
    general_channel_id=GENERAL_CHANNEL_ID,
    ticket_channel_id=TICKET_CHANNEL_ID,
    window_seconds=QUIZ_WINDOW,
)
weekly_jobs = WeeklyJobs(
    composer=composer,
    spotlight=spotlight_service,
    quiz=quiz_service,
    presence=presence,
    activity_store=activity_store,
    audit=audit,
    state=schedule_state,
    timezone_name=TIMEZONE_NAME,
)
feedback_recorder = FeedbackRecorder(
    bot=bot,
    feedback_store=feedback_store,
    activity_store=activity_store,
    analytics_store=analytics_store,
    channel_store=channel_store,
    audit=audit,
)


def _build_feedback_panel() -> discord.ui.View:
    return build_feedback_panel(feedback_recorder)


def _build_scheduler():
    return build_scheduler(weekly_jobs, TIMEZONE_NAME)


wire_bot_runtime(
    bot,
    user_is_admin=user_is_admin,
    send_chunked=send_chunked,
    timezone_name=TIMEZONE_NAME,
    channel_store=channel_store,
    message_store=message_store,
    reactions_store=reactions_store,
    activity_store=activity_store,
    analytics_store=analytics_store,
    feedback_store=feedback_store,
    spotlight_pool=spotlight_pool,
    composer=composer,
    spotlight_service=spotlight_service,
    quiz_service=quiz_service,
    presence=presence,
    audit=audit,
    schedule_state=schedule_state,
    feedback_panel_factory=_build_feedback_panel,
    scheduler_enabled=SCHEDULER_ENABLED,
    scheduler_factory=_build_scheduler,
)

bot.run(DISCORD_TOKEN)
