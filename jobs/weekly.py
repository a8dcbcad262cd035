from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from announce.composer import WeeklyComposer
from announce.presence import PresenceUpdater
from config.defaults import CLOSING_AT
from config.defaults import OPENING_AT
from config.defaults import QUIZ_AT
from config.defaults import SPOTLIGHT_AT
from misc.discord_logger import AuditLogger
from misc.discord_timestamps import WeeklySlot
from misc.week_clock import resolve_timezone
from misc.week_clock import week_key
from spotlight.quiz import QuizService
from spotlight.service import SpotlightService
from storage.activity import ActivityStore

CRON_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

WEEKLY_SLOTS = (
    WeeklySlot("opening", *OPENING_AT),
    WeeklySlot("quiz", *QUIZ_AT),
    WeeklySlot("spotlight", *SPOTLIGHT_AT),
    WeeklySlot("closing", *CLOSING_AT),
)


@dataclass(slots=True)
class WeeklyScheduleState:
    """Per-process duplicate guard. Holds the WeekKey of the last successful post; a restart clears it."""

    last_sent_open_week: str | None = None
    last_sent_close_week: str | None = None


class WeeklyJobs:
    def __init__(
        self,
        *,
        composer: WeeklyComposer,
        spotlight: SpotlightService,
        quiz: QuizService,
        presence: PresenceUpdater,
        activity_store: ActivityStore,
        audit: AuditLogger | None,
        state: WeeklyScheduleState,
        timezone_name: str,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.composer = composer
        self.spotlight = spotlight
        self.quiz = quiz
        self.presence = presence
        self.activity_store = activity_store
        self.audit = audit
        self.state = state
        self.timezone_name = timezone_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def _job_failed(self, job: str, error: BaseException) -> None:
        print(f"[Scheduler] [{job}] error: {error}")
        await asyncio.to_thread(self.activity_store.record_error, f"{job}: {error}")
        if self.audit is not None:
            await self.audit.log_error(f"scheduled {job}", error)

    async def _run_guarded(self, kind: str, guard_attr: str) -> bool:
        key = week_key(self.timezone_name, self.clock())
        if getattr(self.state, guard_attr) == key:
            print(f"[Scheduler] [{kind}] already sent for {key}; skipping")
            return False
        try:
            ok = await self.composer.send_weekly_message(kind, is_manual=False)
        except Exception as e:
            await self._job_failed(kind, e)
            return False
        if ok:
            setattr(self.state, guard_attr, key)
            await self.presence.refresh()
        return ok

    async def run_opening(self) -> bool:
        return await self._run_guarded("opening", "last_sent_open_week")

    async def run_closing(self) -> bool:
        return await self._run_guarded("closing", "last_sent_close_week")

    async def run_quiz(self) -> bool:
        try:
            ok, msg = await self.quiz.start_round()
        except Exception as e:
            await self._job_failed("quiz", e)
            return False
        print(f"[Scheduler] [quiz] {msg}")
        return ok

    async def run_spotlight(self) -> bool:
        try:
            return await self.spotlight.post_weekly_spotlight()
        except Exception as e:
            await self._job_failed("spotlight", e)
            return False

    async def refresh_presence(self) -> None:
        try:
            await self.presence.refresh()
        except Exception as e:
            print(f"[Scheduler] [presence] error: {e}")


def _weekly_trigger(slot: WeeklySlot, tz) -> CronTrigger:
    return CronTrigger(day_of_week=CRON_WEEKDAYS[slot.weekday], hour=slot.hour, minute=slot.minute, timezone=tz)


def build_scheduler(jobs: WeeklyJobs, timezone_name: str) -> AsyncIOScheduler:
    """Registers the four weekly events and the hourly presence refresh. The caller starts it."""
    tz = resolve_timezone(timezone_name)
    scheduler = AsyncIOScheduler(timezone=tz)
    runners = {
        "opening": jobs.run_opening,
        "quiz": jobs.run_quiz,
        "spotlight": jobs.run_spotlight,
        "closing": jobs.run_closing,
    }
    for slot in WEEKLY_SLOTS:
        scheduler.add_job(runners[slot.label], _weekly_trigger(slot, tz), id=f"weekly_{slot.label}", name=slot.label)
    scheduler.add_job(jobs.refresh_presence, CronTrigger(minute=0, timezone=tz), id="presence_refresh", name="presence")
    return scheduler


def describe_schedule(timezone_name: str) -> list[str]:
    lines = []
    for slot in WEEKLY_SLOTS:
        lines.append(f"{slot.label}: {CRON_WEEKDAYS[slot.weekday]} {slot.hour:02d}:{slot.minute:02d} ({timezone_name})")
    lines.append(f"presence: every hour at :00 ({timezone_name})")
    return lines
