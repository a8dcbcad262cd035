from __future__ import annotations

"""Builds Discord <t:...> timestamp tags and next-occurrence times for the weekly timetable."""

from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from typing import Iterable

from misc.week_clock import resolve_timezone


DISCORD_TIMESTAMP_STYLES = {"t", "T", "d", "D", "f", "F", "R"}


@dataclass(frozen=True, slots=True)
class WeeklySlot:
    label: str
    weekday: int
    hour: int
    minute: int


def _validate_style(style: str) -> str:
    clean = str(style or "").strip() or "f"
    if clean not in DISCORD_TIMESTAMP_STYLES:
        raise ValueError(f"Invalid Discord timestamp style: {clean}")
    return clean


def _validate_slot(weekday: int, hour: int, minute: int) -> tuple[int, int, int]:
    try:
        wd, hh, mm = int(weekday), int(hour), int(minute)
    except Exception as exc:
        raise ValueError(f"Invalid weekly slot: {weekday} {hour}:{minute}") from exc
    if wd < 0 or wd > 6:
        raise ValueError(f"Invalid weekday: {weekday} (expected 0..6)")
    if hh < 0 or hh > 23:
        raise ValueError(f"Invalid hour: {hour} (expected 0..23)")
    if mm < 0 or mm > 59:
        raise ValueError(f"Invalid minute: {minute} (expected 0..59)")
    return wd, hh, mm


def format_discord_timestamp(dt: datetime, style: str = "f") -> str:
    if not isinstance(dt, datetime) or dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("dt must be a timezone-aware datetime")
    return f"<t:{int(dt.timestamp())}:{_validate_style(style)}>"


def next_weekday_time(
    weekday: int,
    hour: int,
    minute: int,
    timezone_name: str,
    now: datetime | None = None,
) -> datetime:
    """
    Return the next upcoming occurrence of weekday + local time in timezone_name.

    If the target time today is still in the future, return today.
    Otherwise, return the same weekday in the following week.
    """
    wd, hh, mm = _validate_slot(weekday, hour, minute)
    tz = resolve_timezone(timezone_name)
    if now is None:
        now_local = datetime.now(tz)
    else:
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValueError("now must be timezone-aware")
        now_local = now.astimezone(tz)

    days_ahead = (wd - now_local.weekday()) % 7
    target_date = now_local.date() + timedelta(days=days_ahead)
    candidate = datetime(target_date.year, target_date.month, target_date.day, hh, mm, tzinfo=tz)
    if candidate <= now_local:
        candidate = candidate + timedelta(days=7)
    return candidate


def same_or_next_weekday_time(
    weekday: int,
    hour: int,
    minute: int,
    timezone_name: str,
    now: datetime | None = None,
) -> datetime:
    """Like next_weekday_time, but on the target weekday itself never rolls over to next week."""
    wd, hh, mm = _validate_slot(weekday, hour, minute)
    tz = resolve_timezone(timezone_name)
    if now is None:
        now_local = datetime.now(tz)
    else:
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValueError("now must be timezone-aware")
        now_local = now.astimezone(tz)
    target_date = now_local.date() + timedelta(days=(wd - now_local.weekday()) % 7)
    return datetime(target_date.year, target_date.month, target_date.day, hh, mm, tzinfo=tz)


def countdown_block(deadline: datetime) -> str:
    relative = format_discord_timestamp(deadline, style="R")
    absolute = format_discord_timestamp(deadline, style="f")
    return (
        "\n\n⏱️ **TIME REMAINING:**\n"
        f"> Lineups lock in **{relative}**\n"
        f"> Deadline: {absolute}"
    )


def next_scheduled_run(
    slots: Iterable[WeeklySlot],
    timezone_name: str,
    now: datetime | None = None,
) -> tuple[WeeklySlot, datetime] | None:
    best: tuple[WeeklySlot, datetime] | None = None
    for slot in slots:
        when = next_weekday_time(slot.weekday, slot.hour, slot.minute, timezone_name, now=now)
        if best is None or when < best[1]:
            best = (slot, when)
    return best
