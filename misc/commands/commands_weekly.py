from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from discord.ext import commands

from config.defaults import ANNOUNCEMENT_TYPES
from config.defaults import CHANNEL_KINDS
from jobs.weekly import WEEKLY_SLOTS
from jobs.weekly import describe_schedule
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.discord_timestamps import format_discord_timestamp
from misc.discord_timestamps import next_scheduled_run
from misc.week_clock import current_week_number
from storage.activity import format_uptime


def build_status_text(
    *,
    activity: dict[str, Any],
    channels: dict[str, str | None],
    week_number: int,
    next_run: tuple[str, datetime] | None,
    feedback_stats: tuple[int, str],
    spotlight_left: int,
    schedule_lines: list[str],
    guard: tuple[str | None, str | None],
    recent_days: list[tuple[str, dict[str, int]]] | None = None,
    now: datetime | None = None,
) -> str:
    lines = [
        "Ace status",
        f"uptime: {format_uptime(activity.get('botStartedAt'), now=now)}",
        f"week: {week_number}",
        "",
        "channels:",
    ]
    for kind in CHANNEL_KINDS:
        value = channels.get(kind)
        lines.append(f"- {kind}: {value or 'not set'}")

    lines.append("")
    if next_run is not None:
        label, when = next_run
        lines.append(f"next post: {label} at {when.isoformat()}")
    lines.extend(schedule_lines)
    lines.append(f"guard: opening={guard[0] or '-'} closing={guard[1] or '-'}")

    total_feedback, average = feedback_stats
    lines.extend(
        [
            "",
            f"total posts: {int(activity.get('totalPostsSent') or 0)}",
            f"last scheduled post: {activity.get('lastWeeklyPost') or '-'} (week {activity.get('lastWeeklyPostWeek') or '-'})",
            f"last manual post: {activity.get('lastManualPost') or '-'}",
            f"feedback: {total_feedback} ({average}/5)",
            f"spotlight remaining: {spotlight_left} athletes",
        ]
    )
    if recent_days:
        totals = {"messages": 0, "commands": 0, "arrivals": 0, "departures": 0}
        for _, bucket in recent_days:
            for key in totals:
                totals[key] += int(bucket.get(key) or 0)
        lines.append(
            f"last {len(recent_days)} day(s): {totals['messages']} messages, {totals['commands']} commands, "
            f"+{totals['arrivals']}/-{totals['departures']} members"
        )
    last_error = activity.get("lastError")
    if isinstance(last_error, dict) and last_error.get("message"):
        lines.append(f"last error: {last_error.get('message')} @ {last_error.get('timestamp') or '?'}")
    return "\n".join(lines)


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    def require_admin(ctx: commands.Context) -> bool:
        return bool(gates.user_is_admin(ctx.author))

    @bot.command(name="weekly.send_now")
    async def weekly_send_now(ctx: commands.Context, message_type: str = ""):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        kind = (message_type or "").strip().lower()
        if kind not in ANNOUNCEMENT_TYPES:
            await ctx.send("Usage: `!weekly.send_now <opening|closing>`")
            return

        print(f"[Composer] manual {kind} trigger by {ctx.author}")
        ok = await deps.composer.send_weekly_message(kind, is_manual=True)
        if not ok:
            await ctx.send("Error: broadcast failed. Check the announce channel and the bot logs.")
            return
        if deps.presence is not None:
            await deps.presence.refresh()
        await ctx.send(f"{kind.capitalize()} announcement broadcast.")

    @bot.command(name="weekly.status")
    async def weekly_status(ctx: commands.Context):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return

        now = datetime.now(timezone.utc)
        activity = await asyncio.to_thread(deps.activity_store.load)
        channels = {kind: await asyncio.to_thread(deps.channel_store.resolve_channel, kind) for kind in CHANNEL_KINDS}
        feedback_stats = await asyncio.to_thread(deps.feedback_store.stats)
        spotlight_left = await asyncio.to_thread(deps.spotlight_pool.unposted_count)
        recent = await asyncio.to_thread(deps.analytics_store.recent_days, 7)
        upcoming = next_scheduled_run(WEEKLY_SLOTS, deps.timezone_name, now=now)
        state = deps.schedule_state

        text = build_status_text(
            activity=activity,
            channels=channels,
            week_number=current_week_number(deps.timezone_name, now),
            next_run=(upcoming[0].label, upcoming[1]) if upcoming else None,
            feedback_stats=feedback_stats,
            spotlight_left=spotlight_left,
            schedule_lines=describe_schedule(deps.timezone_name),
            guard=(getattr(state, "last_sent_open_week", None), getattr(state, "last_sent_close_week", None)),
            recent_days=recent,
            now=now,
        )
        await deps.send_chunked(ctx.channel, f"```\n{text[:7000]}\n```")
        if upcoming:
            await ctx.send(f"Next post ({upcoming[0].label}): {format_discord_timestamp(upcoming[1], 'F')} ({format_discord_timestamp(upcoming[1], 'R')})")
