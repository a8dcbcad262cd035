from __future__ import annotations

import asyncio

import discord
from discord.ext import commands

from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def _member_count(guild) -> int | None:
    count = getattr(guild, "member_count", None)
    return int(count) if count is not None else None


async def track_event(deps: RuntimeDeps, event: str, *, guild=None) -> None:
    try:
        await asyncio.to_thread(deps.analytics_store.track, event, total_members=_member_count(guild))
    except Exception as e:
        print(f"[Analytics] failed to track {event}: {e}")


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    @bot.event
    async def on_ready():
        if not getattr(bot, "_feedback_panel_registered", False):
            bot.add_view(boot.feedback_panel_factory())
            bot._feedback_panel_registered = True

        print(f"Ace is online as {bot.user}")
        if not getattr(bot, "_boot_recorded", False):
            await asyncio.to_thread(deps.activity_store.record_bot_start)
            if deps.audit is not None:
                await deps.audit.announce_online()
            bot._boot_recorded = True

        if boot.scheduler_enabled and not getattr(bot, "_weekly_scheduler", None):
            scheduler = boot.scheduler_factory()
            scheduler.start()
            bot._weekly_scheduler = scheduler
            for job in scheduler.get_jobs():
                print(f"[Scheduler] {job.id} next run {job.next_run_time}")
            print("[Scheduler] weekly scheduler started")

        await deps.presence.refresh()

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return

        await track_event(deps, "messagesSent", guild=message.guild)

        if (message.content or "").lstrip().startswith("!"):
            await bot.process_commands(message)

    @bot.event
    async def on_member_join(member: discord.Member):
        await track_event(deps, "membersJoined", guild=member.guild)

    @bot.event
    async def on_member_remove(member: discord.Member):
        await track_event(deps, "membersLeft", guild=member.guild)

    @bot.event
    async def on_command_completion(ctx: commands.Context):
        await track_event(deps, "commandsExecuted", guild=ctx.guild)
        if deps.audit is not None:
            command_name = ctx.command.qualified_name if ctx.command else "?"
            await deps.audit.log_command_usage(command_name, str(ctx.author), getattr(ctx.guild, "name", None))

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            return
        print(f"[Commands] {getattr(ctx.command, 'qualified_name', '?')} failed: {error}")
        try:
            await ctx.send(f"Error: {error}")
        except Exception as e:
            print(f"[Commands] could not report error: {e}")
