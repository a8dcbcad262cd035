from __future__ import annotations

from discord.ext import commands

from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    @bot.command(name="spotlight.preview")
    async def spotlight_preview(ctx: commands.Context):
        if not gates.user_is_admin(ctx.author):
            await ctx.send("This command is admin-only.")
            return
        ok, msg = await deps.spotlight_service.post_preview(ctx.channel)
        await ctx.send(msg if ok else f"Error: {msg}")

    @bot.command(name="quiz.start")
    async def quiz_start(ctx: commands.Context):
        if not gates.user_is_admin(ctx.author):
            await ctx.send("This command is admin-only.")
            return
        ok, msg = await deps.quiz_service.start_round()
        await ctx.send(msg if ok else f"Error: {msg}")
