from __future__ import annotations

from discord.ext import commands

from misc.adhoc_modules.guide_panel import build_guide_embed
from misc.adhoc_modules.guide_panel import build_guide_view
from misc.adhoc_modules.guide_panel import build_help_embed
from misc.adhoc_modules.guide_panel import build_help_view
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    # Member-facing; no admin gate.

    @bot.command(name="feedback")
    async def feedback(ctx: commands.Context):
        if deps.feedback_panel_factory is None:
            await ctx.send("Error: feedback is not available right now.")
            return
        await ctx.send(
            "💬 **Tell us what you think!** Click below to rate this week's game.",
            view=deps.feedback_panel_factory(),
        )

    @bot.command(name="how_to_play")
    async def how_to_play(ctx: commands.Context):
        await ctx.send(embed=build_guide_embed(), view=build_guide_view())

    @bot.command(name="help")
    async def help_menu(ctx: commands.Context):
        await ctx.send(embed=build_help_embed(), view=build_help_view())
