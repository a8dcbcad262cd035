from __future__ import annotations

import asyncio
import json
import re

from discord.ext import commands

from config.defaults import ANNOUNCEMENT_TYPES
from config.defaults import CHANNEL_KINDS
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from storage.message_config import BOOL_FIELDS
from storage.message_config import STRING_FIELDS

TRUE_WORDS = {"on", "true", "yes", "1"}
FALSE_WORDS = {"off", "false", "no", "0"}
CLEAR_WORDS = {"none", "clear", "unset", "-"}


def parse_channel_token(token: str) -> int | None:
    m = re.fullmatch(r"<#(\d{5,25})>|(\d{5,25})", (token or "").strip())
    if not m:
        return None
    return int(m.group(1) or m.group(2))


def parse_bool_word(value: str) -> bool | None:
    v = (value or "").strip().lower()
    if v in TRUE_WORDS:
        return True
    if v in FALSE_WORDS:
        return False
    return None


def parse_message_edit(raw: str) -> tuple[str, str, object] | str:
    """
    `<type> <field> | <value>` -> (type, field, parsed value), or an error string.

    Booleans accept on/off/true/false/yes/no; `\\n` in text becomes a newline.
    """
    text = (raw or "").strip()
    if "|" not in text:
        return "Usage: `!weekly.message <opening|closing> <field> | <value>`"
    left, value = [s.strip() for s in text.split("|", 1)]
    tokens = left.split()
    if len(tokens) != 2:
        return "Usage: `!weekly.message <opening|closing> <field> | <value>`"
    kind, field_name = tokens[0].lower(), tokens[1]
    if kind not in ANNOUNCEMENT_TYPES:
        return f"Unknown message type `{kind}` (expected opening or closing)."

    if field_name in BOOL_FIELDS:
        flag = parse_bool_word(value)
        if flag is None:
            return f"`{field_name}` expects on/off."
        return (kind, field_name, flag)
    if field_name not in STRING_FIELDS:
        known = ", ".join(sorted(STRING_FIELDS | BOOL_FIELDS))
        return f"Unknown field `{field_name}`. Known fields: {known}"
    if not value:
        return f"`{field_name}` needs a value."
    if field_name == "color" and not re.fullmatch(r"#?[0-9A-Fa-f]{6}", value):
        return "`color` expects a hex value like #6366F1."
    if field_name == "color" and not value.startswith("#"):
        value = f"#{value}"
    return (kind, field_name, value.replace("\\n", "\n"))


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    def require_admin(ctx: commands.Context) -> bool:
        return bool(gates.user_is_admin(ctx.author))

    async def audit_change(ctx: commands.Context, setting: str) -> None:
        if deps.audit is not None:
            await deps.audit.log_config_change(setting, str(ctx.author))

    @bot.command(name="weekly.setup")
    async def weekly_setup(ctx: commands.Context, kind: str = "", channel_token: str = ""):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        kind = (kind or "").strip().lower()
        if kind not in CHANNEL_KINDS:
            await ctx.send(f"Usage: `!weekly.setup <{'|'.join(CHANNEL_KINDS)}> <#channel|none>`")
            return

        if (channel_token or "").strip().lower() in CLEAR_WORDS:
            channel_id = None
        else:
            channel_id = parse_channel_token(channel_token)
            if channel_id is None:
                await ctx.send("Error: mention a channel like #announcements or paste its id.")
                return

        ok = await asyncio.to_thread(deps.channel_store.set_channel, kind, channel_id)
        if not ok:
            await ctx.send("Error: could not save the channel config.")
            return
        await audit_change(ctx, f"channel:{kind}")
        if channel_id is None:
            await ctx.send(f"`{kind}` channel cleared.")
        else:
            await ctx.send(f"`{kind}` channel set to <#{channel_id}>.")

    @bot.command(name="weekly.reactions")
    async def weekly_reactions(ctx: commands.Context, action: str = "view", *emojis: str):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        action = (action or "view").strip().lower()
        store = deps.reactions_store

        if action == "view":
            config = await asyncio.to_thread(store.load)
        elif action in {"on", "off"}:
            config = await asyncio.to_thread(store.update, enabled=(action == "on"))
            await audit_change(ctx, f"reactions:{action}")
        elif action == "reset":
            config = await asyncio.to_thread(store.reset)
            await audit_change(ctx, "reactions:reset")
        elif action == "set":
            picked = [e.strip() for e in emojis if e.strip()]
            if not picked:
                await ctx.send("Usage: `!weekly.reactions set <emoji> [emoji...]`")
                return
            config = await asyncio.to_thread(store.update, reactions=picked)
            await audit_change(ctx, "reactions:set")
        else:
            await ctx.send("Usage: `!weekly.reactions [view|on|off|reset|set <emoji...>]`")
            return

        state = "enabled" if config["enabled"] else "disabled"
        await ctx.send(f"Reactions {state}: {' '.join(config['reactions']) or '(none)'}")

    @bot.command(name="weekly.message")
    async def weekly_message(ctx: commands.Context, *, raw: str = ""):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        parsed = parse_message_edit(raw)
        if isinstance(parsed, str):
            await ctx.send(parsed)
            return
        kind, field_name, value = parsed
        await asyncio.to_thread(deps.message_store.update, kind, {field_name: value})
        await audit_change(ctx, f"message:{kind}.{field_name}")
        await ctx.send(f"`{kind}.{field_name}` updated.")

    @bot.command(name="weekly.message_view")
    async def weekly_message_view(ctx: commands.Context, message_type: str = "opening"):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        kind = (message_type or "").strip().lower()
        if kind not in ANNOUNCEMENT_TYPES:
            await ctx.send("Usage: `!weekly.message_view <opening|closing>`")
            return
        section = await asyncio.to_thread(deps.message_store.get, kind)
        body = json.dumps(section, indent=2, ensure_ascii=False)
        await deps.send_chunked(ctx.channel, f"```json\n{body[:7000]}\n```")

    @bot.command(name="weekly.message_reset")
    async def weekly_message_reset(ctx: commands.Context, message_type: str = ""):
        if not require_admin(ctx):
            await ctx.send("This command is admin-only.")
            return
        kind = (message_type or "").strip().lower()
        if kind not in ANNOUNCEMENT_TYPES:
            await ctx.send("Usage: `!weekly.message_reset <opening|closing>`")
            return
        await asyncio.to_thread(deps.message_store.reset, kind)
        await audit_change(ctx, f"message:{kind}.reset")
        await ctx.send(f"`{kind}` message reset to defaults.")
