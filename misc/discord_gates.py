from __future__ import annotations

import discord


def member_is_admin(member: discord.abc.User, owner_user_ids: set[int]) -> bool:
    """Configured owners always pass; otherwise the member needs the administrator permission."""
    try:
        if int(getattr(member, "id", 0) or 0) in owner_user_ids:
            return True
    except (TypeError, ValueError):
        pass
    perms = getattr(member, "guild_permissions", None)
    return bool(getattr(perms, "administrator", False))


def parse_user_ids(raw: str) -> set[int]:
    out: set[int] = set()
    for token in (raw or "").replace(";", ",").split(","):
        token = token.strip()
        if token.isdigit():
            out.add(int(token))
    return out
