from __future__ import annotations

from typing import Any


def parse_channel_id(value: Any) -> int:
    try:
        return int(str(value or "").strip())
    except ValueError:
        return 0


async def get_channel(bot, channel_id: Any):
    """Cache first, then a fetch; None when the id is unset or unreachable."""
    cid = parse_channel_id(channel_id)
    if cid <= 0:
        return None
    ch = bot.get_channel(cid)
    if ch is not None:
        return ch
    try:
        return await bot.fetch_channel(cid)
    except Exception:
        return None
