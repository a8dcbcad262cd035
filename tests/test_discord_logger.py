from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

try:
    import discord
except ModuleNotFoundError:
    discord = None

if discord is not None:
    from misc.discord_logger import AuditLogger
    from misc.discord_logger import build_log_embed
    from storage.channels import ChannelConfigStore


class _FakeChannel:
    def __init__(self, channel_id: int, *, fail: bool = False):
        self.id = channel_id
        self.fail = fail
        self.embeds = []

    async def send(self, *, embed=None, **kwargs):
        if self.fail:
            raise RuntimeError("Missing Access")
        self.embeds.append(embed)


class _FakeBot:
    def __init__(self, channels=()):
        self._channels = {ch.id: ch for ch in channels}
        self.guilds = [object(), object()]

    def get_channel(self, channel_id):
        return self._channels.get(int(channel_id))

    async def fetch_channel(self, channel_id):
        raise RuntimeError("Unknown Channel")


@unittest.skipIf(discord is None, "discord.py not installed")
class AuditLoggerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.channel_store = ChannelConfigStore(Path(self._tmp.name) / "config.json")

    def tearDown(self):
        self._tmp.cleanup()

    async def test_without_logs_channel_nothing_is_mirrored(self):
        logger = AuditLogger(_FakeBot(), self.channel_store)
        self.assertFalse(await logger.announce_online())
        self.assertFalse(await logger.log_error("weekly opening", "boom"))

    async def test_weekly_post_is_mirrored(self):
        self.channel_store.set_channel("logs", 31)
        channel = _FakeChannel(31)
        logger = AuditLogger(_FakeBot([channel]), self.channel_store)

        ok = await logger.log_weekly_post(is_manual=True, week_number=11, channel_name="announcements", message_type="closing")

        self.assertTrue(ok)
        embed = channel.embeds[0]
        self.assertEqual(embed.title, "✅ Announcement Published")
        self.assertIn("Week 11", embed.description)
        self.assertEqual(embed.fields[0].value, "Manual (!weekly.send_now)")

    async def test_send_failure_is_not_raised(self):
        self.channel_store.set_channel("logs", 31)
        logger = AuditLogger(_FakeBot([_FakeChannel(31, fail=True)]), self.channel_store)
        self.assertFalse(await logger.log_config_change("channel:announce", "admin"))

    async def test_unknown_level_uses_info_style(self):
        embed = build_log_embed("verbose", "Hello", "world")
        self.assertEqual(embed.title, "ℹ️ Hello")
        self.assertEqual(embed.footer.text, "Peaxel • INFO")


if __name__ == "__main__":
    unittest.main()
