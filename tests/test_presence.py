from __future__ import annotations

import unittest
from datetime import datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

try:
    import discord
except ModuleNotFoundError:
    discord = None

if discord is not None:
    from announce.presence import PresenceUpdater
    from announce.presence import presence_text

PARIS = ZoneInfo("Europe/Paris")


class _FakeBot:
    def __init__(self, *, logged_in: bool = True, fail: bool = False):
        self.user = SimpleNamespace(id=1) if logged_in else None
        self.fail = fail
        self.activities = []

    async def change_presence(self, *, activity=None, **kwargs):
        if self.fail:
            raise RuntimeError("gateway closed")
        self.activities.append(activity)


@unittest.skipIf(discord is None, "discord.py not installed")
class PresenceTextTests(unittest.TestCase):
    def test_weekday_table(self):
        self.assertEqual(presence_text(0, 0, 11), "Gameweek : 11 | LIVE 🟢")
        self.assertEqual(presence_text(1, 18, 11), "Gameweek : 11")
        self.assertEqual(presence_text(1, 19, 11), "Gameweek : 11 | Quiz Time 🎲")
        self.assertEqual(presence_text(2, 15, 11), "Gameweek : 11")
        self.assertEqual(presence_text(2, 16, 11), "Gameweek : 11 | Spotlight 🌟")
        self.assertEqual(presence_text(3, 18, 11), "Gameweek : 11 | Closing Soon ⏳")
        self.assertEqual(presence_text(3, 19, 11), "Gameweek : 11 | Locked 🚫")
        self.assertEqual(presence_text(4, 12, 11), "Gameweek : 11")
        self.assertEqual(presence_text(6, 12, 10), "Gameweek : 10")

    def test_override_wins(self):
        self.assertEqual(presence_text(0, 0, 11, override="  Quiz Time 🎲 "), "Quiz Time 🎲")
        self.assertEqual(presence_text(0, 0, 11, override="   "), "Gameweek : 11 | LIVE 🟢")


@unittest.skipIf(discord is None, "discord.py not installed")
class PresenceUpdaterTests(unittest.IsolatedAsyncioTestCase):
    async def test_refresh_sets_watching_activity(self):
        bot = _FakeBot()
        updater = PresenceUpdater(bot, timezone_name="Europe/Paris", clock=lambda: datetime(2024, 3, 14, 20, 0, tzinfo=PARIS))
        text = await updater.refresh()
        self.assertEqual(text, "Gameweek : 11 | Locked 🚫")
        self.assertEqual(bot.activities[0].name, text)
        self.assertEqual(bot.activities[0].type, discord.ActivityType.watching)

    async def test_sunday_shows_previous_week(self):
        updater = PresenceUpdater(_FakeBot(), timezone_name="Europe/Paris", clock=lambda: datetime(2024, 3, 10, 12, 0, tzinfo=PARIS))
        self.assertEqual(updater.current_text(), "Gameweek : 9")

    async def test_refresh_is_noop_before_login(self):
        bot = _FakeBot(logged_in=False)
        updater = PresenceUpdater(bot, timezone_name="Europe/Paris")
        self.assertIsNone(await updater.refresh())
        self.assertEqual(bot.activities, [])

    async def test_refresh_failure_is_reported_not_raised(self):
        updater = PresenceUpdater(_FakeBot(fail=True), timezone_name="Europe/Paris")
        self.assertIsNone(await updater.refresh("Quiz Time 🎲"))


if __name__ == "__main__":
    unittest.main()
