from __future__ import annotations

import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

try:
    import discord
except ModuleNotFoundError:
    discord = None

if discord is not None:
    from misc.adhoc_modules.feedback_panel import FEEDBACK_BUTTON_ID
    from misc.adhoc_modules.feedback_panel import FeedbackRecorder
    from misc.adhoc_modules.feedback_panel import build_feedback_panel
    from misc.adhoc_modules.feedback_panel import parse_rating
    from storage.activity import ActivityStore
    from storage.analytics import AnalyticsStore
    from storage.channels import ChannelConfigStore
    from storage.feedback import FeedbackStore


class _FakeChannel:
    def __init__(self, channel_id: int):
        self.id = channel_id
        self.embeds = []

    async def send(self, *, embed=None, **kwargs):
        self.embeds.append(embed)


class _FakeBot:
    def __init__(self, channels=()):
        self._channels = {ch.id: ch for ch in channels}

    def get_channel(self, channel_id):
        return self._channels.get(int(channel_id))

    async def fetch_channel(self, channel_id):
        raise RuntimeError("Unknown Channel")


@unittest.skipIf(discord is None, "discord.py not installed")
class FeedbackRecorderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        now = datetime(2026, 2, 2, 9, 0, tzinfo=timezone.utc)
        self.feedback_store = FeedbackStore(root / "feedbacks.json")
        self.activity_store = ActivityStore(root / "activity.json", clock=lambda: now)
        self.analytics_store = AnalyticsStore(root / "analytics.json", clock=lambda: now)
        self.channel_store = ChannelConfigStore(root / "config.json")
        self.channel_store.set_channel("feedback", 4242)
        self.feedback_channel = _FakeChannel(4242)
        self.recorder = FeedbackRecorder(
            bot=_FakeBot([self.feedback_channel]),
            feedback_store=self.feedback_store,
            activity_store=self.activity_store,
            analytics_store=self.analytics_store,
            channel_store=self.channel_store,
            audit=None,
            clock=lambda: now,
        )

    def tearDown(self):
        self._tmp.cleanup()

    async def test_out_of_range_rating_is_rejected_and_not_stored(self):
        for raw in ("0", "6", "x", ""):
            ok, msg = await self.recorder.submit(user_id=1, username="m", rating_raw=raw)
            self.assertFalse(ok)
            self.assertIn("Invalid rating", msg)
        self.assertEqual(self.feedback_store.load(), [])
        self.assertEqual(self.activity_store.load()["totalFeedbackReceived"], 0)
        self.assertEqual(self.feedback_channel.embeds, [])

    async def test_valid_feedback_is_stored_counted_and_forwarded(self):
        ok, msg = await self.recorder.submit(user_id=7, username="manager", rating_raw="4", liked="  the quiz ")
        self.assertTrue(ok)
        self.assertIn("⭐⭐⭐⭐☆", msg)

        entries = self.feedback_store.load()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]["userId"], "7")
        self.assertEqual(entries[0]["liked"], "the quiz")
        self.assertEqual(entries[0]["improve"], "No response")
        self.assertEqual(entries[0]["timestamp"], "2026-02-02T09:00:00+00:00")

        self.assertEqual(self.activity_store.load()["totalFeedbackReceived"], 1)
        analytics = self.analytics_store.load()
        self.assertEqual(analytics["feedbacksReceived"], 1)
        self.assertEqual(analytics["history"]["2026-02-02"]["feedbacks"], 1)
        self.assertEqual(self.feedback_store.stats(), (1, "4.0"))

        self.assertEqual(len(self.feedback_channel.embeds), 1)
        self.assertEqual(self.feedback_channel.embeds[0].footer.text, "User ID: 7")

    async def test_panel_button_is_persistent(self):
        panel = build_feedback_panel(self.recorder)
        self.assertTrue(panel.is_persistent())
        self.assertEqual([item.custom_id for item in panel.children], [FEEDBACK_BUTTON_ID])


@unittest.skipIf(discord is None, "discord.py not installed")
class ParseRatingTests(unittest.TestCase):
    def test_bounds(self):
        self.assertEqual(parse_rating("1"), 1)
        self.assertEqual(parse_rating(" 5 "), 5)
        self.assertIsNone(parse_rating("0"))
        self.assertIsNone(parse_rating(None))


if __name__ == "__main__":
    unittest.main()
