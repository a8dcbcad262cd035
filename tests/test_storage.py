from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from config.defaults import DEFAULT_ANNOUNCE_CHANNEL_ID
from config.defaults import DEFAULT_SPOTLIGHT_CHANNEL_ID
from storage.activity import ActivityStore
from storage.activity import format_uptime
from storage.analytics import AnalyticsStore
from storage.channels import ChannelConfigStore
from storage.feedback import FeedbackStore
from storage.json_files import JsonFileStore
from storage.message_config import DEFAULT_MESSAGE_CONFIG
from storage.message_config import MessageConfigStore
from storage.message_config import normalize_type
from storage.message_config import parse_color
from storage.reactions import DEFAULT_REACTIONS
from storage.reactions import ReactionsConfigStore


class _TmpDirCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()


class JsonFileStoreTests(_TmpDirCase):
    def test_missing_file_loads_default(self):
        store = JsonFileStore(self.root / "missing.json", list)
        self.assertEqual(store.load(), [])

    def test_corrupt_file_loads_default(self):
        path = self.root / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path, dict)
        self.assertEqual(store.load(), {})

    def test_save_creates_parents_and_writes_indented_utf8(self):
        path = self.root / "nested" / "dir" / "out.json"
        store = JsonFileStore(path, dict)
        self.assertTrue(store.save({"emoji": "🔥"}))
        text = path.read_text(encoding="utf-8")
        self.assertIn("🔥", text)
        self.assertIn('\n  "emoji"', text)


class MessageConfigTests(_TmpDirCase):
    def test_partial_opening_merges_over_defaults(self):
        path = self.root / "message-config.json"
        path.write_text(json.dumps({"opening": {"title": "X"}}), encoding="utf-8")
        config = MessageConfigStore(path).load()

        self.assertEqual(config["opening"]["title"], "X")
        for key, value in DEFAULT_MESSAGE_CONFIG["opening"].items():
            if key != "title":
                self.assertEqual(config["opening"][key], value, key)
        self.assertEqual(config["closing"], DEFAULT_MESSAGE_CONFIG["closing"])

    def test_title_placeholder_replaced_everywhere(self):
        store = MessageConfigStore(self.root / "message-config.json")
        store.update("opening", {"title": "Week {WEEK_NUMBER} / GW{WEEK_NUMBER} starts"})
        self.assertEqual(store.formatted_title(7, "opening"), "Week 7 / GW7 starts")

    def test_update_and_reset_only_touch_one_type(self):
        store = MessageConfigStore(self.root / "message-config.json")
        store.update("closing", {"color": "#000000", "showPlayButton": False})
        store.update("opening", {"footerText": "custom"})
        self.assertEqual(store.get("closing")["color"], "#000000")

        store.reset("closing")
        self.assertEqual(store.get("closing"), DEFAULT_MESSAGE_CONFIG["closing"])
        self.assertEqual(store.get("opening")["footerText"], "custom")

    def test_unknown_type_falls_back_to_opening(self):
        self.assertEqual(normalize_type("giveaway"), "opening")
        self.assertEqual(normalize_type(" Closing "), "closing")

    def test_parse_color(self):
        self.assertEqual(parse_color("#6366F1"), 0x6366F1)
        self.assertEqual(parse_color("nonsense"), 0xA855F7)


class ChannelConfigTests(_TmpDirCase):
    def test_empty_store_has_every_kind_unset(self):
        store = ChannelConfigStore(self.root / "config.json")
        self.assertIsNone(store.get_channel("announce"))
        self.assertIsNone(store.get_channel("not-a-kind"))

    def test_store_value_overrides_env_fallback(self):
        store = ChannelConfigStore(self.root / "config.json", env_fallbacks={"announce": "111"})
        self.assertEqual(store.resolve_channel("announce"), "111")
        self.assertTrue(store.set_channel("announce", 222))
        self.assertEqual(store.resolve_channel("announce"), "222")

    def test_set_channel_keeps_other_kinds(self):
        store = ChannelConfigStore(self.root / "config.json")
        store.set_channel("logs", "10")
        store.set_channel("spotlight", "20")
        raw = json.loads((self.root / "config.json").read_text(encoding="utf-8"))
        self.assertEqual(raw["channels"]["logs"], "10")
        self.assertEqual(raw["channels"]["spotlight"], "20")
        self.assertIsNone(raw["channels"]["welcome"])

    def test_unknown_kind_rejected_on_write(self):
        store = ChannelConfigStore(self.root / "config.json")
        with self.assertRaises(ValueError):
            store.set_channel("giveaway", "1")

    def test_default_announce_fallback_is_unset(self):
        store = ChannelConfigStore(
            self.root / "config.json",
            env_fallbacks={"announce": DEFAULT_ANNOUNCE_CHANNEL_ID, "spotlight": DEFAULT_SPOTLIGHT_CHANNEL_ID},
        )
        self.assertIsNone(store.resolve_channel("announce"))
        self.assertEqual(store.resolve_channel("spotlight"), DEFAULT_SPOTLIGHT_CHANNEL_ID)


class ReactionsConfigTests(_TmpDirCase):
    def test_defaults_and_disable(self):
        store = ReactionsConfigStore(self.root / "reactions-config.json")
        self.assertEqual(store.active_reactions(), DEFAULT_REACTIONS)
        store.update(enabled=False)
        self.assertEqual(store.active_reactions(), [])
        store.reset()
        self.assertEqual(store.active_reactions(), DEFAULT_REACTIONS)

    def test_custom_list(self):
        store = ReactionsConfigStore(self.root / "reactions-config.json")
        store.update(reactions=["✅", " ", "🏆"])
        self.assertEqual(store.active_reactions(), ["✅", "🏆"])


class ActivityStoreTests(_TmpDirCase):
    def setUp(self):
        super().setUp()
        self.now = datetime(2026, 2, 2, 0, 0, tzinfo=timezone.utc)
        self.store = ActivityStore(self.root / "activity.json", clock=lambda: self.now)

    def test_scheduled_opening_records_week(self):
        activity = self.store.record_weekly_post(is_manual=False, week_number=6, message_type="opening")
        self.assertEqual(activity["totalPostsSent"], 1)
        self.assertEqual(activity["lastWeeklyPostWeek"], 6)
        self.assertEqual(activity["lastWeeklyPost"], self.now.isoformat())
        self.assertIsNone(activity["lastManualPost"])

    def test_manual_and_closing_do_not_record_week(self):
        self.store.record_weekly_post(is_manual=True, week_number=6, message_type="opening")
        activity = self.store.record_weekly_post(is_manual=False, week_number=6, message_type="closing")
        self.assertEqual(activity["totalPostsSent"], 2)
        self.assertIsNone(activity["lastWeeklyPostWeek"])
        self.assertEqual(activity["lastManualPost"], self.now.isoformat())

    def test_error_message_is_truncated(self):
        activity = self.store.record_error("x" * 1000)
        self.assertEqual(len(activity["lastError"]["message"]), 300)
        self.assertEqual(self.store.load()["lastError"]["timestamp"], self.now.isoformat())

    def test_format_uptime(self):
        started = (self.now - timedelta(days=1, hours=2, minutes=3)).isoformat()
        self.assertEqual(format_uptime(started, now=self.now), "1d 2h 3m")
        self.assertEqual(format_uptime(None), "Unknown")


class AnalyticsStoreTests(_TmpDirCase):
    def test_track_increments_counter_and_daily_bucket(self):
        now = datetime(2026, 2, 2, 12, 0, tzinfo=timezone.utc)
        store = AnalyticsStore(self.root / "analytics.json", clock=lambda: now)
        store.track("messagesSent")
        store.track("messagesSent")
        store.track("membersJoined", total_members=42)
        stats = store.load()
        self.assertEqual(stats["messagesSent"], 2)
        self.assertEqual(stats["history"]["2026-02-02"], {"messages": 2, "arrivals": 1, "totalMembers": 42})

    def test_unknown_event_is_ignored(self):
        store = AnalyticsStore(self.root / "analytics.json")
        self.assertFalse(store.track("giveawaysJoined"))

    def test_history_keeps_at_most_thirty_days(self):
        day = [datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)]
        store = AnalyticsStore(self.root / "analytics.json", clock=lambda: day[0])
        for _ in range(40):
            store.track("commandsExecuted")
            day[0] = day[0] + timedelta(days=1)
        history = store.load()["history"]
        self.assertEqual(len(history), 30)
        self.assertNotIn("2026-01-01", history)
        self.assertIn("2026-02-09", history)
        self.assertEqual(len(store.recent_days(7)), 7)


class FeedbackStoreTests(_TmpDirCase):
    def test_stats_average(self):
        store = FeedbackStore(self.root / "feedbacks.json")
        self.assertEqual(store.stats(), (0, "0"))
        store.add({"userId": "1", "rating": 5})
        store.add({"userId": "2", "rating": 4})
        self.assertEqual(store.stats(), (2, "4.5"))


if __name__ == "__main__":
    unittest.main()
