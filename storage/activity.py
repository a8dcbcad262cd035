from __future__ import annotations

from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Any, Callable

from storage.json_files import JsonFileStore


def default_activity() -> dict[str, Any]:
    return {
        "lastWeeklyPost": None,
        "lastWeeklyPostWeek": None,
        "lastManualPost": None,
        "totalPostsSent": 0,
        "totalFeedbackReceived": 0,
        "botStartedAt": None,
        "lastError": None,
    }


def utc_iso(dt: datetime | None = None) -> str:
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def format_uptime(started_at: str | None, now: datetime | None = None) -> str:
    if not started_at:
        return "Unknown"
    try:
        start = datetime.fromisoformat(str(started_at))
    except ValueError:
        return "Unknown"
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    seconds = max(0, int(((now or datetime.now(timezone.utc)) - start).total_seconds()))
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    return f"{days}d {hours}h {rem // 60}m"


class ActivityStore:
    def __init__(self, path: str | Path, *, clock: Callable[[], datetime] | None = None) -> None:
        self.store: JsonFileStore[dict[str, Any]] = JsonFileStore(path, default_activity, label="Activity")
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def load(self) -> dict[str, Any]:
        raw = self.store.load()
        merged = default_activity()
        if isinstance(raw, dict):
            merged.update(raw)
        return merged

    def _mutate(self, fn: Callable[[dict[str, Any]], None]) -> dict[str, Any]:
        activity = self.load()
        fn(activity)
        self.store.save(activity)
        return activity

    def record_weekly_post(self, *, is_manual: bool, week_number: int, message_type: str = "opening") -> dict[str, Any]:
        now = utc_iso(self.clock())

        def apply(activity: dict[str, Any]) -> None:
            if is_manual:
                activity["lastManualPost"] = now
            else:
                activity["lastWeeklyPost"] = now
                if message_type == "opening":
                    activity["lastWeeklyPostWeek"] = int(week_number)
            activity["totalPostsSent"] = int(activity.get("totalPostsSent") or 0) + 1

        return self._mutate(apply)

    def record_feedback(self) -> dict[str, Any]:
        def apply(activity: dict[str, Any]) -> None:
            activity["totalFeedbackReceived"] = int(activity.get("totalFeedbackReceived") or 0) + 1

        return self._mutate(apply)

    def record_bot_start(self) -> dict[str, Any]:
        now = utc_iso(self.clock())
        return self._mutate(lambda activity: activity.update({"botStartedAt": now}))

    def record_error(self, message: str) -> dict[str, Any]:
        entry = {"message": str(message)[:300], "timestamp": utc_iso(self.clock())}
        return self._mutate(lambda activity: activity.update({"lastError": entry}))
