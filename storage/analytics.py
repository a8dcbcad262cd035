from __future__ import annotations

from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Any, Callable

from config.defaults import ANALYTICS_HISTORY_DAYS
from storage.json_files import JsonFileStore

COUNTER_KEYS = ("messagesSent", "membersJoined", "membersLeft", "commandsExecuted", "feedbacksReceived")

# counter -> daily bucket field
HISTORY_FIELDS = {
    "messagesSent": "messages",
    "commandsExecuted": "commands",
    "membersJoined": "arrivals",
    "membersLeft": "departures",
    "feedbacksReceived": "feedbacks",
}


def default_analytics() -> dict[str, Any]:
    out: dict[str, Any] = {key: 0 for key in COUNTER_KEYS}
    out["history"] = {}
    return out


class AnalyticsStore:
    def __init__(
        self,
        path: str | Path,
        *,
        clock: Callable[[], datetime] | None = None,
        history_days: int = ANALYTICS_HISTORY_DAYS,
    ) -> None:
        self.store: JsonFileStore[dict[str, Any]] = JsonFileStore(path, default_analytics, label="Analytics")
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.history_days = max(1, int(history_days))

    def load(self) -> dict[str, Any]:
        raw = self.store.load()
        merged = default_analytics()
        if isinstance(raw, dict):
            merged.update(raw)
        if not isinstance(merged.get("history"), dict):
            merged["history"] = {}
        return merged

    def track(self, event: str, *, total_members: int | None = None) -> bool:
        if event not in COUNTER_KEYS:
            return False
        stats = self.load()
        stats[event] = int(stats.get(event) or 0) + 1

        day = self.clock().date().isoformat()
        history: dict[str, dict[str, int]] = stats["history"]
        bucket = history.setdefault(day, {})
        field = HISTORY_FIELDS[event]
        bucket[field] = int(bucket.get(field) or 0) + 1
        if total_members is not None:
            bucket["totalMembers"] = int(total_members)

        for stale in sorted(history)[: -self.history_days]:
            history.pop(stale, None)
        return self.store.save(stats)

    def recent_days(self, days: int = 7) -> list[tuple[str, dict[str, int]]]:
        history = self.load()["history"]
        keys = sorted(history)[-max(1, int(days)):]
        return [(k, dict(history[k])) for k in keys]
