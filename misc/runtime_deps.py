from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RuntimeDeps:
    # stores
    activity_store: Any
    analytics_store: Any

    # services
    audit: Any
    presence: Any


@dataclass(frozen=True)
class RuntimeBootDeps:
    feedback_panel_factory: Callable
    scheduler_enabled: bool
    scheduler_factory: Callable
