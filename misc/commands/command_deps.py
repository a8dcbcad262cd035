from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Callable


def _default_false(*args, **kwargs) -> bool:
    return False


@dataclass(frozen=True)
class CommandDeps:
    # Core/shared
    send_chunked: Callable | None = None
    timezone_name: str = "Europe/Paris"

    # Stores
    channel_store: Any = None
    message_store: Any = None
    reactions_store: Any = None
    activity_store: Any = None
    analytics_store: Any = None
    feedback_store: Any = None
    spotlight_pool: Any = None

    # Services
    composer: Any = None
    spotlight_service: Any = None
    quiz_service: Any = None
    presence: Any = None
    audit: Any = None
    schedule_state: Any = None
    feedback_panel_factory: Callable | None = None


@dataclass(frozen=True)
class CommandGates:
    user_is_admin: Callable[[Any], bool] = _default_false
