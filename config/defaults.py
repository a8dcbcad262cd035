from __future__ import annotations

DEFAULT_TIMEZONE = "Europe/Paris"

DEFAULT_DATA_DIR = "data"
DEFAULT_ASSETS_DIR = "assets"
DEFAULT_ATHLETES_PATH = "config/athletes.yml"

# Server ids (Peaxel community). Override via ACE_* env vars.
DEFAULT_ANNOUNCE_CHANNEL_ID = ""  # env only; unset means no announce fallback
DEFAULT_SPOTLIGHT_CHANNEL_ID = "1369976259613954059"
DEFAULT_GENERAL_CHANNEL_ID = "1369976259613954059"
DEFAULT_TICKET_CHANNEL_ID = "1369976260066803794"
DEFAULT_ANNOUNCE_ROLE_ID = "1369976254685642925"

CHANNEL_KINDS = ("announce", "spotlight", "feedback", "logs", "welcome")
ANNOUNCEMENT_TYPES = ("opening", "closing")

# (weekday 0=Monday, hour, minute) in the configured timezone
OPENING_AT = (0, 0, 0)
QUIZ_AT = (1, 19, 0)
SPOTLIGHT_AT = (2, 16, 0)
CLOSING_AT = (3, 18, 59)

QUIZ_WINDOW_SECONDS = 2 * 60 * 60

PLAY_URL = "https://game.peaxel.me/"
LEADERBOARD_URL = "https://peaxel.me/leaderboard"
BRAND_COLOR = 0xFACC15
WIN_COLOR = 0x2ECC71

ANALYTICS_HISTORY_DAYS = 30
