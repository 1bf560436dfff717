"""Process-wide settings, read once from the environment at import time."""

from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DADDYLIVE_URL = os.getenv("DADDYLIVE_URL", "https://dlhd.link").rstrip("/")
DADDYLIVE_API_KEY = os.getenv("DADDYLIVE_API_KEY", "")
SPORTYHUNTER_URL = os.getenv("SPORTYHUNTER_URL", "https://sportyhunter.com").rstrip("/")
SPORTWATCH_URL = os.getenv("SPORTWATCH_URL", "https://sportwatch24.info").rstrip("/")
SPORTZONE_URL = os.getenv("SPORTZONE_URL", "https://stream.sportzone.su").rstrip("/")
SPORTSWATCHER_API_URL = os.getenv(
    "SPORTSWATCHER_API_URL",
    "https://opensheet.elk.sh/1vpV6z-RlvUhtLVpzngiHiKavo19VNFPQHuhy1ndJsHI/1",
)

FETCH_TIMEOUT = _env_float("FOOTGOAL_FETCH_TIMEOUT", 8.0)
SPORTWATCH_PAGES = max(1, _env_int("FOOTGOAL_SPORTWATCH_PAGES", 3))

# Heuristic thresholds. Empirical; keep them tunable.
MIN_CONTENT_LENGTH = _env_int("FOOTGOAL_MIN_CONTENT_LENGTH", 5000)
MIN_ROW_TEXT_LENGTH = _env_int("FOOTGOAL_MIN_ROW_TEXT_LENGTH", 10)
MAX_ROW_TEXT_LENGTH = _env_int("FOOTGOAL_MAX_ROW_TEXT_LENGTH", 200)
MIN_TITLE_LENGTH = _env_int("FOOTGOAL_MIN_TITLE_LENGTH", 4)
PRIMARY_LIVE_WINDOW_MINUTES = _env_int("FOOTGOAL_PRIMARY_LIVE_WINDOW", 120)
LOOSE_LIVE_WINDOW_MINUTES = _env_int("FOOTGOAL_LOOSE_LIVE_WINDOW", 150)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
