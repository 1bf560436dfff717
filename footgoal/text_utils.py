"""Pure time and text helpers shared by adapters and the normalizer."""

from __future__ import annotations

import datetime as dt
import re
from typing import Dict, Optional


WHITESPACE_RE = re.compile(r"\s+")
TIME_RE = re.compile(r"\b(\d{1,2}):(\d{2})\b")
CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")
CATEGORY_DIGITS_RE = re.compile(r"\d+")
CATEGORY_PUNCT_RE = re.compile(r"[^\w\s-]")
TEAMS_SPLIT_RE = re.compile(r"(.+?)\s+(?:vs\.?|v|–|-)\s+(.+)", re.IGNORECASE)
VS_SPLIT_RE = re.compile(r" vs ", re.IGNORECASE)

DAY_LABEL_FORMATS = ("%A, %d %B %Y", "%A %d %B %Y", "%d %B %Y", "%A, %B %d, %Y")


def normalize_whitespace(value: object) -> str:
    return " ".join(str(value or "").strip().split())


def parse_time_to_minutes(value: object) -> Optional[int]:
    """Minutes since midnight for an ``HH:MM`` string, ``None`` when unparseable."""
    match = CLOCK_RE.match(str(value or ""))
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_time_until(minutes: float) -> str:
    total = int(minutes + 0.5)
    if total < 60:
        return f"{total}min"
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}min" if mins else f"{hours}h"


def clean_category_name(category: object) -> str:
    text = CATEGORY_DIGITS_RE.sub("", str(category or ""))
    text = CATEGORY_PUNCT_RE.sub("", text)
    return normalize_whitespace(text)


def format_clock(moment: dt.datetime) -> str:
    return moment.strftime("%H:%M")


def split_match_title(title: object) -> Optional[Dict[str, str]]:
    text = normalize_whitespace(title)
    if not text:
        return None
    match = TEAMS_SPLIT_RE.match(text)
    if match:
        return {"team1": match.group(1).strip(), "team2": match.group(2).strip()}
    if " vs " in text.casefold():
        parts = VS_SPLIT_RE.split(text, maxsplit=1)
        if len(parts) == 2:
            return {"team1": parts[0].strip(), "team2": parts[1].strip()}
    return None


def canonical_day_key(label: object) -> str:
    """ISO date for a day bucket label; unparseable labels come back trimmed."""
    text = normalize_whitespace(label)
    if not text:
        return ""
    try:
        return dt.date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    for fmt in DAY_LABEL_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return text


def format_day_label(key: object) -> str:
    text = normalize_whitespace(key)
    try:
        day = dt.date.fromisoformat(text)
    except ValueError:
        return text
    return f"{day:%A}, {day.day} {day:%B} {day.year}"


def iso_z_now() -> str:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_iso_datetime(value: object) -> Optional[dt.datetime]:
    text = normalize_whitespace(value)
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return dt.datetime.fromisoformat(text)
    except ValueError:
        return None


def to_local_clock(moment: dt.datetime, now: Optional[dt.datetime] = None) -> str:
    """``HH:MM`` of an absolute moment on the wall clock ``now`` is expressed in."""
    if moment.tzinfo is not None:
        if now is not None and now.tzinfo is not None:
            moment = moment.astimezone(now.tzinfo)
        else:
            moment = moment.astimezone().replace(tzinfo=None)
    return format_clock(moment)
