"""Turn raw Schedules into the sorted Match list the listing pages render.

Live/upcoming state is computed against a reference ``now`` at call time, so
every Match is a snapshot.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from footgoal import config
from footgoal.models import Channel, Event, Match, Schedule
from footgoal.text_utils import (
    canonical_day_key,
    clean_category_name,
    format_time_until,
    normalize_whitespace,
    parse_time_to_minutes,
)


FOOTBALL_ALIASES = ("football", "soccer")
MINUTES_PER_DAY = 24 * 60
UNKNOWN_TIME_SORT_KEY = MINUTES_PER_DAY + 1
WHITESPACE_RE = re.compile(r"\s+")

T = TypeVar("T")


def event_key(event: Event) -> Tuple[str, str]:
    return normalize_whitespace(event.time), normalize_whitespace(event.event).casefold()


def dedupe_events(items: Iterable[T], key: Callable[[T], object] = event_key) -> List[T]:
    """Keep the first item per key, preserving order."""
    result: List[T] = []
    seen = set()
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result


def is_football_category(category: Optional[str]) -> bool:
    if not category:
        return True
    lowered = category.casefold()
    return any(alias in lowered for alias in FOOTBALL_ALIASES)


def category_matches(category_key: str, category: Optional[str]) -> bool:
    """``None`` matches everything; football and soccer buckets always match."""
    if not category:
        return True
    lowered = category_key.casefold()
    if category.casefold() in lowered:
        return True
    return any(alias in lowered for alias in FOOTBALL_ALIASES)


def minutes_until(
    time_text: str,
    now: dt.datetime,
    live_window_minutes: int = config.PRIMARY_LIVE_WINDOW_MINUTES,
) -> Optional[float]:
    """Minutes from ``now`` to today's ``HH:MM``; negative once it has passed.

    A late kickoff seen shortly after midnight is read as yesterday's when
    that puts it inside the live window, so 23:50 seen at 00:10 counts as
    20 minutes ago. Anything else stays on today's date.
    """
    minutes = parse_time_to_minutes(time_text)
    if minutes is None:
        return None
    kickoff = now.replace(hour=minutes // 60, minute=minutes % 60, second=0, microsecond=0)
    delta = (kickoff - now).total_seconds() / 60
    carried = delta - MINUTES_PER_DAY
    if delta > 0 and is_live_delta(carried, live_window_minutes):
        return carried
    return delta


def is_live_delta(delta: Optional[float], live_window_minutes: int = config.PRIMARY_LIVE_WINDOW_MINUTES) -> bool:
    return delta is not None and -live_window_minutes < delta <= 0


def starts_in_delta(delta: Optional[float]) -> Optional[str]:
    if delta is None or delta <= 0:
        return None
    return format_time_until(delta)


def composite_match_id(event: Event) -> str:
    return WHITESPACE_RE.sub("-", f"{event.time}-{event.event}").lower()


def match_id(event: Event, natural_ids: bool = False) -> str:
    if natural_ids and event.channels:
        return event.channels[0].channel_id
    return composite_match_id(event)


def event_to_match(
    event: Event,
    day: str,
    category: str,
    now: dt.datetime,
    live_window_minutes: int = config.PRIMARY_LIVE_WINDOW_MINUTES,
    natural_ids: bool = False,
) -> Match:
    delta = minutes_until(event.time, now, live_window_minutes)
    return Match(
        id=match_id(event, natural_ids),
        time=event.time,
        title=event.event,
        competition=clean_category_name(category),
        channels=tuple(event.channels),
        is_live=is_live_delta(delta, live_window_minutes),
        starts_in=starts_in_delta(delta),
        day=canonical_day_key(day),
    )


def sort_key(match: Match) -> int:
    minutes = parse_time_to_minutes(match.time)
    return UNKNOWN_TIME_SORT_KEY if minutes is None else minutes


def sort_matches(matches: Iterable[Match]) -> List[Match]:
    """Ascending by time of day; equal times keep their relative order."""
    return sorted(matches, key=sort_key)


def collect_events(schedule: Schedule, category: Optional[str] = "Soccer") -> List[Tuple[str, str, Event]]:
    collected = []
    for day, categories in schedule.items():
        if not isinstance(categories, dict):
            continue
        for category_key, events in categories.items():
            if not category_matches(category_key, category):
                continue
            for event in events or []:
                collected.append((day, category_key, event))
    return collected


def schedule_to_matches(
    schedule: Optional[Schedule],
    category: Optional[str] = "Soccer",
    now: Optional[dt.datetime] = None,
    live_window_minutes: int = config.PRIMARY_LIVE_WINDOW_MINUTES,
    natural_ids: bool = False,
) -> List[Match]:
    if not schedule:
        return []
    now = now or dt.datetime.now()
    # Display-labelled and ISO keys for one day collapse into a single bucket.
    schedule = merge_schedules([schedule])
    collected = dedupe_events(collect_events(schedule, category), key=lambda item: event_key(item[2]))
    matches = [
        event_to_match(event, day, category_key, now, live_window_minutes, natural_ids)
        for day, category_key, event in collected
    ]
    return sort_matches(matches)


def merge_schedules(schedules: Sequence[Optional[Schedule]]) -> Schedule:
    """Concatenate schedules under canonical ISO day keys, in argument order."""
    merged: Schedule = {}
    for schedule in schedules:
        if not schedule:
            continue
        for day, categories in schedule.items():
            if not isinstance(categories, dict):
                continue
            bucket = merged.setdefault(canonical_day_key(day), {})
            for category_key, events in categories.items():
                bucket.setdefault(category_key, []).extend(events or [])
    return merged


def summarize_categories(schedule: Optional[Schedule]) -> List[Dict[str, object]]:
    """Category names with event counts, in first-seen order."""
    counts: Dict[str, int] = {}
    for categories in (schedule or {}).values():
        for category_key, events in categories.items():
            counts[category_key] = counts.get(category_key, 0) + len(events or [])
    return [{"name": name, "count": count} for name, count in counts.items()]


def find_alternative_channels(matches: Iterable[Match], title: str, channel_id: str) -> List[Channel]:
    for match in matches:
        if match.title == title:
            return [channel for channel in match.channels if channel.channel_id != channel_id]
    return []
