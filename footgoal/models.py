"""Schedule data model.

A ``Schedule`` is a plain mapping ``{day_key: {category: [Event, ...]}}``.
Channel and Event are frozen: an adapter builds them once per scrape and
nothing downstream mutates them. Match is the UI projection, derived fresh on
every normalization pass.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from footgoal.text_utils import iso_z_now, normalize_whitespace, split_match_title


PLACEHOLDER_LOGO = "/placeholder-logo.png"


@dataclass(frozen=True)
class Channel:
    channel_name: str
    channel_id: str
    logo_url: Optional[str] = None

    def to_dict(self) -> Dict:
        payload = {"channel_name": self.channel_name, "channel_id": self.channel_id}
        if self.logo_url:
            payload["logo_url"] = self.logo_url
        return payload


@dataclass(frozen=True)
class Event:
    time: str
    event: str
    channels: Tuple[Channel, ...] = ()
    channels2: Tuple[Channel, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "time": self.time,
            "event": self.event,
            "channels": [channel.to_dict() for channel in self.channels],
            "channels2": [channel.to_dict() for channel in self.channels2],
        }


@dataclass(frozen=True)
class Match:
    id: str
    time: str
    title: str
    competition: str
    channels: Tuple[Channel, ...] = ()
    is_live: bool = False
    starts_in: Optional[str] = None
    day: str = ""

    @property
    def teams(self) -> Optional[Dict[str, str]]:
        return split_match_title(self.title)

    def to_dict(self) -> Dict:
        payload = {
            "id": self.id,
            "time": self.time,
            "title": self.title,
            "competition": self.competition,
            "channels": [channel.to_dict() for channel in self.channels],
            "isLive": self.is_live,
        }
        if self.starts_in is not None:
            payload["startsIn"] = self.starts_in
        teams = self.teams
        if teams:
            payload["teams"] = teams
        return payload


# day key -> category -> events
DaySchedule = Dict[str, List[Event]]
Schedule = Dict[str, DaySchedule]


def make_channel(channel_id: str, name: str = "Main Stream", logo_url: Optional[str] = PLACEHOLDER_LOGO) -> Channel:
    return Channel(channel_name=name, channel_id=channel_id, logo_url=logo_url)


def channel_from_dict(raw: object) -> Optional[Channel]:
    if not isinstance(raw, dict):
        return None
    channel_id = normalize_whitespace(raw.get("channel_id"))
    if not channel_id:
        return None
    logo = normalize_whitespace(raw.get("logo_url")) or None
    return Channel(
        channel_name=normalize_whitespace(raw.get("channel_name")) or channel_id,
        channel_id=channel_id,
        logo_url=logo,
    )


def _channels_from_list(values: object) -> Tuple[Channel, ...]:
    if not isinstance(values, list):
        return ()
    channels = [channel_from_dict(item) for item in values]
    return tuple(channel for channel in channels if channel is not None)


def event_from_dict(raw: object) -> Optional[Event]:
    if not isinstance(raw, dict):
        return None
    title = normalize_whitespace(raw.get("event"))
    time_text = normalize_whitespace(raw.get("time"))
    if not title or not time_text:
        return None
    return Event(
        time=time_text,
        event=title,
        channels=_channels_from_list(raw.get("channels")),
        channels2=_channels_from_list(raw.get("channels2")),
    )


def schedule_from_dict(raw: object) -> Schedule:
    """Build a Schedule from the JSON shape served by the official API."""
    schedule: Schedule = {}
    if not isinstance(raw, dict):
        return schedule
    for day, categories in raw.items():
        if not isinstance(categories, dict):
            continue
        day_bucket: DaySchedule = {}
        for category, events in categories.items():
            if not isinstance(events, list):
                continue
            parsed = [event_from_dict(item) for item in events]
            day_bucket[str(category)] = [item for item in parsed if item is not None]
        schedule[str(day)] = day_bucket
    return schedule


def schedule_to_dict(schedule: Schedule) -> Dict:
    return {
        day: {category: [event.to_dict() for event in events] for category, events in categories.items()}
        for day, categories in schedule.items()
    }


def count_events(schedule: Optional[Schedule]) -> int:
    if not schedule:
        return 0
    return sum(len(events) for categories in schedule.values() for events in categories.values())


def schedule_has_events(schedule: Optional[Schedule]) -> bool:
    """True when at least one category of at least one day holds an event."""
    if not isinstance(schedule, dict):
        return False
    return any(
        isinstance(events, list) and len(events) > 0
        for categories in schedule.values()
        if isinstance(categories, dict)
        for events in categories.values()
    )


@dataclass
class ScheduleResult:
    """Winning schedule plus the provenance the normalizer needs."""

    schedule: Schedule
    source: str
    tier: int
    live_window_minutes: int
    natural_ids: bool = False
    synthetic: bool = False
    attempts: List[str] = field(default_factory=list)


def single_day_schedule(now: dt.datetime, category: str, events: List[Event]) -> Schedule:
    return {now.date().isoformat(): {category: list(events)}}


def build_payload(schedule: Schedule, source: str) -> Dict:
    return {
        "generated_at": iso_z_now(),
        "source": source,
        "schedule": schedule_to_dict(schedule),
    }
