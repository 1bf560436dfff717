"""Synthetic schedule used when every real source fails.

Kickoffs are offsets from ``now`` so the shape is stable whenever it runs:
two events are always live and three always upcoming.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Tuple

from footgoal.models import Channel, Event, Schedule
from footgoal.text_utils import format_clock


MOCK_SOURCE = "mock"

# (offset minutes from now, title, ((channel name, channel id, logo), ...))
MOCK_FIXTURES = {
    "Soccer": (
        (-45, "Arsenal vs Manchester City", (
            ("Sky Sports Main Event", "302", "logos/sky_sports.png"),
            ("beIN Sports 1", "491", "logos/bein_sports.png"),
        )),
        (-10, "Real Madrid vs Barcelona", (("DAZN 1", "401", "logos/dazn.png"),)),
        (60, "PSG vs Lyon", (("Canal+ Sport", "501", "logos/canal_plus.png"),)),
        (120, "Juventus vs Inter Milan", (("Sky Sport Italia", "601", "logos/sky_italia.png"),)),
    ),
    "UEFA Champions League": (
        (180, "Liverpool vs AC Milan", (("TNT Sports 1", "701", "logos/tnt_sports.png"),)),
    ),
}

MOCK_CHANNELS: Tuple[Tuple[str, str, str], ...] = (
    ("Sky Sports Main Event", "302", "logos/sky_sports.png"),
    ("beIN Sports 1", "491", "logos/bein_sports.png"),
    ("beIN Sports 2", "492", "logos/bein_sports.png"),
    ("DAZN 1", "401", "logos/dazn.png"),
    ("Canal+ Sport", "501", "logos/canal_plus.png"),
    ("TNT Sports 1", "701", "logos/tnt_sports.png"),
    ("BT Sport 1", "901", "logos/bt_sport.png"),
)


def build_mock_schedule(now: Optional[dt.datetime] = None) -> Schedule:
    now = now or dt.datetime.now()
    day: dict = {}
    for category, fixtures in MOCK_FIXTURES.items():
        events = []
        for offset, title, channels in fixtures:
            kickoff = now + dt.timedelta(minutes=offset)
            events.append(
                Event(
                    time=format_clock(kickoff),
                    event=title,
                    channels=tuple(Channel(name, channel_id, logo) for name, channel_id, logo in channels),
                )
            )
        day[category] = events
    return {now.date().isoformat(): day}


def mock_channels() -> List[Channel]:
    return [Channel(name, channel_id, logo) for name, channel_id, logo in MOCK_CHANNELS]
