#!/usr/bin/env python3
"""
Read the football schedule published by SportsWatcher as a JSON sheet.

Rows already carry a ready embed URL (IframeURL), so channel ids are the
base64-encoded URL behind the sw- prefix and resolve without any network call.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from footgoal import config
from footgoal.errors import UpstreamUnavailable
from footgoal.http_client import PageFetcher
from footgoal.models import Event, Schedule, build_payload, count_events, make_channel, schedule_has_events, single_day_schedule
from footgoal.stream_ref import encode_url_id, is_absolute_url
from footgoal.text_utils import normalize_whitespace, to_local_clock


DEFAULT_CATEGORY = "Football 2"
SOURCE_TIMEZONE = "America/New_York"
EXCLUDED_KEYWORDS = (
    "nba", "nfl", "nhl", "mlb", "ufc", "boxing", "wwe", "basketball",
    "formula 1", "moto gp", "cricket", "rugby", "tennis", "golf", "hockey", "aew",
)
KICKOFF_FORMATS = ("%B %d, %Y %I:%M %p", "%B %d, %Y %H:%M", "%b %d, %Y %I:%M %p")


def get_timezone(name: str) -> dt.tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return dt.timezone(dt.timedelta(hours=-5), "EST")


def is_excluded_league(league: object) -> bool:
    key = normalize_whitespace(league).casefold()
    return any(token in key for token in EXCLUDED_KEYWORDS)


def parse_kickoff(date_text: object, time_text: object, tz: dt.tzinfo) -> Optional[dt.datetime]:
    raw = normalize_whitespace(f"{normalize_whitespace(date_text)} {normalize_whitespace(time_text)}")
    if not raw:
        return None
    for fmt in KICKOFF_FORMATS:
        try:
            return dt.datetime.strptime(raw, fmt).replace(tzinfo=tz)
        except ValueError:
            continue
    return None


def row_to_event(row: Dict, now: Optional[dt.datetime], tz: dt.tzinfo) -> Optional[Event]:
    if is_excluded_league(row.get("League")):
        return None
    kickoff = parse_kickoff(row.get("Date"), row.get("Time"), tz)
    if kickoff is None:
        return None
    iframe_url = normalize_whitespace(row.get("IframeURL"))
    if not is_absolute_url(iframe_url):
        return None
    team1 = normalize_whitespace(row.get("Team1"))
    team2 = normalize_whitespace(row.get("Team2"))
    if not team1 or not team2:
        return None
    return Event(
        time=to_local_clock(kickoff, now),
        event=f"{team1} vs {team2}",
        channels=(make_channel(encode_url_id(iframe_url), name="Stream 1"),),
    )


class SportsWatcherSource:
    name = "sportswatcher"
    live_window_minutes = config.PRIMARY_LIVE_WINDOW_MINUTES
    natural_ids = True

    def __init__(
        self,
        api_url: str = config.SPORTSWATCHER_API_URL,
        fetcher: Optional[PageFetcher] = None,
        category: str = DEFAULT_CATEGORY,
        source_timezone: str = SOURCE_TIMEZONE,
    ):
        self.api_url = api_url
        self.fetcher = fetcher
        self.category = category
        self.tz = get_timezone(source_timezone)

    def parse_rows(self, rows: object, now: dt.datetime) -> List[Event]:
        if not isinstance(rows, list):
            return []
        events = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            event = row_to_event(row, now, self.tz)
            if event is not None:
                events.append(event)
        return events

    def fetch_schedule(self, now: Optional[dt.datetime] = None) -> Optional[Schedule]:
        now = now or dt.datetime.now()
        try:
            fetcher = self.fetcher or PageFetcher(self.api_url, session=requests.Session(), referer="")
            rows = fetcher.get_json(self.api_url)
            events = self.parse_rows(rows, now)
        except UpstreamUnavailable as exc:
            print(f"[SportsWatcher] Fetch failed: {exc.reason}", flush=True)
            return None
        except Exception as exc:
            print(f"[SportsWatcher] Error: {exc!r}", flush=True)
            return None

        print(f"[SportsWatcher] Found {len(events)} matches.", flush=True)
        if not events:
            return None
        schedule = single_day_schedule(now, self.category, events)
        return schedule if schedule_has_events(schedule) else None


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read the SportsWatcher football sheet.")
    parser.add_argument("--output", type=str, default="schedule_sportswatcher.json", help="Output JSON path.")
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    source = SportsWatcherSource()
    schedule = source.fetch_schedule()
    if schedule is None:
        print("[SportsWatcher] No usable schedule.", file=sys.stderr)
        return 1

    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump(build_payload(schedule, source.name), handle, indent=2, ensure_ascii=False)

    print(f"[SportsWatcher] Wrote {args.output} ({count_events(schedule)} events)", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
