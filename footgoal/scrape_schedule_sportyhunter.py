#!/usr/bin/env python3
"""
Scrape the football schedule from SportyHunter.

The listing page is a Next.js app: matches are read from the embedded
#__NEXT_DATA__ payload first, then from the rendered rows when the payload is
missing or holds no known shape. Stream URLs need a second fetch of the
per-match page (/match/<slug>) to find its player iframe.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from typing import Dict, Optional
from urllib.parse import urljoin

from footgoal import config
from footgoal.errors import ExtractionEmpty, UpstreamUnavailable
from footgoal.extractors import NextDataExtractor, SlugRowExtractor
from footgoal.http_client import PageFetcher, dump_html, parse_html
from footgoal.models import Event, Schedule, build_payload, count_events, make_channel, schedule_has_events, single_day_schedule
from footgoal.stream_ref import SPORTYHUNTER_PREFIX
from footgoal.text_utils import normalize_whitespace, parse_iso_datetime, to_local_clock


SCHEDULE_PATH = "/sport/football"
MATCH_PATH = "/match/{slug}"
DEFAULT_CATEGORY = "Soccer"


def _team_name(record: Dict, nested_key: str, flat_key: str) -> str:
    nested = record.get(nested_key)
    if isinstance(nested, dict):
        name = normalize_whitespace(nested.get("name"))
        if name:
            return name
    return normalize_whitespace(record.get(flat_key))


def record_kickoff(record: Dict) -> Optional[dt.datetime]:
    timestamp = record.get("timestamp")
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool) and timestamp > 0:
        try:
            return dt.datetime.fromtimestamp(timestamp, tz=dt.timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return parse_iso_datetime(record.get("date"))


def record_to_event(record: Dict, now: Optional[dt.datetime] = None) -> Optional[Event]:
    """Map one SportyHunter match record; records without an id are dropped."""
    match_id = normalize_whitespace(record.get("slug") or record.get("id"))
    if not match_id:
        return None
    kickoff = record_kickoff(record)
    if kickoff is None:
        return None

    home = _team_name(record, "homeTeam", "home_team")
    away = _team_name(record, "awayTeam", "away_team")
    if not home and not away:
        return None

    return Event(
        time=to_local_clock(kickoff, now),
        event=f"{home} vs {away}",
        channels=(make_channel(SPORTYHUNTER_PREFIX + match_id),),
    )


def find_iframe_src(html: str) -> str:
    soup = parse_html(html)
    iframe = soup.find("iframe", src=True)
    return normalize_whitespace(iframe.get("src")) if iframe is not None else ""


class SportyHunterSource:
    name = "sportyhunter"
    live_window_minutes = config.LOOSE_LIVE_WINDOW_MINUTES
    natural_ids = True

    def __init__(
        self,
        base_url: str = config.SPORTYHUNTER_URL,
        fetcher: Optional[PageFetcher] = None,
        category: str = DEFAULT_CATEGORY,
    ):
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher
        self.category = category
        self.structured = NextDataExtractor(record_to_event)
        self.fallback = SlugRowExtractor(SPORTYHUNTER_PREFIX)

    def _fetcher(self) -> PageFetcher:
        return self.fetcher or PageFetcher(self.base_url)

    def parse_schedule_html(self, html: str, now: dt.datetime) -> Schedule:
        soup = parse_html(html)
        events = self.structured.extract(soup, now)
        if events is None:
            print("[SportyHunter] Structured data unusable; scanning rendered rows.", flush=True)
            events = self.fallback.extract(soup, now)
        print(f"[SportyHunter] Parsed {len(events)} matches.", flush=True)
        if not events:
            raise ExtractionEmpty("no matches in page data or rows")
        return single_day_schedule(now, self.category, events)

    def fetch_schedule(self, now: Optional[dt.datetime] = None) -> Optional[Schedule]:
        now = now or dt.datetime.now()
        print("[SportyHunter] Fetching schedule...", flush=True)
        try:
            html = self._fetcher().get_text(SCHEDULE_PATH)
            schedule = self.parse_schedule_html(html, now)
        except UpstreamUnavailable as exc:
            print(f"[SportyHunter] Failed to fetch: {exc.reason}", flush=True)
            return None
        except ExtractionEmpty as exc:
            print(f"[SportyHunter] {exc}", flush=True)
            return None
        except Exception as exc:
            print(f"[SportyHunter] Error: {exc!r}", flush=True)
            return None
        return schedule if schedule_has_events(schedule) else None

    def resolve_stream(self, slug: str) -> Optional[str]:
        """Second hop: the first iframe on the match page, made absolute."""
        try:
            html = self._fetcher().get_text(MATCH_PATH.format(slug=slug))
            src = find_iframe_src(html)
        except UpstreamUnavailable as exc:
            print(f"[SportyHunter] Match page fetch failed: {exc.reason}", flush=True)
            return None
        except Exception as exc:
            print(f"[SportyHunter] Error getting stream: {exc!r}", flush=True)
            return None
        if not src:
            print("[SportyHunter] No iframe on match page.", flush=True)
            dump_html(html, f"sportyhunter-{slug}")
            return None
        return urljoin(self.base_url + "/", src)


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape the football schedule from SportyHunter.")
    parser.add_argument("--output", type=str, default="schedule_sportyhunter.json", help="Output JSON path.")
    parser.add_argument("--resolve", type=str, default=None, help="Resolve one match slug to its stream URL and exit.")
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    source = SportyHunterSource()

    if args.resolve:
        url = source.resolve_stream(args.resolve)
        if not url:
            print(f"[SportyHunter] No stream for {args.resolve}", file=sys.stderr)
            return 1
        print(url)
        return 0

    schedule = source.fetch_schedule()
    if schedule is None:
        print("[SportyHunter] No usable schedule.", file=sys.stderr)
        return 1

    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump(build_payload(schedule, source.name), handle, indent=2, ensure_ascii=False)

    print(f"[SportyHunter] Wrote {args.output} ({count_events(schedule)} events)", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
