#!/usr/bin/env python3
"""
Scrape the football schedule from SportWatch.

Listing pages (/sport/football, ?page=2, ?page=3) are fetched concurrently and
merged in page order. Match slugs map one-to-one onto SportZone game pages,
whose server buttons carry the embed URL in an onclick handler.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import re
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from urllib.parse import urljoin

from footgoal import config
from footgoal.errors import UpstreamUnavailable
from footgoal.extractors import CardLinkExtractor
from footgoal.http_client import PageFetcher, dump_html, parse_html
from footgoal.models import Event, Schedule, build_payload, count_events, schedule_has_events, single_day_schedule
from footgoal.stream_ref import SPORTWATCH_PREFIX
from footgoal.text_utils import normalize_whitespace


SCHEDULE_PATH = "/sport/football"
GAME_PATH = "/game/{slug}"
PLAY_STREAM_RE = re.compile(r"playStream\(\s*['\"]([^'\"]+)['\"]")
DEFAULT_CATEGORY = "Soccer"


def page_path(page: int) -> str:
    return SCHEDULE_PATH if page == 1 else f"{SCHEDULE_PATH}?page={page}"


def find_embed_url(html: str) -> str:
    """Embed URL from the first server button, else from the default player iframe."""
    soup = parse_html(html)
    for item in soup.select(".source-item"):
        match = PLAY_STREAM_RE.search(item.get("onclick") or "")
        if match:
            return match.group(1).strip()
    iframe = soup.select_one("iframe#live-player")
    if iframe is not None:
        return normalize_whitespace(iframe.get("src"))
    return ""


def dedupe_by_channel_id(events: List[Event]) -> List[Event]:
    result: List[Event] = []
    seen = set()
    for event in events:
        key = event.channels[0].channel_id if event.channels else event.event
        if key in seen:
            continue
        seen.add(key)
        result.append(event)
    return result


class SportWatchSource:
    name = "sportwatch"
    # "LIVE" cards carry no kickoff time, so they are stamped with the scrape time.
    live_window_minutes = config.LOOSE_LIVE_WINDOW_MINUTES
    natural_ids = True

    def __init__(
        self,
        base_url: str = config.SPORTWATCH_URL,
        stream_base_url: str = config.SPORTZONE_URL,
        fetcher: Optional[PageFetcher] = None,
        stream_fetcher: Optional[PageFetcher] = None,
        pages: int = config.SPORTWATCH_PAGES,
        category: str = DEFAULT_CATEGORY,
    ):
        self.base_url = base_url.rstrip("/")
        self.stream_base_url = stream_base_url.rstrip("/")
        self.fetcher = fetcher
        self.stream_fetcher = stream_fetcher
        self.pages = max(1, pages)
        self.category = category
        self.extractor = CardLinkExtractor(SPORTWATCH_PREFIX)

    def scrape_page(self, fetcher: PageFetcher, page: int, now: dt.datetime) -> List[Event]:
        try:
            html = fetcher.get_text(page_path(page))
            return self.extractor.extract(parse_html(html), now)
        except UpstreamUnavailable as exc:
            print(f"[SportWatch] Error fetching page {page}: {exc.reason}", flush=True)
        except Exception as exc:
            print(f"[SportWatch] Error parsing page {page}: {exc!r}", flush=True)
        return []

    def fetch_schedule(self, now: Optional[dt.datetime] = None) -> Optional[Schedule]:
        now = now or dt.datetime.now()
        print(f"[SportWatch] Fetching schedule from {self.pages} pages...", flush=True)
        try:
            fetcher = self.fetcher or PageFetcher(self.base_url)
            page_numbers = range(1, self.pages + 1)
            with ThreadPoolExecutor(max_workers=self.pages) as executor:
                results = list(executor.map(lambda page: self.scrape_page(fetcher, page, now), page_numbers))
        except Exception as exc:
            print(f"[SportWatch] Error: {exc!r}", flush=True)
            return None

        all_events = [event for page_events in results for event in page_events]
        print(f"[SportWatch] Found {len(all_events)} matches across {self.pages} pages.", flush=True)
        events = dedupe_by_channel_id(all_events)
        if not events:
            return None
        schedule = single_day_schedule(now, self.category, events)
        return schedule if schedule_has_events(schedule) else None

    def resolve_stream(self, slug: str) -> Optional[str]:
        """Second hop through the SportZone game page that mirrors this slug."""
        fetcher = self.stream_fetcher or PageFetcher(self.stream_base_url, referer=self.base_url + "/")
        print(f"[SportWatch] Resolving stream via SportZone: {slug}", flush=True)
        try:
            html = fetcher.get_text(GAME_PATH.format(slug=slug))
            embed_url = find_embed_url(html)
        except UpstreamUnavailable as exc:
            print(f"[SportWatch] SportZone fetch failed: {exc.reason}", flush=True)
            return None
        except Exception as exc:
            print(f"[SportWatch] Error getting stream: {exc!r}", flush=True)
            return None

        if not embed_url:
            print("[SportWatch] No stream found on SportZone page.", flush=True)
            dump_html(html, f"sportzone-{slug}")
            return None
        return urljoin(self.stream_base_url + "/", embed_url)


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape the football schedule from SportWatch.")
    parser.add_argument("--output", type=str, default="schedule_sportwatch.json", help="Output JSON path.")
    parser.add_argument("--pages", type=int, default=config.SPORTWATCH_PAGES, help="Listing pages to fetch.")
    parser.add_argument("--resolve", type=str, default=None, help="Resolve one match slug to its stream URL and exit.")
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    if args.pages < 1:
        print("--pages must be >= 1", file=sys.stderr)
        return 2
    source = SportWatchSource(pages=args.pages)

    if args.resolve:
        url = source.resolve_stream(args.resolve)
        if not url:
            print(f"[SportWatch] No stream for {args.resolve}", file=sys.stderr)
            return 1
        print(url)
        return 0

    schedule = source.fetch_schedule()
    if schedule is None:
        print("[SportWatch] No usable schedule.", file=sys.stderr)
        return 1

    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump(build_payload(schedule, source.name), handle, indent=2, ensure_ascii=False)

    print(f"[SportWatch] Wrote {args.output} ({count_events(schedule)} events)", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
