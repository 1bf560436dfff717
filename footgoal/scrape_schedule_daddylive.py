#!/usr/bin/env python3
"""
Scrape the live schedule from DaddyLive.

Two sources live here:
1) DaddyLiveSource: heuristic scan of the public listing pages
2) DaddyLiveApiSource: the official JSON API, only when an API key is set

DaddyLive channels are plain numbers substituted into one of several mirror
player folders, e.g. {base}/stream/stream-302.php.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from dataclasses import replace
from typing import List, Optional, Sequence

import requests

from footgoal import config
from footgoal.errors import ExtractionEmpty, UpstreamUnavailable
from footgoal.extractors import HeuristicRowExtractor
from footgoal.http_client import PageFetcher, parse_html
from footgoal.models import (
    Channel,
    Schedule,
    build_payload,
    channel_from_dict,
    count_events,
    schedule_from_dict,
    schedule_has_events,
    single_day_schedule,
)


ENDPOINTS = (
    "/index.php?cat=Soccer",
    "/24-hours-games.php",
    "/schedule.php",
    "/",
)
API_PATH = "/daddyapi.php"
PLAYER_FOLDERS = ("stream", "cast", "watch", "plus", "casting", "player")
STREAM_URL_TEMPLATE = "{base}/{folder}/stream-{channel_id}.php"
DEFAULT_CATEGORY = "Soccer"


def stream_url(channel_id: str, folder: str = "stream", base_url: str = config.DADDYLIVE_URL) -> str:
    if folder not in PLAYER_FOLDERS:
        folder = PLAYER_FOLDERS[0]
    return STREAM_URL_TEMPLATE.format(base=base_url.rstrip("/"), folder=folder, channel_id=channel_id)


def stream_url_candidates(channel_id: str, base_url: str = config.DADDYLIVE_URL) -> List[str]:
    """One URL per mirror folder, in the order a player should try them."""
    return [stream_url(channel_id, folder, base_url) for folder in PLAYER_FOLDERS]


def logo_url(path: Optional[str], base_url: str = config.DADDYLIVE_URL) -> str:
    if not path:
        return "/placeholder-channel.png"
    if path.startswith("http"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class DaddyLiveSource:
    name = "daddylive"
    live_window_minutes = config.PRIMARY_LIVE_WINDOW_MINUTES
    natural_ids = False

    def __init__(
        self,
        base_url: str = config.DADDYLIVE_URL,
        fetcher: Optional[PageFetcher] = None,
        extractor: Optional[HeuristicRowExtractor] = None,
        endpoints: Sequence[str] = ENDPOINTS,
        min_content_length: int = config.MIN_CONTENT_LENGTH,
        category: str = DEFAULT_CATEGORY,
    ):
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher
        self.extractor = extractor or HeuristicRowExtractor()
        self.endpoints = tuple(endpoints)
        self.min_content_length = min_content_length
        self.category = category

    def parse_schedule_html(self, html: str, now: dt.datetime) -> Schedule:
        events = self.extractor.extract(parse_html(html), now)
        print(f"[DaddyLive] Found {len(events)} potential matches.", flush=True)
        if not events:
            raise ExtractionEmpty("no rows with a time and a stream link")
        return single_day_schedule(now, self.category, events)

    def fetch_schedule(self, now: Optional[dt.datetime] = None) -> Optional[Schedule]:
        now = now or dt.datetime.now()
        try:
            fetcher = self.fetcher or PageFetcher(self.base_url)
            _path, html = fetcher.first_available(self.endpoints, self.min_content_length, label="DaddyLive")
            schedule = self.parse_schedule_html(html, now)
        except UpstreamUnavailable as exc:
            print(f"[DaddyLive] Could not fetch schedule from any endpoint: {exc.reason}", flush=True)
            return None
        except ExtractionEmpty as exc:
            print(f"[DaddyLive] Parsed HTML but found 0 matches ({exc}).", flush=True)
            return None
        except Exception as exc:
            print(f"[DaddyLive] Critical error fetching schedule: {exc!r}", flush=True)
            return None

        if not schedule_has_events(schedule):
            return None
        return schedule


class DaddyLiveApiSource:
    """Official DaddyLive API. Needs ``DADDYLIVE_API_KEY``."""

    name = "daddylive-api"
    live_window_minutes = config.PRIMARY_LIVE_WINDOW_MINUTES
    natural_ids = False

    def __init__(
        self,
        api_key: str = config.DADDYLIVE_API_KEY,
        base_url: str = config.DADDYLIVE_URL,
        fetcher: Optional[PageFetcher] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _fetcher(self) -> PageFetcher:
        return self.fetcher or PageFetcher(self.base_url, session=requests.Session())

    def _call(self, endpoint: str) -> Optional[object]:
        payload = self._fetcher().get_json(API_PATH, params={"key": self.api_key, "endpoint": endpoint})
        if not isinstance(payload, dict) or not payload.get("success"):
            message = payload.get("error") or payload.get("message") if isinstance(payload, dict) else None
            print(f"[DaddyLiveAPI] {endpoint} call unsuccessful: {message or 'unexpected payload'}", flush=True)
            return None
        return payload.get("data")

    def fetch_schedule(self, now: Optional[dt.datetime] = None) -> Optional[Schedule]:
        if not self.configured:
            print("[DaddyLiveAPI] No API key configured; skipping.", flush=True)
            return None
        try:
            data = self._call("schedule")
        except UpstreamUnavailable as exc:
            print(f"[DaddyLiveAPI] Schedule request failed: {exc.reason}", flush=True)
            return None
        except Exception as exc:
            print(f"[DaddyLiveAPI] Schedule request error: {exc!r}", flush=True)
            return None

        schedule = schedule_from_dict(data)
        if not schedule_has_events(schedule):
            return None
        print(f"[DaddyLiveAPI] Loaded {count_events(schedule)} events.", flush=True)
        return schedule

    def fetch_channels(self) -> Optional[List[Channel]]:
        if not self.configured:
            return None
        try:
            data = self._call("channels")
        except UpstreamUnavailable as exc:
            print(f"[DaddyLiveAPI] Channels request failed: {exc.reason}", flush=True)
            return None
        except Exception as exc:
            print(f"[DaddyLiveAPI] Channels request error: {exc!r}", flush=True)
            return None
        if not isinstance(data, list):
            return None
        channels = []
        for item in data:
            channel = channel_from_dict(item)
            if channel is not None:
                channels.append(replace(channel, logo_url=logo_url(channel.logo_url, self.base_url)))
        return channels or None


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape the live schedule from DaddyLive.")
    parser.add_argument("--output", type=str, default="schedule_daddylive.json", help="Output JSON path.")
    parser.add_argument("--api", action="store_true", help="Use the official API instead of scraping.")
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    source = DaddyLiveApiSource() if args.api else DaddyLiveSource()
    schedule = source.fetch_schedule()
    if schedule is None:
        print(f"[DaddyLive] No usable schedule from {source.name}.", file=sys.stderr)
        return 1

    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump(build_payload(schedule, source.name), handle, indent=2, ensure_ascii=False)

    print(f"[DaddyLive] Wrote {args.output} ({count_events(schedule)} events)", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
