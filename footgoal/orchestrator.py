#!/usr/bin/env python3
"""
Fallback orchestration across schedule sources.

Tiers are tried strictly in order and the first one that yields a schedule
with at least one event wins:
  1. DaddyLive listing scrape (primary)
  2. Football feeds: SportWatch, SportsWatcher, SportyHunter (secondary)
  3. Official DaddyLive API, only when DADDYLIVE_API_KEY is set
  4. Synthetic schedule built around the current time

Every source is expected to return None instead of raising; anything that
still escapes is caught here and counted as a failed attempt.
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from footgoal import config
from footgoal.mock_schedule import MOCK_SOURCE, build_mock_schedule, mock_channels
from footgoal.models import Channel, Match, Schedule, ScheduleResult, count_events, schedule_has_events
from footgoal.normalizer import is_football_category, schedule_to_matches, summarize_categories
from footgoal.scrape_schedule_daddylive import DaddyLiveApiSource, DaddyLiveSource
from footgoal.scrape_schedule_sportswatcher import SportsWatcherSource
from footgoal.scrape_schedule_sportwatch import SportWatchSource
from footgoal.scrape_schedule_sportyhunter import SportyHunterSource
from footgoal.text_utils import format_day_label


DEFAULT_CATEGORY = "Soccer"


@dataclass
class Tier:
    label: str
    sources: List[object] = field(default_factory=list)


def build_default_tiers(category: Optional[str], api_source: Optional[DaddyLiveApiSource] = None) -> List[Tier]:
    # The scraped pages only list soccer, so rows keep the Soccer bucket
    # whatever category was requested.
    tiers = [Tier("primary", [DaddyLiveSource(category=DEFAULT_CATEGORY)])]
    if is_football_category(category):
        tiers.append(Tier("secondary", [SportWatchSource(), SportsWatcherSource(), SportyHunterSource()]))
    api_source = api_source or DaddyLiveApiSource()
    if api_source.configured:
        tiers.append(Tier("official-api", [api_source]))
    return tiers


class ScheduleService:
    """In-process schedule interface for the presentation layer."""

    def __init__(
        self,
        tiers: Optional[Sequence[Tier]] = None,
        tier_factory: Callable[[Optional[str]], List[Tier]] = build_default_tiers,
        api_source: Optional[DaddyLiveApiSource] = None,
        mock_factory: Callable[[Optional[dt.datetime]], Schedule] = build_mock_schedule,
    ):
        self.tiers = list(tiers) if tiers is not None else None
        self.tier_factory = tier_factory
        self.api_source = api_source
        self.mock_factory = mock_factory

    def tiers_for(self, category: Optional[str]) -> List[Tier]:
        if self.tiers is not None:
            return self.tiers
        return self.tier_factory(category)

    def fetch(self, category: Optional[str] = None, now: Optional[dt.datetime] = None) -> ScheduleResult:
        now = now or dt.datetime.now()
        attempts: List[str] = []

        for index, tier in enumerate(self.tiers_for(category), start=1):
            for source in tier.sources:
                name = getattr(source, "name", source.__class__.__name__)
                print(f"[Orchestrator] Tier {index} ({tier.label}): trying {name}", flush=True)
                try:
                    schedule = source.fetch_schedule(now=now)
                except Exception as exc:
                    print(f"[Orchestrator] {name} raised {exc!r}; treating as failure.", flush=True)
                    schedule = None

                if not schedule_has_events(schedule):
                    attempts.append(f"{name}: no usable schedule")
                    continue

                attempts.append(f"{name}: {count_events(schedule)} events")
                print(f"[Orchestrator] Using {name} ({count_events(schedule)} events).", flush=True)
                return ScheduleResult(
                    schedule=schedule,
                    source=name,
                    tier=index,
                    live_window_minutes=getattr(source, "live_window_minutes", config.PRIMARY_LIVE_WINDOW_MINUTES),
                    natural_ids=bool(getattr(source, "natural_ids", False)),
                    attempts=attempts,
                )

        print("[Orchestrator] All sources failed. Using mock data.", flush=True)
        return ScheduleResult(
            schedule=self.mock_factory(now),
            source=MOCK_SOURCE,
            tier=len(self.tiers_for(category)) + 1,
            live_window_minutes=config.PRIMARY_LIVE_WINDOW_MINUTES,
            natural_ids=False,
            synthetic=True,
            attempts=attempts,
        )

    def get_schedule(self, category: Optional[str] = None, now: Optional[dt.datetime] = None) -> Schedule:
        return self.fetch(category, now).schedule

    def get_matches(self, category: Optional[str] = DEFAULT_CATEGORY, now: Optional[dt.datetime] = None) -> List[Match]:
        now = now or dt.datetime.now()
        result = self.fetch(category, now)
        return schedule_to_matches(
            result.schedule,
            category=category,
            now=now,
            live_window_minutes=result.live_window_minutes,
            natural_ids=result.natural_ids,
        )

    def get_channels(self) -> List[Channel]:
        api_source = self.api_source or DaddyLiveApiSource()
        channels = api_source.fetch_channels()
        if channels:
            return channels
        print("[Orchestrator] No channel list from the API; using mock channels.", flush=True)
        return mock_channels()


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the schedule through the source fallback chain.")
    parser.add_argument("--category", type=str, default=DEFAULT_CATEGORY, help="Category filter (default: Soccer).")
    parser.add_argument("--output", type=str, default=None, help="Write normalized matches to this JSON path.")
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    service = ScheduleService()
    now = dt.datetime.now()
    result = service.fetch(args.category, now)
    matches = schedule_to_matches(
        result.schedule,
        category=args.category,
        now=now,
        live_window_minutes=result.live_window_minutes,
        natural_ids=result.natural_ids,
    )

    print(f"Source: {result.source} (tier {result.tier})")
    for category in summarize_categories(result.schedule):
        print(f"  {category['name']}: {category['count']} events")
    for match in matches:
        state = "LIVE" if match.is_live else (f"in {match.starts_in}" if match.starts_in else "")
        print(f"  {format_day_label(match.day)} {match.time}  {match.title}  [{match.competition}] {state}")

    if args.output:
        payload = {
            "source": result.source,
            "tier": result.tier,
            "synthetic": result.synthetic,
            "matches": [match.to_dict() for match in matches],
        }
        with open(args.output, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
        print(f"Wrote {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
