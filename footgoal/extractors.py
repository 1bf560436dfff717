"""Extraction strategies that turn a fetched page into raw Event records.

Each adapter composes one or more of these. When a provider changes its
markup only the matching extractor needs replacing.
"""

from __future__ import annotations

import datetime as dt
import json
import re
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Sequence, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from footgoal import config
from footgoal.models import Channel, Event, make_channel
from footgoal.normalizer import dedupe_events
from footgoal.text_utils import TIME_RE, format_clock, normalize_whitespace


NUMERIC_ID_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"stream-(\d+)\.php", re.IGNORECASE),
    re.compile(r"[?&]id=(\d+)", re.IGNORECASE),
    re.compile(r"/(\d+)\.php", re.IGNORECASE),
)
NOISE_WORDS_RE = re.compile(r"\b(?:live|stream)\b", re.IGNORECASE)
EDGE_SEPARATORS_RE = re.compile(r"^[\s\-–—:|,]+|[\s\-–—:|,]+$")
BOILERPLATE_MARKERS = ("24/7", "Channels")
STRICT_TIME_RE = re.compile(r"(\d{2}:\d{2})")
SLUG_TITLE_PREFIX = "slg"


def flatten_text(node: Tag) -> str:
    return normalize_whitespace(node.get_text(" ", strip=True))


def href_tail(href: object) -> str:
    path = urlparse(str(href or "").strip()).path
    parts = [part for part in path.split("/") if part]
    return parts[-1] if parts else ""


def extract_link_id(
    href: object,
    patterns: Sequence[Pattern[str]] = NUMERIC_ID_PATTERNS,
    slug_fallback: bool = False,
) -> Optional[str]:
    text = str(href or "").strip()
    if not text:
        return None
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    if slug_fallback:
        return href_tail(text) or None
    return None


def clean_title(text: str, time_text: str, strip_texts: Iterable[str] = ()) -> str:
    title = text.replace(time_text, " ", 1) if time_text else text
    for value in strip_texts:
        value = normalize_whitespace(value)
        if value:
            title = title.replace(value, " ")
    title = NOISE_WORDS_RE.sub(" ", title)
    title = normalize_whitespace(title)
    return EDGE_SEPARATORS_RE.sub("", title)


def is_boilerplate_title(title: str) -> bool:
    return any(marker in title for marker in BOILERPLATE_MARKERS)


class HeuristicRowExtractor:
    """Scan block elements for short rows holding a clock time and stream links."""

    name = "heuristic-rows"
    BLOCK_TAGS = ["div", "p", "li", "tr"]

    def __init__(
        self,
        id_prefix: str = "",
        id_patterns: Sequence[Pattern[str]] = NUMERIC_ID_PATTERNS,
        slug_fallback: bool = False,
        min_text_length: int = config.MIN_ROW_TEXT_LENGTH,
        max_text_length: int = config.MAX_ROW_TEXT_LENGTH,
        min_title_length: int = config.MIN_TITLE_LENGTH,
        default_channel_name: str = "Main Stream",
    ):
        self.id_prefix = id_prefix
        self.id_patterns = tuple(id_patterns)
        self.slug_fallback = slug_fallback
        self.min_text_length = min_text_length
        self.max_text_length = max_text_length
        self.min_title_length = min_title_length
        self.default_channel_name = default_channel_name

    def _channels(self, anchors: List[Tag]) -> List[Channel]:
        channels: List[Channel] = []
        seen = set()
        for anchor in anchors:
            link_id = extract_link_id(anchor.get("href"), self.id_patterns, self.slug_fallback)
            if not link_id:
                continue
            channel_id = self.id_prefix + link_id
            if channel_id in seen:
                continue
            seen.add(channel_id)
            name = flatten_text(anchor) or self.default_channel_name
            channels.append(make_channel(channel_id, name=name))
        return channels

    def parse_row(self, node: Tag) -> Optional[Event]:
        text = flatten_text(node)
        if len(text) > self.max_text_length or len(text) < self.min_text_length:
            return None
        time_matches = list(TIME_RE.finditer(text))
        if len(time_matches) != 1:
            # A container around several rows carries one time per row.
            return None
        time_match = time_matches[0]

        anchors = [anchor for anchor in node.find_all("a") if isinstance(anchor, Tag)]
        channels = self._channels(anchors)
        if not channels:
            return None

        link_texts = [flatten_text(anchor) for anchor in anchors]
        title = clean_title(text, time_match.group(0), link_texts)
        if not title:
            # The link text was the title itself.
            title = clean_title(text, time_match.group(0))
        if len(title) < self.min_title_length or is_boilerplate_title(title):
            return None

        return Event(time=time_match.group(0), event=title, channels=tuple(channels))

    def extract(self, soup: BeautifulSoup, now: Optional[dt.datetime] = None) -> List[Event]:
        events = []
        for node in soup.find_all(self.BLOCK_TAGS):
            event = self.parse_row(node)
            if event is not None:
                events.append(event)
        return dedupe_events(events)


def walk_next_data(payload: object) -> List[Dict]:
    """Collect match records from the known ``__NEXT_DATA__`` object shapes."""
    if not isinstance(payload, dict):
        return []
    props = payload.get("props")
    page_props = props.get("pageProps") if isinstance(props, dict) else None
    if not isinstance(page_props, dict):
        return []

    direct = page_props.get("matches")
    if isinstance(direct, list) and direct:
        return [item for item in direct if isinstance(item, dict)]

    records: List[Dict] = []
    dehydrated = page_props.get("dehydratedState")
    queries = dehydrated.get("queries") if isinstance(dehydrated, dict) else None
    if not isinstance(queries, list):
        return records
    for query in queries:
        state = query.get("state") if isinstance(query, dict) else None
        data = state.get("data") if isinstance(state, dict) else None
        if isinstance(data, dict) and isinstance(data.get("matches"), list):
            records.extend(item for item in data["matches"] if isinstance(item, dict))
        elif isinstance(data, list):
            records.extend(item for item in data if isinstance(item, dict))
    return records


class NextDataExtractor:
    """Read match records from an embedded JSON script tag.

    ``extract`` returns ``None`` when the script is missing, unparseable, or
    holds no known shape, so the caller can fall through to HTML scraping.
    """

    name = "next-data"

    def __init__(
        self,
        record_to_event: Callable[[Dict, Optional[dt.datetime]], Optional[Event]],
        script_id: str = "__NEXT_DATA__",
        walker: Callable[[object], List[Dict]] = walk_next_data,
    ):
        self.record_to_event = record_to_event
        self.script_id = script_id
        self.walker = walker

    def load_payload(self, soup: BeautifulSoup) -> Optional[object]:
        script = soup.find("script", id=self.script_id)
        if script is None:
            print(f"[Extractor] #{self.script_id} not found", flush=True)
            return None
        raw = script.string if script.string is not None else script.get_text()
        try:
            return json.loads(raw or "")
        except ValueError as exc:
            print(f"[Extractor] Failed to parse #{self.script_id} JSON: {exc}", flush=True)
            return None

    def extract(self, soup: BeautifulSoup, now: Optional[dt.datetime] = None) -> Optional[List[Event]]:
        payload = self.load_payload(soup)
        if payload is None:
            return None
        records = self.walker(payload)
        if not records:
            print(f"[Extractor] No matches found in #{self.script_id} data", flush=True)
            return None
        events = []
        for record in records:
            event = self.record_to_event(record, now)
            if event is not None:
                events.append(event)
        return events or None


class CardLinkExtractor:
    """Anchor cards laid out as ``<a class="card-link"><span>Sport</span><span>Title</span>...``."""

    name = "card-links"
    TITLE_PREFIX_RE = re.compile(r"^(?:football|soccer)\s*", re.IGNORECASE)
    TITLE_ARTIFACT_RE = re.compile(r"otball", re.IGNORECASE)
    TITLE_SUFFIX_RE = re.compile(r"(?:\s*(?:\d{2}:\d{2}|LIVE))+$")

    def __init__(self, id_prefix: str, sport: str = "football", selector: str = "a.card-link"):
        self.id_prefix = id_prefix
        self.sport = sport.casefold()
        self.selector = selector

    def clean_card_title(self, raw: str) -> str:
        title = self.TITLE_PREFIX_RE.sub("", normalize_whitespace(raw))
        title = self.TITLE_ARTIFACT_RE.sub("", title, count=1)
        title = self.TITLE_SUFFIX_RE.sub("", title.strip())
        return normalize_whitespace(title)

    def card_time(self, card: Tag, now: dt.datetime) -> str:
        divs = card.find_all("div")
        time_text = ""
        if len(divs) > 1:
            time_text = normalize_whitespace(" ".join(span.get_text(" ", strip=True) for span in divs[1].find_all("span")))
        if time_text.upper() == "LIVE" or not STRICT_TIME_RE.search(time_text):
            return format_clock(now)
        return STRICT_TIME_RE.search(time_text).group(1)

    def parse_card(self, card: Tag, now: dt.datetime) -> Optional[Event]:
        href = normalize_whitespace(card.get("href"))
        if not href:
            return None

        spans = card.find_all("span")
        sport = ""
        raw_title = ""
        if len(spans) >= 2:
            sport = normalize_whitespace(spans[0].get_text(" ", strip=True))
            raw_title = normalize_whitespace(spans[1].get_text(" ", strip=True))
        else:
            full_text = flatten_text(card)
            if self.sport in full_text.casefold():
                sport = self.sport
                raw_title = re.sub(re.escape(self.sport), "", full_text, count=1, flags=re.IGNORECASE)
        if sport.casefold() != self.sport:
            return None

        slug = href.rstrip("/").split("/")[-1]
        title = self.clean_card_title(raw_title)
        if not title or not slug:
            return None
        return Event(
            time=self.card_time(card, now),
            event=title,
            channels=(make_channel(self.id_prefix + slug),),
        )

    def extract(self, soup: BeautifulSoup, now: Optional[dt.datetime] = None) -> List[Event]:
        now = now or dt.datetime.now()
        events = []
        for card in soup.select(self.selector):
            if not isinstance(card, Tag):
                continue
            event = self.parse_card(card, now)
            if event is not None:
                events.append(event)
        return events


def title_from_match_slug(slug: str) -> str:
    """``slg-Brighton-and-Hove-Albion-vs-Everton-3duPQw`` -> ``Brighton and Hove Albion vs Everton``."""
    parts = slug.split("-")
    if len(parts) <= 2:
        return ""
    if parts[0] == SLUG_TITLE_PREFIX:
        parts = parts[1:]
    return " ".join(parts[:-1])


class SlugRowExtractor:
    """Broad fallback: divs with a clock time and an image, titled from their link slug."""

    name = "slug-rows"

    def __init__(self, id_prefix: str, min_title_length: int = 5):
        self.id_prefix = id_prefix
        self.min_title_length = min_title_length

    @staticmethod
    def row_href(node: Tag) -> str:
        anchor = node.find("a", href=True)
        if anchor is not None:
            return normalize_whitespace(anchor.get("href"))
        if node.name == "a" and node.get("href"):
            return normalize_whitespace(node.get("href"))
        parent = node.find_parent("a", href=True)
        if parent is not None:
            return normalize_whitespace(parent.get("href"))
        return ""

    def parse_row(self, node: Tag) -> Optional[Event]:
        text = flatten_text(node)
        time_match = STRICT_TIME_RE.search(text)
        if not time_match:
            return None
        slug = href_tail(self.row_href(node))
        if not slug:
            return None
        title = title_from_match_slug(slug)
        if len(title) < self.min_title_length:
            title = clean_title(text, time_match.group(1))
        if not title:
            return None
        return Event(
            time=time_match.group(1),
            event=title,
            channels=(make_channel(self.id_prefix + slug),),
        )

    def extract(self, soup: BeautifulSoup, now: Optional[dt.datetime] = None) -> List[Event]:
        candidates = [
            node
            for node in soup.find_all("div")
            if STRICT_TIME_RE.search(node.get_text(" ", strip=True)) and node.find("img") is not None
        ]
        print(f"[Extractor] Slug fallback found {len(candidates)} row candidates.", flush=True)
        events = []
        for node in candidates:
            event = self.parse_row(node)
            if event is not None:
                events.append(event)
        return dedupe_events(events)
