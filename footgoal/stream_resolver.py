"""Turn an opaque channel id into an embeddable URL.

``StreamResolver.resolve`` never raises. Failures come back as a
``Resolution`` carrying a ``MalformedIdentifier`` or ``ResolutionNotFound``
for the HTTP layer to translate into a status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from footgoal import config
from footgoal.errors import FootgoalError, MalformedIdentifier, ResolutionNotFound
from footgoal.scrape_schedule_daddylive import PLAYER_FOLDERS, stream_url, stream_url_candidates
from footgoal.scrape_schedule_sportwatch import SportWatchSource
from footgoal.scrape_schedule_sportyhunter import SportyHunterSource
from footgoal.stream_ref import (
    SPORTWATCH,
    SPORTYHUNTER,
    DirectRef,
    EncodedUrlRef,
    SecondHopRef,
    StreamRef,
    UnresolvableRef,
    parse_stream_ref,
)


@dataclass(frozen=True)
class Resolution:
    channel_id: str
    url: Optional[str] = None
    candidates: Tuple[str, ...] = ()
    error: Optional[FootgoalError] = None

    @property
    def ok(self) -> bool:
        return self.url is not None and self.error is None


class StreamResolver:
    def __init__(
        self,
        direct_base_url: str = config.DADDYLIVE_URL,
        second_hop: Optional[Dict[str, object]] = None,
    ):
        self.direct_base_url = direct_base_url.rstrip("/")
        if second_hop is None:
            second_hop = {SPORTWATCH: SportWatchSource(), SPORTYHUNTER: SportyHunterSource()}
        self.second_hop = second_hop

    def resolve(self, channel_id: object, folder: str = PLAYER_FOLDERS[0]) -> Resolution:
        raw = str(channel_id or "").strip()
        try:
            return self.resolve_ref(raw, parse_stream_ref(raw), folder)
        except Exception as exc:
            print(f"[Resolver] Unexpected error resolving {raw!r}: {exc!r}", flush=True)
            return Resolution(raw, error=ResolutionNotFound(f"stream lookup failed for {raw}"))

    def resolve_ref(self, raw: str, ref: StreamRef, folder: str = PLAYER_FOLDERS[0]) -> Resolution:
        if isinstance(ref, UnresolvableRef):
            return Resolution(raw, error=MalformedIdentifier(ref.reason))

        if isinstance(ref, DirectRef):
            candidates = tuple(stream_url_candidates(ref.channel_id, self.direct_base_url))
            return Resolution(raw, url=stream_url(ref.channel_id, folder, self.direct_base_url), candidates=candidates)

        if isinstance(ref, EncodedUrlRef):
            return Resolution(raw, url=ref.url, candidates=(ref.url,))

        if isinstance(ref, SecondHopRef):
            owner = self.second_hop.get(ref.provider)
            if owner is None:
                return Resolution(raw, error=MalformedIdentifier(f"no resolver for provider {ref.provider}"))
            url = owner.resolve_stream(ref.slug)
            if not url:
                return Resolution(raw, error=ResolutionNotFound(f"no stream found for {ref.provider} match {ref.slug}"))
            print(f"[Resolver] {ref.provider} {ref.slug} -> {url}", flush=True)
            return Resolution(raw, url=url, candidates=(url,))

        return Resolution(raw, error=MalformedIdentifier("unsupported identifier"))
