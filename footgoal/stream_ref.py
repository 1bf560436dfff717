"""Opaque channel identifiers and their parsed form.

Adapters tag every ``channel_id`` they emit so a later resolution request can
be routed to the owning provider without a lookup table:

    sw-<base64 url>   ready-made embed URL (SportsWatcher)
    sw-<slug>         SportWatch match slug, resolved through SportZone
    sh-<slug>         SportyHunter match slug, resolved from its match page
    <digits>          DaddyLive channel number, substituted into a URL template

``parse_stream_ref`` turns the string into one of the ref classes below once,
at the boundary, and never raises.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlparse


SPORTWATCH_PREFIX = "sw-"
SPORTYHUNTER_PREFIX = "sh-"

SPORTWATCH = "sportwatch"
SPORTYHUNTER = "sportyhunter"

PREFIX_PROVIDERS = {
    SPORTWATCH_PREFIX: SPORTWATCH,
    SPORTYHUNTER_PREFIX: SPORTYHUNTER,
}

DIRECT_ID_RE = re.compile(r"^\d+$")
SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.~-]*$")
BASE64_BODY_RE = re.compile(r"^[A-Za-z0-9+/_-]+={0,2}$")


@dataclass(frozen=True)
class DirectRef:
    channel_id: str


@dataclass(frozen=True)
class EncodedUrlRef:
    url: str


@dataclass(frozen=True)
class SecondHopRef:
    provider: str
    slug: str


@dataclass(frozen=True)
class UnresolvableRef:
    raw: str
    reason: str


StreamRef = Union[DirectRef, EncodedUrlRef, SecondHopRef, UnresolvableRef]


def is_absolute_url(text: object) -> bool:
    value = str(text or "")
    if not value or value != value.strip() or any(ch.isspace() or ord(ch) < 32 for ch in value):
        return False
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def encode_url_id(url: str) -> str:
    body = base64.urlsafe_b64encode(url.encode("utf-8")).rstrip(b"=").decode("ascii")
    return SPORTWATCH_PREFIX + body


def encode_slug_id(provider: str, slug: str) -> str:
    for prefix, owner in PREFIX_PROVIDERS.items():
        if owner == provider:
            return prefix + slug
    raise ValueError(f"Unknown second-hop provider: {provider}")


def decode_base64_text(body: str) -> Optional[str]:
    """Decode standard or URL-safe base64, padded or not; ``None`` on any failure."""
    text = (body or "").strip()
    if not text or not BASE64_BODY_RE.match(text):
        return None
    text = text.rstrip("=").replace("+", "-").replace("/", "_")
    if len(text) % 4 == 1:
        return None
    padded = text + "=" * (-len(text) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return None


def parse_stream_ref(channel_id: object) -> StreamRef:
    raw = str(channel_id or "").strip()
    if not raw:
        return UnresolvableRef(raw, "missing identifier")

    if raw.startswith(SPORTWATCH_PREFIX):
        body = raw[len(SPORTWATCH_PREFIX):]
        decoded = decode_base64_text(body)
        if decoded is not None and is_absolute_url(decoded):
            return EncodedUrlRef(decoded)
        if SLUG_RE.match(body):
            return SecondHopRef(SPORTWATCH, body)
        return UnresolvableRef(raw, "undecodable sw- identifier")

    if raw.startswith(SPORTYHUNTER_PREFIX):
        slug = raw[len(SPORTYHUNTER_PREFIX):]
        if SLUG_RE.match(slug):
            return SecondHopRef(SPORTYHUNTER, slug)
        return UnresolvableRef(raw, "invalid sh- slug")

    if DIRECT_ID_RE.match(raw):
        return DirectRef(raw)

    return UnresolvableRef(raw, "unrecognized identifier format")
