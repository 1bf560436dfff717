"""Fetch layer shared by every adapter and second-hop resolver."""

from __future__ import annotations

import json
import time
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import urljoin

import cloudscraper
import requests
from bs4 import BeautifulSoup
from bs4 import FeatureNotFound

from footgoal import config
from footgoal.errors import UpstreamUnavailable


CHALLENGE_MARKERS = ("cf-chl", "attention required")

_PARSER = "lxml"


def parse_html(html: str) -> BeautifulSoup:
    global _PARSER
    try:
        return BeautifulSoup(html, _PARSER)
    except FeatureNotFound:
        _PARSER = "html.parser"
        return BeautifulSoup(html, _PARSER)


def create_browser_session() -> requests.Session:
    return cloudscraper.create_scraper(
        browser={"browser": "chrome", "platform": "windows", "mobile": False}
    )


def dump_html(html: str, label: str) -> None:
    print(f"[Debug] HTML dump ({label}): length {len(html or '')}", flush=True)


def is_challenge_page(text: str) -> bool:
    lowered = (text or "")[:20000].lower()
    return any(marker in lowered for marker in CHALLENGE_MARKERS)


class PageFetcher:
    """GETs pages from one provider with fixed browser headers and a hard timeout.

    Every failure surfaces as ``UpstreamUnavailable`` so callers can move on
    to the next endpoint or tier.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = config.FETCH_TIMEOUT,
        retries: int = 1,
        backoff_seconds: float = 0.5,
        referer: Optional[str] = None,
        user_agent: str = config.USER_AGENT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else create_browser_session()
        self.timeout = timeout
        self.retries = max(1, retries)
        self.backoff_seconds = max(0.0, backoff_seconds)
        self.referer = referer if referer is not None else self.base_url
        self.user_agent = user_agent

    def absolute(self, path_or_url: str) -> str:
        return urljoin(self.base_url + "/", path_or_url)

    def headers(self, accept: str = config.HTML_ACCEPT) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent, "Accept": accept}
        if self.referer:
            headers["Referer"] = self.referer
        return headers

    def get_text(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        min_length: int = 0,
        accept: str = config.HTML_ACCEPT,
    ) -> str:
        target = self.absolute(url)
        last_reason = "no attempt made"
        for attempt in range(1, self.retries + 1):
            try:
                response = self.session.get(
                    target,
                    params=params,
                    headers=self.headers(accept),
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                last_reason = str(exc) or exc.__class__.__name__
            else:
                if not response.ok:
                    last_reason = f"HTTP {response.status_code}"
                else:
                    text = response.text or ""
                    if is_challenge_page(text):
                        last_reason = "browser challenge page"
                    elif len(text) < min_length:
                        last_reason = f"only {len(text)} bytes (need {min_length})"
                    else:
                        return text
            if attempt < self.retries:
                time.sleep(self.backoff_seconds * attempt)
        raise UpstreamUnavailable(target, last_reason)

    def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> object:
        body = self.get_text(url, params=params, accept="application/json")
        try:
            return json.loads(body)
        except ValueError as exc:
            raise UpstreamUnavailable(self.absolute(url), f"invalid JSON: {exc}") from exc

    def first_available(self, paths: Iterable[str], min_length: int, label: str = "HTTP") -> Tuple[str, str]:
        """Return ``(path, body)`` for the first endpoint that serves a real page."""
        failures = []
        for path in paths:
            print(f"[{label}] Trying endpoint: {path}", flush=True)
            try:
                body = self.get_text(path, min_length=min_length)
            except UpstreamUnavailable as exc:
                print(f"[{label}] Failed {path}: {exc.reason}", flush=True)
                failures.append(f"{path} ({exc.reason})")
                continue
            print(f"[{label}] Fetched {len(body)} bytes from {path}", flush=True)
            return path, body
        raise UpstreamUnavailable(self.base_url, "; ".join(failures) or "no endpoints configured")
