"""Offline stand-ins for requests sessions and schedule sources."""

from __future__ import annotations

import json
import threading

import requests


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400


class FakeSession:
    """Serves canned bodies by absolute URL; unknown URLs are 404.

    A route value may be a string (200), a ``(status, body)`` pair, or an
    exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, params=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404, "not found")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            return FakeResponse(*route)
        if not isinstance(route, str):
            return FakeResponse(200, json.dumps(route))
        return FakeResponse(200, route)

    def called_urls(self):
        return [call["url"] for call in self.calls]


def connection_error(message="connection refused"):
    return requests.ConnectionError(message)


class StaticSource:
    """Schedule source returning a fixed value, or raising a fixed error."""

    def __init__(self, name, schedule=None, error=None, live_window_minutes=120, natural_ids=False):
        self.name = name
        self.schedule = schedule
        self.error = error
        self.live_window_minutes = live_window_minutes
        self.natural_ids = natural_ids
        self.calls = 0

    def fetch_schedule(self, now=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.schedule


class StaticResolver:
    """Second-hop owner returning a fixed URL for every slug."""

    def __init__(self, url=None, error=None):
        self.url = url
        self.error = error
        self.slugs = []

    def resolve_stream(self, slug):
        self.slugs.append(slug)
        if self.error is not None:
            raise self.error
        return self.url
