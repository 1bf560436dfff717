"""Failure kinds shared by adapters, the resolver and the HTTP endpoint."""


class FootgoalError(Exception):
    """Base class for every failure raised inside footgoal."""


class UpstreamUnavailable(FootgoalError):
    """Network error, non-success status, or an undersized interstitial page."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractionEmpty(FootgoalError):
    """A page was fetched but no events could be recovered from it."""


class MalformedIdentifier(FootgoalError):
    """A stream identifier is missing or cannot be decoded."""


class ResolutionNotFound(FootgoalError):
    """A second-hop page was fetched but held no playable stream."""
