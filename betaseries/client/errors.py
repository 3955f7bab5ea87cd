"""Exception hierarchy for the BetaSeries client.

Every failure the library raises itself derives from `BetaSeriesError`.
Transport failures (`requests.exceptions.RequestException`) are not wrapped
and reach the caller unchanged.

Families:
- ConfigurationError: rejected locally, no request was sent.
- AuthenticationError: the credential exchange was refused.
- ServiceError: the API answered with a non-empty `errors` list.
- NotFoundError: the API answered cleanly but the collection was empty.
- DecodeError: the body was not the JSON shape we expected.
- MissingPayloadError: a single-item envelope came back without its item.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ApiErrorDetail:
    """One (code, text) pair reported in an envelope's `errors` list."""

    code: int
    text: str


class BetaSeriesError(Exception):
    """Base exception for BetaSeries client errors."""


class ConfigurationError(BetaSeriesError):
    """Raised when caller input is rejected before any network call."""


class IdNotSetError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("id not properly set")


class AmbiguousIdError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("no single id used")


class InvalidRatingError(ConfigurationError):
    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid note: {value}")


class InvalidBaseUrlError(ConfigurationError):
    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        super().__init__(f"invalid base url: {base_url!r}")


class _ReportedErrors(BetaSeriesError):
    """Carries the (code, text) pairs the API reported."""

    def __init__(
        self, errors: Iterable[ApiErrorDetail], status_code: int | None = None
    ) -> None:
        self.errors = tuple(errors)
        self.status_code = status_code
        super().__init__("\n".join(self.messages))

    @property
    def codes(self) -> list[int]:
        return [e.code for e in self.errors]

    @property
    def messages(self) -> list[str]:
        return [e.text for e in self.errors]


class AuthenticationError(_ReportedErrors):
    """Raised when /members/auth does not hand out a token."""


class ServiceError(_ReportedErrors):
    """Raised when a decoded envelope has a non-empty `errors` list."""


class NotFoundError(BetaSeriesError):
    """Raised when the call succeeded but the expected collection is empty."""

    message = "nothing found"

    def __init__(self) -> None:
        super().__init__(self.message)


class NoShowsFoundError(NotFoundError):
    message = "no shows found"


class NoCharactersFoundError(NotFoundError):
    message = "no characters found"


class NoVideosFoundError(NotFoundError):
    message = "no videos found"


class NoEpisodesFoundError(NotFoundError):
    message = "no episodes found"


class DecodeError(BetaSeriesError):
    """Raised when a response body cannot be decoded into its envelope."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"malformed response (status={status_code}): {reason}")


class MissingPayloadError(BetaSeriesError):
    """Raised when a single-item envelope decodes cleanly but holds no item."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"response has no {field!r} payload")
