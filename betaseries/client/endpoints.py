"""
Declarative request building for BetaSeries endpoints.

Each operation is described by an `Endpoint` (HTTP verb, path, identifier
policy). `build_call` turns a descriptor plus caller options into a
`PreparedCall`. It is a pure function: identifiers are resolved and options
validated here, so a bad call fails before anything touches the network.

All parameters travel in the query string, never in a request body.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable
from urllib.parse import urlencode

from betaseries.client.errors import AmbiguousIdError, IdNotSetError

MIN_NOTE = 1
MAX_NOTE = 5

SEARCH_PAGE_SIZE = 100

DEFAULT_ORDER = "popularity"
SEARCH_ORDERS = ("title", "popularity", "followers")
LIST_ORDERS = ("alphabetical", "popularity", "followers")


class IdPolicy(Enum):
    """How an endpoint picks the show identifier it sends."""

    NONE = "none"
    LOCAL = "local"
    LOCAL_OR_TVDB = "local_or_tvdb"
    LOCAL_OR_TVDB_OR_IMDB = "local_or_tvdb_or_imdb"
    EXCLUSIVE = "exclusive"


PARAM_LOCAL_ID = "id"
PARAM_TVDB_ID = "thetvdb_id"
PARAM_IMDB_ID = "imdb_id"


@dataclass(frozen=True)
class ShowIds:
    """
    The identifiers a caller may supply for one show (or episode).

    Zero / empty means "not supplied".
    """

    show_id: int = 0
    thetvdb_id: int = 0
    imdb_id: str = ""

    def resolve(self, policy: IdPolicy) -> tuple[str, str] | None:
        """Picks the single (param, value) pair to send under `policy`.

        Preference: local id, then TheTVDB id, then (when the policy allows
        it) the IMDb id.

        Raises:
            AmbiguousIdError: EXCLUSIVE policy and both numeric ids are set.
            IdNotSetError: No usable identifier for the policy.
        """
        if policy is IdPolicy.NONE:
            return None

        if policy is IdPolicy.EXCLUSIVE and self.show_id > 0 and self.thetvdb_id > 0:
            raise AmbiguousIdError()

        if self.show_id > 0:
            return PARAM_LOCAL_ID, str(self.show_id)
        if policy is not IdPolicy.LOCAL and self.thetvdb_id > 0:
            return PARAM_TVDB_ID, str(self.thetvdb_id)
        if policy is IdPolicy.LOCAL_OR_TVDB_OR_IMDB and self.imdb_id:
            return PARAM_IMDB_ID, self.imdb_id

        raise IdNotSetError()


@dataclass(frozen=True)
class Endpoint:
    method: str
    path: str
    id_policy: IdPolicy = IdPolicy.NONE


@dataclass(frozen=True)
class PreparedCall:
    method: str
    url: str


class QueryBuilder:
    """
    Insertion-ordered query string.

    Numeric options use a negative sentinel for "omit"; string options are
    omitted when empty; flags are sent as "true" only when set.
    """

    def __init__(self) -> None:
        self._params: dict[str, str] = {}

    def set(self, name: str, value: object) -> "QueryBuilder":
        self._params[name] = str(value)
        return self

    def positive(self, name: str, value: int) -> "QueryBuilder":
        if value > 0:
            self.set(name, value)
        return self

    def non_negative(self, name: str, value: int) -> "QueryBuilder":
        if value >= 0:
            self.set(name, value)
        return self

    def text(self, name: str, value: str) -> "QueryBuilder":
        if value:
            self.set(name, value)
        return self

    def flag(self, name: str, value: bool) -> "QueryBuilder":
        if value:
            self.set(name, "true")
        return self

    def choice(
        self, name: str, value: str, allowed: Iterable[str], default: str
    ) -> "QueryBuilder":
        return self.set(name, value if value in allowed else default)

    def items(self) -> list[tuple[str, str]]:
        return list(self._params.items())


def build_call(
    base_url: str,
    endpoint: Endpoint,
    query: QueryBuilder | None = None,
    ids: ShowIds | None = None,
) -> PreparedCall:
    """Builds the method and full URL for one call.

    The resolved identifier comes first in the query, followed by the
    endpoint options in the order they were added.
    """
    pairs: list[tuple[str, str]] = []

    resolved = (ids or ShowIds()).resolve(endpoint.id_policy)
    if resolved is not None:
        pairs.append(resolved)

    if query is not None:
        pairs.extend(query.items())

    url = f"{base_url.rstrip('/')}{endpoint.path}"
    if pairs:
        url = f"{url}?{urlencode(pairs)}"

    return PreparedCall(method=endpoint.method, url=url)


# --- Endpoint descriptors ---

MEMBERS_AUTH = Endpoint("POST", "/members/auth")

SHOWS_SEARCH = Endpoint("GET", "/shows/search")
SHOWS_RANDOM = Endpoint("GET", "/shows/random")
SHOWS_LIST = Endpoint("GET", "/shows/list")
SHOWS_FAVORITES = Endpoint("GET", "/shows/favorites")

SHOW_FAVORITE = Endpoint("POST", "/shows/favorite", IdPolicy.LOCAL)
SHOW_FAVORITE_REMOVE = Endpoint("DELETE", "/shows/favorite", IdPolicy.LOCAL)

SHOWS_SIMILARS = Endpoint("GET", "/shows/similars", IdPolicy.EXCLUSIVE)
SHOWS_CHARACTERS = Endpoint("GET", "/shows/characters", IdPolicy.LOCAL_OR_TVDB)
SHOWS_VIDEOS = Endpoint("GET", "/shows/videos", IdPolicy.EXCLUSIVE)
SHOWS_EPISODES = Endpoint("GET", "/shows/episodes", IdPolicy.LOCAL_OR_TVDB)

SHOW_DISPLAY = Endpoint("GET", "/shows/display", IdPolicy.LOCAL_OR_TVDB_OR_IMDB)
SHOW_ADD = Endpoint("POST", "/shows/show", IdPolicy.LOCAL_OR_TVDB_OR_IMDB)
SHOW_REMOVE = Endpoint("DELETE", "/shows/show", IdPolicy.LOCAL_OR_TVDB_OR_IMDB)

SHOW_ARCHIVE = Endpoint("POST", "/shows/archive", IdPolicy.LOCAL_OR_TVDB)
SHOW_NOT_ARCHIVE = Endpoint("DELETE", "/shows/archive", IdPolicy.LOCAL_OR_TVDB)

SHOW_NOTE = Endpoint("POST", "/shows/note", IdPolicy.LOCAL_OR_TVDB)
SHOW_NOTE_REMOVE = Endpoint("DELETE", "/shows/note", IdPolicy.LOCAL_OR_TVDB)

# episodes/list takes every show identifier as an independent filter
EPISODES_LIST = Endpoint("GET", "/episodes/list")

EPISODE_DOWNLOADED = Endpoint("POST", "/episodes/downloaded", IdPolicy.LOCAL)
EPISODE_NOT_DOWNLOADED = Endpoint("DELETE", "/episodes/downloaded", IdPolicy.LOCAL)
