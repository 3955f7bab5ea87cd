"""Thin client for the BetaSeries REST API.

Every operation follows the same path: build the call (pure, validates
identifiers and options), send it through the session, decode the envelope
and return its payload.
"""

from __future__ import annotations

import logging

import requests

from betaseries.client import endpoints as ep
from betaseries.client.decode import E, decode
from betaseries.client.endpoints import (
    DEFAULT_ORDER,
    LIST_ORDERS,
    MAX_NOTE,
    MIN_NOTE,
    SEARCH_ORDERS,
    SEARCH_PAGE_SIZE,
    Endpoint,
    QueryBuilder,
    ShowIds,
    build_call,
)
from betaseries.client.errors import InvalidRatingError
from betaseries.client.models import (
    Character,
    CharactersEnvelope,
    Episode,
    EpisodeItemEnvelope,
    EpisodesEnvelope,
    Show,
    ShowItemEnvelope,
    ShowListEnvelope,
    ShowsEnvelope,
    Similar,
    SimilarsEnvelope,
    Video,
    VideosEnvelope,
)
from betaseries.client.session import BetaSeriesSession
from betaseries.config.betaseries_settings import BetaSeriesSettings

logger = logging.getLogger(__name__)


class BetaSeriesClient:
    """Client for the BetaSeries shows and episodes endpoints.

    Attributes:
        session (BetaSeriesSession): Carries credentials and the transport.

    Numeric options use a negative value to mean "not set"; string options
    are omitted when empty.
    """

    def __init__(self, session: BetaSeriesSession):
        self.session = session
        logger.info(
            "BetaSeriesClient initialized with base_url=%s authenticated=%s",
            session.base_url,
            session.is_authenticated,
        )

    @classmethod
    def authenticate(
        cls, api_key: str, login: str = "", password: str = "", **kwargs
    ) -> "BetaSeriesClient":
        return cls(BetaSeriesSession.authenticate(api_key, login, password, **kwargs))

    @classmethod
    def from_settings(
        cls, settings: BetaSeriesSettings, http: requests.Session | None = None
    ) -> "BetaSeriesClient":
        """Builds a client from loaded settings, authenticating if possible."""
        return cls.authenticate(
            settings.api_key,
            settings.login,
            settings.password,
            base_url=settings.base_url,
            version=settings.api_version,
            timeout=settings.timeout,
            http=http,
        )

    def _call(
        self,
        endpoint: Endpoint,
        envelope_cls: type[E],
        query: QueryBuilder | None = None,
        ids: ShowIds | None = None,
    ) -> E:
        call = build_call(self.session.base_url, endpoint, query, ids)
        return decode(envelope_cls, self.session.send(call))

    # --- Shows: catalogue ---

    def shows_search(
        self, query: str, order: str = DEFAULT_ORDER, summary: bool = False
    ) -> list[Show]:
        """Searches shows by title, at most 100 results.

        `order` is one of title, popularity, followers; anything else falls
        back to popularity.
        """
        q = (
            QueryBuilder()
            .set("title", query.lower())
            .set("nbpp", SEARCH_PAGE_SIZE)
            .choice("order", order, SEARCH_ORDERS, DEFAULT_ORDER)
            .flag("summary", summary)
        )
        return self._call(ep.SHOWS_SEARCH, ShowsEnvelope, q).shows

    def shows_random(self, num: int = -1, summary: bool = False) -> list[Show]:
        q = QueryBuilder().positive("nb", num).flag("summary", summary)
        return self._call(ep.SHOWS_RANDOM, ShowsEnvelope, q).shows

    def shows_list(
        self,
        since: str = "",
        starting: str = "",
        order: str = DEFAULT_ORDER,
        start: int = -1,
        limit: int = -1,
    ) -> list[Show]:
        """Lists the catalogue.

        Args:
            since: Only shows updated since this UNIX timestamp.
            starting: Only shows whose title begins with this string.
            order: alphabetical, popularity or followers.
            start: Show index to begin the listing with.
            limit: Maximum number of shows returned.
        """
        q = (
            QueryBuilder()
            .choice("order", order, LIST_ORDERS, DEFAULT_ORDER)
            .text("since", since)
            .text("starting", starting)
            .positive("start", start)
            .positive("limit", limit)
        )
        envelope = self._call(ep.SHOWS_LIST, ShowListEnvelope, q)
        logger.debug(
            "BETASERIES_SHOWS_LIST page=%d total=%s", len(envelope.shows), envelope.total
        )
        return envelope.shows

    def shows_favorites(self, user_id: int = 0) -> list[Show]:
        """Favorite shows of `user_id`, or of the authenticated member."""
        q = QueryBuilder().positive("id", user_id)
        return self._call(ep.SHOWS_FAVORITES, ShowsEnvelope, q).shows

    def shows_similars(
        self, show_id: int = 0, thetvdb_id: int = 0, details: bool = False
    ) -> list[Similar]:
        q = QueryBuilder().flag("details", details)
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOWS_SIMILARS, SimilarsEnvelope, q, ids).similars

    def shows_characters(self, show_id: int = 0, thetvdb_id: int = 0) -> list[Character]:
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOWS_CHARACTERS, CharactersEnvelope, ids=ids).characters

    def shows_videos(self, show_id: int = 0, thetvdb_id: int = 0) -> list[Video]:
        """Videos added by members for a show.

        Pass exactly one of the two ids; both raises AmbiguousIdError.
        """
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOWS_VIDEOS, VideosEnvelope, ids=ids).videos

    def shows_episodes(
        self,
        show_id: int = 0,
        thetvdb_id: int = 0,
        season: int = -1,
        episode: int = -1,
        subtitles: bool = False,
    ) -> list[Episode]:
        q = QueryBuilder()
        if season > 0:
            q.set("season", season).positive("episode", episode)
        q.flag("subtitles", subtitles)
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOWS_EPISODES, EpisodesEnvelope, q, ids).episodes

    # --- Shows: member account ---

    def show_display(
        self, show_id: int = 0, thetvdb_id: int = 0, imdb_id: str = ""
    ) -> Show:
        ids = ShowIds(show_id, thetvdb_id, imdb_id)
        return self._call(ep.SHOW_DISPLAY, ShowItemEnvelope, ids=ids).show

    def show_add(
        self,
        show_id: int = 0,
        thetvdb_id: int = 0,
        imdb_id: str = "",
        last_episode_id: int = -1,
    ) -> Show:
        """Adds a show to the member's account.

        With `last_episode_id`, every episode up to that one is marked seen.
        """
        q = QueryBuilder().positive("episode_id", last_episode_id)
        ids = ShowIds(show_id, thetvdb_id, imdb_id)
        return self._call(ep.SHOW_ADD, ShowItemEnvelope, q, ids).show

    def show_remove(
        self, show_id: int = 0, thetvdb_id: int = 0, imdb_id: str = ""
    ) -> Show:
        ids = ShowIds(show_id, thetvdb_id, imdb_id)
        return self._call(ep.SHOW_REMOVE, ShowItemEnvelope, ids=ids).show

    def show_archive(self, show_id: int = 0, thetvdb_id: int = 0) -> Show:
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOW_ARCHIVE, ShowItemEnvelope, ids=ids).show

    def show_not_archive(self, show_id: int = 0, thetvdb_id: int = 0) -> Show:
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOW_NOT_ARCHIVE, ShowItemEnvelope, ids=ids).show

    def show_favorite(self, show_id: int) -> Show:
        ids = ShowIds(show_id)
        return self._call(ep.SHOW_FAVORITE, ShowItemEnvelope, ids=ids).show

    def show_favorite_remove(self, show_id: int) -> Show:
        ids = ShowIds(show_id)
        return self._call(ep.SHOW_FAVORITE_REMOVE, ShowItemEnvelope, ids=ids).show

    def show_note(self, show_id: int = 0, thetvdb_id: int = 0, *, note: int) -> Show:
        """Rates a show. `note` must be within 1..5."""
        # bool is an int subclass; True would pass the range check
        if (
            isinstance(note, bool)
            or not isinstance(note, int)
            or not MIN_NOTE <= note <= MAX_NOTE
        ):
            raise InvalidRatingError(note)
        q = QueryBuilder().set("note", note)
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOW_NOTE, ShowItemEnvelope, q, ids).show

    def show_note_remove(self, show_id: int = 0, thetvdb_id: int = 0) -> Show:
        ids = ShowIds(show_id, thetvdb_id)
        return self._call(ep.SHOW_NOTE_REMOVE, ShowItemEnvelope, ids=ids).show

    # --- Episodes ---

    def episodes_list(
        self,
        show_id: int = 0,
        thetvdb_id: int = 0,
        imdb_id: str = "",
        user_id: int = 0,
        limit: int = -1,
        released: int = -1,
        subtitles: bool = False,
        specials: bool = False,
    ) -> list[Show]:
        """Unseen episodes, grouped by show (see `Show.unseen`).

        Every identifier is an independent filter here; none is required.
        `released=0` is a meaningful value and is sent.
        """
        q = (
            QueryBuilder()
            .flag("specials", specials)
            .flag("subtitles", subtitles)
            .non_negative("released", released)
            .positive("showId", show_id)
            .positive("showTheTVDBId", thetvdb_id)
            .text("showIMDBId", imdb_id)
            .positive("limit", limit)
            .positive("userId", user_id)
        )
        return self._call(ep.EPISODES_LIST, ShowsEnvelope, q).shows

    def episode_downloaded(self, episode_id: int) -> Episode:
        ids = ShowIds(episode_id)
        return self._call(ep.EPISODE_DOWNLOADED, EpisodeItemEnvelope, ids=ids).episode

    def episode_not_downloaded(self, episode_id: int) -> Episode:
        ids = ShowIds(episode_id)
        return self._call(
            ep.EPISODE_NOT_DOWNLOADED, EpisodeItemEnvelope, ids=ids
        ).episode

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "BetaSeriesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
