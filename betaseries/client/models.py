"""
BetaSeries records and response envelopes.

Design notes:
- Records mirror the API fields one to one; there is no behavior here.
- Missing or null fields fall back to their zero value ("", 0, False, []).
- The API sends several counters as strings ("seasons": "6"); those stay `str`.
- Back-references (an episode's show, a character's show_id) are plain ids,
  never nested live objects.
- Envelopes are transient: `decode` unwraps them and hands back the payload.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from betaseries.client.errors import (
    ApiErrorDetail,
    NoCharactersFoundError,
    NoEpisodesFoundError,
    NoShowsFoundError,
    NotFoundError,
    NoVideosFoundError,
)


class BetaSeriesRecord(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null means "absent": let the field default apply
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# --- Shared sub-structures ---


class Notes(BetaSeriesRecord):
    """Rating summary: number of votes, mean, and the member's own note."""

    total: int = 0
    mean: float = 0.0
    user: int = 0


class SeasonDetails(BetaSeriesRecord):
    number: int = 0
    episodes: int = 0


class ShowImages(BetaSeriesRecord):
    show: str = ""
    banner: str = ""
    box: str = ""
    poster: str = ""


class ShowUserState(BetaSeriesRecord):
    """Per-member viewing state attached to a show."""

    archived: bool = False
    favorited: bool = False
    remaining: int = 0
    status: float = 0.0
    last: str = ""
    tags: str = ""


class EpisodeUserState(BetaSeriesRecord):
    seen: bool = False
    downloaded: bool = False


class EpisodeShow(BetaSeriesRecord):
    id: int = 0
    thetvdb_id: int = 0
    title: str = ""


class Subtitle(BetaSeriesRecord):
    id: int = 0
    language: str = ""
    source: str = ""
    quality: int = 0
    file: str = ""
    url: str = ""
    date: str = ""


# --- Domain records ---


class Episode(BetaSeriesRecord):
    id: int = 0
    thetvdb_id: int = 0
    youtube_id: str = ""
    title: str = ""
    season: int = 0
    episode: int = 0
    show: EpisodeShow = Field(default_factory=EpisodeShow)
    code: str = ""
    global_: int = Field(default=0, alias="global")
    special: int = 0
    description: str = ""
    date: str = ""
    note: Notes = Field(default_factory=Notes)
    user: EpisodeUserState = Field(default_factory=EpisodeUserState)
    comments: str = ""
    resource_url: str = ""
    subtitles: list[Subtitle] = Field(default_factory=list)


class Show(BetaSeriesRecord):
    """
    A show as returned by shows/* and episodes/list.

    `remaining` and `unseen` are only filled by episodes/list.
    """

    id: int = 0
    thetvdb_id: int = 0
    imdb_id: str = ""
    title: str = ""

    description: str = ""
    seasons: str = ""
    seasons_details: list[SeasonDetails] = Field(default_factory=list)
    episodes: str = ""
    followers: str = ""
    comments: str = ""
    similars: str = ""
    characters: str = ""
    creation: str = ""
    genres: list[str] = Field(default_factory=list)
    length: str = ""
    network: str = ""
    rating: str = ""
    status: str = ""
    language: str = ""
    notes: Notes = Field(default_factory=Notes)
    in_account: bool = False
    images: ShowImages = Field(default_factory=ShowImages)
    aliases: list[str] = Field(default_factory=list)
    user: ShowUserState = Field(default_factory=ShowUserState)
    resource_url: str = ""

    remaining: int = 0
    unseen: list[Episode] = Field(default_factory=list)

    @field_validator("genres", "aliases", mode="before")
    @classmethod
    def names_from_mapping(cls, value: Any) -> Any:
        # The API sends these either as a list or as a {key: name} object.
        if isinstance(value, dict):
            return list(value.values())
        return value


class Character(BetaSeriesRecord):
    id: int = 0
    show_id: int = 0
    name: str = ""
    role: str = ""
    actor: str = ""
    picture: str = ""
    description: str = ""


class Video(BetaSeriesRecord):
    id: int = 0
    show_id: int = 0
    youtube_id: str = ""
    youtube_url: str = ""
    title: str = ""
    season: int = 0
    episode: int = 0
    login: str = ""
    login_id: int = 0


class Similar(BetaSeriesRecord):
    """A member-submitted "similar show" entry from shows/similars."""

    id: int = 0
    login: str = ""
    login_id: int = 0
    notes: str = ""
    show_title: str = ""
    show_id: int = 0
    thetvdb_id: int = 0
    show: Show | None = None


class TokenUser(BetaSeriesRecord):
    id: int = 0
    login: str = ""
    in_account: bool = False


class Token(BetaSeriesRecord):
    token: str = ""
    hash: str = ""
    user: TokenUser = Field(default_factory=TokenUser)


# --- Envelopes ---


class ApiErrorItem(BetaSeriesRecord):
    code: int = 0
    text: str = ""

    def to_detail(self) -> ApiErrorDetail:
        return ApiErrorDetail(code=self.code, text=self.text)


class Envelope(BetaSeriesRecord):
    """
    Outer JSON object: one named payload field plus `errors`.

    Subclasses set `payload_field` to the name of that field and, for list
    payloads, `not_found` to the error raised when the list is empty.
    """

    payload_field: ClassVar[str | None] = None
    not_found: ClassVar[type[NotFoundError] | None] = None

    errors: list[ApiErrorItem] = Field(default_factory=list)

    def error_details(self) -> list[ApiErrorDetail]:
        return [e.to_detail() for e in self.errors]

    def payload(self) -> Any:
        if self.payload_field is None:
            return None
        return getattr(self, self.payload_field)


class ErrorEnvelope(Envelope):
    pass


class TokenEnvelope(Envelope):
    """members/auth puts the token fields at the top level, next to `errors`."""

    token: str = ""
    hash: str = ""
    user: TokenUser = Field(default_factory=TokenUser)

    def to_token(self) -> Token:
        return Token(token=self.token, hash=self.hash, user=self.user)


class ShowsEnvelope(Envelope):
    payload_field: ClassVar[str] = "shows"
    not_found: ClassVar[type[NotFoundError]] = NoShowsFoundError

    shows: list[Show] = Field(default_factory=list)


class ShowListEnvelope(ShowsEnvelope):
    """shows/list also reports the size of the whole catalogue."""

    total: int | None = None


class ShowItemEnvelope(Envelope):
    payload_field: ClassVar[str] = "show"

    show: Show | None = None


class SimilarsEnvelope(Envelope):
    payload_field: ClassVar[str] = "similars"
    not_found: ClassVar[type[NotFoundError]] = NoShowsFoundError

    similars: list[Similar] = Field(default_factory=list)


class CharactersEnvelope(Envelope):
    payload_field: ClassVar[str] = "characters"
    not_found: ClassVar[type[NotFoundError]] = NoCharactersFoundError

    characters: list[Character] = Field(default_factory=list)


class VideosEnvelope(Envelope):
    payload_field: ClassVar[str] = "videos"
    not_found: ClassVar[type[NotFoundError]] = NoVideosFoundError

    videos: list[Video] = Field(default_factory=list)


class EpisodesEnvelope(Envelope):
    payload_field: ClassVar[str] = "episodes"
    not_found: ClassVar[type[NotFoundError]] = NoEpisodesFoundError

    episodes: list[Episode] = Field(default_factory=list)


class EpisodeItemEnvelope(Envelope):
    payload_field: ClassVar[str] = "episode"

    episode: Episode | None = None
