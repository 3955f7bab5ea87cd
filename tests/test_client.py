import pytest
import requests
import responses
from betaseries.client.client import BetaSeriesClient
from betaseries.client.errors import (
    AmbiguousIdError,
    IdNotSetError,
    InvalidRatingError,
    MissingPayloadError,
    NoCharactersFoundError,
    NoEpisodesFoundError,
    NoShowsFoundError,
    NoVideosFoundError,
    ServiceError,
)
from betaseries.client.session import BetaSeriesSession
from betaseries.config.betaseries_settings import BetaSeriesSettings

BASE = "https://api.test.com"


# --- FIXTURES ---
# Logic: One anonymous client against a fake host; responses intercepts HTTP.
@pytest.fixture
def client():
    return BetaSeriesClient(BetaSeriesSession("test_key", base_url=BASE))


def _request(index=0):
    return responses.calls[index].request


# --- 1. POSITIVE TESTING (The Contract) ---
@responses.activate
def test_shows_search_builds_query_and_decodes(client):
    # Logic: The documented scenario, end to end.
    responses.add(
        responses.GET,
        f"{BASE}/shows/search",
        json={"shows": [{"id": 1, "title": "Lost"}], "errors": []},
        status=200,
    )

    shows = client.shows_search("Lost", "title", False)

    assert [s.id for s in shows] == [1]
    assert shows[0].title == "Lost"
    assert _request().method == "GET"
    assert _request().url == f"{BASE}/shows/search?title=lost&nbpp=100&order=title"
    assert _request().headers["X-BetaSeries-Key"] == "test_key"
    assert "X-BetaSeries-Token" not in _request().headers


@responses.activate
def test_shows_search_unknown_order_falls_back_to_popularity(client):
    responses.add(responses.GET, f"{BASE}/shows/search", json={"shows": [{"id": 2}]})

    client.shows_search("dexter", order="rating", summary=True)

    assert _request().url == (
        f"{BASE}/shows/search?title=dexter&nbpp=100&order=popularity&summary=true"
    )


@responses.activate
def test_shows_random_omits_negative_count(client):
    responses.add(responses.GET, f"{BASE}/shows/random", json={"shows": [{"id": 3}]})
    responses.add(responses.GET, f"{BASE}/shows/random", json={"shows": [{"id": 4}]})

    client.shows_random()
    client.shows_random(num=5, summary=True)

    assert _request(0).url == f"{BASE}/shows/random"
    assert _request(1).url == f"{BASE}/shows/random?nb=5&summary=true"


@responses.activate
def test_shows_list_options(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/list",
        json={"shows": [{"id": 7}, {"id": 8}], "total": 2000, "errors": []},
    )

    shows = client.shows_list(
        since="1400000000", starting="b", order="alphabetical", start=10, limit=2
    )

    assert [s.id for s in shows] == [7, 8]
    assert _request().url == (
        f"{BASE}/shows/list?order=alphabetical&since=1400000000&starting=b"
        "&start=10&limit=2"
    )


@responses.activate
def test_shows_favorites_with_and_without_user(client):
    responses.add(responses.GET, f"{BASE}/shows/favorites", json={"shows": [{"id": 1}]})
    responses.add(responses.GET, f"{BASE}/shows/favorites", json={"shows": [{"id": 1}]})

    client.shows_favorites()
    client.shows_favorites(user_id=42)

    assert _request(0).url == f"{BASE}/shows/favorites"
    assert _request(1).url == f"{BASE}/shows/favorites?id=42"


@responses.activate
def test_shows_similars_by_tvdb_id(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/similars",
        json={
            "similars": [
                {"id": 11, "show_title": "Fringe", "show_id": 99, "show": {"id": 99}}
            ],
            "errors": [],
        },
    )

    similars = client.shows_similars(thetvdb_id=73739, details=True)

    assert similars[0].show_title == "Fringe"
    assert similars[0].show.id == 99
    assert _request().url == f"{BASE}/shows/similars?thetvdb_id=73739&details=true"


@responses.activate
def test_shows_characters_prefers_local_id(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/characters",
        json={"characters": [{"id": 5, "name": "Jack Shephard", "show_id": 1}]},
    )

    characters = client.shows_characters(show_id=1, thetvdb_id=73739)

    assert characters[0].name == "Jack Shephard"
    assert _request().url == f"{BASE}/shows/characters?id=1"


@responses.activate
def test_shows_videos_single_id(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/videos",
        json={"videos": [{"id": 1, "youtube_id": "abc"}], "errors": []},
    )

    videos = client.shows_videos(thetvdb_id=73739)

    assert videos[0].youtube_id == "abc"
    assert _request().url == f"{BASE}/shows/videos?thetvdb_id=73739"


@responses.activate
def test_shows_episodes_episode_requires_season(client):
    responses.add(
        responses.GET, f"{BASE}/shows/episodes", json={"episodes": [{"id": 1}]}
    )
    responses.add(
        responses.GET, f"{BASE}/shows/episodes", json={"episodes": [{"id": 1}]}
    )

    client.shows_episodes(show_id=1, episode=3)
    client.shows_episodes(show_id=1, season=2, episode=3, subtitles=True)

    assert _request(0).url == f"{BASE}/shows/episodes?id=1"
    assert _request(1).url == (
        f"{BASE}/shows/episodes?id=1&season=2&episode=3&subtitles=true"
    )


@responses.activate
def test_show_display_falls_back_to_imdb(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/display",
        json={"show": {"id": 1, "imdb_id": "tt0411008"}, "errors": []},
    )

    show = client.show_display(imdb_id="tt0411008")

    assert show.id == 1
    assert _request().url == f"{BASE}/shows/display?imdb_id=tt0411008"


@responses.activate
def test_show_add_and_remove_verbs(client):
    responses.add(responses.POST, f"{BASE}/shows/show", json={"show": {"id": 1}})
    responses.add(responses.DELETE, f"{BASE}/shows/show", json={"show": {"id": 1}})

    client.show_add(show_id=1, last_episode_id=250)
    client.show_remove(show_id=1)

    assert _request(0).method == "POST"
    assert _request(0).url == f"{BASE}/shows/show?id=1&episode_id=250"
    assert _request(1).method == "DELETE"
    assert _request(1).url == f"{BASE}/shows/show?id=1"


@responses.activate
def test_archive_favorite_and_note_verbs(client):
    for method, path in [
        (responses.POST, "/shows/archive"),
        (responses.DELETE, "/shows/archive"),
        (responses.POST, "/shows/favorite"),
        (responses.DELETE, "/shows/favorite"),
        (responses.POST, "/shows/note"),
        (responses.DELETE, "/shows/note"),
    ]:
        responses.add(method, f"{BASE}{path}", json={"show": {"id": 1}})

    client.show_archive(show_id=1)
    client.show_not_archive(thetvdb_id=73739)
    client.show_favorite(1)
    client.show_favorite_remove(1)
    client.show_note(1, note=4)
    client.show_note_remove(1)

    sent = [(c.request.method, c.request.url) for c in responses.calls]
    assert sent == [
        ("POST", f"{BASE}/shows/archive?id=1"),
        ("DELETE", f"{BASE}/shows/archive?thetvdb_id=73739"),
        ("POST", f"{BASE}/shows/favorite?id=1"),
        ("DELETE", f"{BASE}/shows/favorite?id=1"),
        ("POST", f"{BASE}/shows/note?id=1&note=4"),
        ("DELETE", f"{BASE}/shows/note?id=1"),
    ]


@responses.activate
@pytest.mark.parametrize("note", [1, 2, 3, 4, 5])
def test_show_note_accepts_full_range(client, note):
    # Logic: Both inclusive bounds reach the API unchanged.
    responses.add(responses.POST, f"{BASE}/shows/note", json={"show": {"id": 1}})

    client.show_note(1, note=note)

    assert _request().method == "POST"
    assert _request().url == f"{BASE}/shows/note?id=1&note={note}"


@responses.activate
def test_episodes_list_filters(client):
    responses.add(
        responses.GET,
        f"{BASE}/episodes/list",
        json={
            "shows": [
                {"id": 1, "remaining": 2, "unseen": [{"id": 10}, {"id": 11}]}
            ],
            "errors": [],
        },
    )

    shows = client.episodes_list(show_id=1, limit=2, released=0, specials=True)

    assert [e.id for e in shows[0].unseen] == [10, 11]
    assert _request().url == (
        f"{BASE}/episodes/list?specials=true&released=0&showId=1&limit=2"
    )


@responses.activate
def test_episode_downloaded_and_not_downloaded(client):
    body = {"episode": {"id": 9, "user": {"downloaded": True}}, "errors": []}
    responses.add(responses.POST, f"{BASE}/episodes/downloaded", json=body)
    responses.add(responses.DELETE, f"{BASE}/episodes/downloaded", json=body)

    episode = client.episode_downloaded(9)
    client.episode_not_downloaded(9)

    assert episode.user.downloaded is True
    assert _request(0).url == f"{BASE}/episodes/downloaded?id=9"
    assert _request(1).method == "DELETE"


# --- 2. NEGATIVE TESTING (The Fragility) ---
@responses.activate
def test_shows_videos_both_ids_fails_before_request(client):
    # Logic: Two ids is ambiguous; nothing may reach the network.
    with pytest.raises(AmbiguousIdError, match="no single id used"):
        client.shows_videos(5, 5)

    assert len(responses.calls) == 0


@responses.activate
@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.show_display(),
        lambda c: c.show_archive(),
        lambda c: c.shows_characters(),
        lambda c: c.shows_episodes(),
        lambda c: c.show_favorite(0),
        lambda c: c.episode_downloaded(-1),
    ],
)
def test_missing_id_fails_before_request(client, call):
    with pytest.raises(IdNotSetError):
        call(client)

    assert len(responses.calls) == 0


@responses.activate
@pytest.mark.parametrize("note", [-1, 0, 6, 100])
def test_show_note_out_of_range(client, note):
    with pytest.raises(InvalidRatingError) as exc:
        client.show_note(1, note=note)

    assert exc.value.value == note
    assert len(responses.calls) == 0


@responses.activate
@pytest.mark.parametrize("note", [True, False, 3.0, "4", None])
def test_show_note_rejects_non_integer(client, note):
    # Logic: bool is an int subclass, so True must not slip through as 1.
    with pytest.raises(InvalidRatingError):
        client.show_note(1, note=note)

    assert len(responses.calls) == 0


@responses.activate
def test_service_error_is_raised(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/display",
        json={"errors": [{"code": 4001, "text": "Show not found."}]},
        status=400,
    )

    with pytest.raises(ServiceError) as exc:
        client.show_display(show_id=123456)

    assert exc.value.codes == [4001]
    assert exc.value.status_code == 400


@responses.activate
def test_transport_error_propagates_unchanged(client):
    responses.add(
        responses.GET,
        f"{BASE}/shows/random",
        body=requests.exceptions.ConnectionError("boom"),
    )

    with pytest.raises(requests.exceptions.ConnectionError):
        client.shows_random()


# --- 3. CONSTRAINTS (The Limits) ---
@responses.activate
@pytest.mark.parametrize(
    "method, path, body, call, error",
    [
        ("GET", "/shows/search", {"shows": []}, lambda c: c.shows_search("x"), NoShowsFoundError),
        ("GET", "/shows/similars", {"similars": []}, lambda c: c.shows_similars(1), NoShowsFoundError),
        ("GET", "/shows/characters", {"characters": []}, lambda c: c.shows_characters(1), NoCharactersFoundError),
        ("GET", "/shows/videos", {"videos": []}, lambda c: c.shows_videos(1), NoVideosFoundError),
        ("GET", "/shows/episodes", {"episodes": []}, lambda c: c.shows_episodes(1), NoEpisodesFoundError),
        ("GET", "/episodes/list", {"shows": []}, lambda c: c.episodes_list(), NoShowsFoundError),
    ],
)
def test_empty_collections(client, method, path, body, call, error):
    # Logic: A clean but empty answer maps to the family's own "not found".
    responses.add(method, f"{BASE}{path}", json={**body, "errors": []})

    with pytest.raises(error):
        call(client)


@responses.activate
def test_item_endpoint_without_payload(client):
    responses.add(responses.GET, f"{BASE}/shows/display", json={"errors": []})

    with pytest.raises(MissingPayloadError):
        client.show_display(show_id=1)


# --- 4. CONSTRUCTION ---
@responses.activate
def test_from_settings_authenticates(monkeypatch):
    monkeypatch.setenv("BETASERIES_API_KEY", "env_key")
    monkeypatch.setenv("BETASERIES_LOGIN", "Dev051")
    monkeypatch.setenv("BETASERIES_PASSWORD", "developer")
    monkeypatch.setenv("BETASERIES_BASE_URL", BASE)
    responses.add(
        responses.POST,
        f"{BASE}/members/auth",
        json={"token": "t0k3n", "user": {"id": 1, "login": "Dev051"}, "errors": []},
    )
    responses.add(responses.GET, f"{BASE}/shows/random", json={"shows": [{"id": 1}]})

    with BetaSeriesClient.from_settings(BetaSeriesSettings(_env_file=None)) as client:
        client.shows_random()

    assert client.session.is_authenticated
    assert _request(1).headers["X-BetaSeries-Token"] == "t0k3n"
    assert _request(1).headers["X-BetaSeries-Key"] == "env_key"
