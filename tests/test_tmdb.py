import json
from datetime import date

import httpx
import pytest

from countdown_binge.domain import EpisodeType, ShowStatus
from countdown_binge.errors import CatalogError
from countdown_binge.services import tmdb_mapper
from countdown_binge.services.tmdb import TMDBService

SHOW_DETAILS = {
    "id": 1399,
    "name": "Game of Thrones",
    "overview": "Seven noble families fight for control of Westeros.",
    "poster_path": "/poster.jpg",
    "backdrop_path": "/backdrop.jpg",
    "first_air_date": "2011-04-17",
    "status": "Ended",
    "in_production": False,
    "number_of_seasons": 2,
    "number_of_episodes": 20,
    "genres": [{"id": 18, "name": "Drama"}],
    "networks": [{"id": 49, "name": "HBO", "logo_path": "/hbo.png"}],
    "seasons": [
        {"id": 3627, "season_number": 0, "name": "Specials", "episode_count": 5},
        {"id": 3624, "season_number": 1, "name": "Season 1", "episode_count": 10, "air_date": "2011-04-17"},
        {"id": 3625, "season_number": 2, "name": "Season 2", "episode_count": 10, "air_date": "2012-04-01"},
    ],
}

SEASON_ONE = {
    "id": 3624,
    "season_number": 1,
    "name": "Season 1",
    "air_date": "2011-04-17",
    "episodes": [
        {"id": 63056, "episode_number": 1, "season_number": 1, "name": "Winter Is Coming",
         "air_date": "2011-04-17", "runtime": 62, "episode_type": "standard"},
        {"id": 63057, "episode_number": 2, "season_number": 1, "name": "The Kingsroad",
         "air_date": "2011-04-24", "runtime": 56, "episode_type": "finale"},
    ],
}

IMAGES = {
    "logos": [
        {"file_path": "/logo-de.png", "iso_639_1": "de"},
        {"file_path": "/logo-en.png", "iso_639_1": "en"},
    ]
}


def _service(routes: dict) -> tuple[TMDBService, list]:
    """TMDBService backed by a mock transport serving ``routes`` by path."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path.replace("/3", "", 1)
        if path not in routes:
            return httpx.Response(404, json={"status_message": "not found"})
        status, body = routes[path]
        if isinstance(body, str):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body))

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = TMDBService(api_key="test-key", base_url="https://api.themoviedb.org/3", client=client)
    return service, requests


@pytest.mark.asyncio
async def test_get_show_details_maps_show_with_seasons():
    service, requests = _service({
        "/tv/1399": (200, SHOW_DETAILS),
        "/tv/1399/season/1": (200, SEASON_ONE),
        "/tv/1399/season/2": (500, {"status_message": "boom"}),
        "/tv/1399/images": (200, IMAGES),
    })

    show = await service.get_show_details(1399)
    await service.close()

    assert show.id == 1399
    assert show.status == ShowStatus.ENDED
    assert show.first_air_date == date(2011, 4, 17)
    assert show.logo_path == "/logo-en.png"
    assert [g.name for g in show.genres] == ["Drama"]
    assert show.networks[0].logo_path == "/hbo.png"
    # Specials are not fetched
    assert [s.season_number for s in show.seasons] == [1, 2]

    season_1 = show.get_season(1)
    assert season_1.episode_count == 2
    assert season_1.episodes[1].episode_type == EpisodeType.FINALE
    assert season_1.finale_date == date(2011, 4, 24)

    # Failed season fetch falls back to the summary without episodes
    season_2 = show.get_season(2)
    assert season_2.episode_count == 10
    assert season_2.episodes == ()

    assert all(r.url.params["api_key"] == "test-key" for r in requests)


@pytest.mark.asyncio
async def test_get_show_details_http_error_raises_catalog_error():
    service, _ = _service({"/tv/1": (500, {"status_message": "boom"})})

    with pytest.raises(CatalogError) as exc_info:
        await service.get_show_details(1)

    assert "500" in exc_info.value.message


@pytest.mark.asyncio
async def test_undecodable_season_summary_raises_catalog_error():
    details = dict(SHOW_DETAILS, seasons=[{"season_number": 1, "episode_count": 10}])
    service, _ = _service({
        "/tv/1399": (200, details),
        "/tv/1399/season/1": (500, {"status_message": "boom"}),
        "/tv/1399/images": (200, IMAGES),
    })

    with pytest.raises(CatalogError) as exc_info:
        await service.get_show_details(1399)
    await service.close()

    assert exc_info.value.message.startswith("Failed to decode season")
    assert isinstance(exc_info.value.original_exception, KeyError)


@pytest.mark.asyncio
async def test_invalid_json_raises_catalog_error():
    service, _ = _service({"/tv/1": (200, "<html>")})

    with pytest.raises(CatalogError):
        await service.get_show_details(1)


@pytest.mark.asyncio
async def test_network_failure_raises_catalog_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = TMDBService(api_key="test-key", client=client)

    with pytest.raises(CatalogError) as exc_info:
        await service.search("anything")

    assert isinstance(exc_info.value.original_exception, httpx.ConnectError)


@pytest.mark.asyncio
async def test_missing_api_key_raises_catalog_error():
    service = TMDBService()
    # Ignore any key configured in the environment
    service.api_key = ""

    with pytest.raises(CatalogError, match="API key"):
        await service.search("anything")


@pytest.mark.asyncio
async def test_search_maps_results_and_caches():
    results = {"results": [
        {"id": 1, "name": "Severance", "first_air_date": "2022-02-18", "genre_ids": [18]},
        {"id": 2, "name": "Unknown Date", "first_air_date": ""},
    ]}
    service, requests = _service({"/search/tv": (200, results)})

    first = await service.search("sev")
    second = await service.search("sev")

    assert [r.name for r in first] == ["Severance", "Unknown Date"]
    assert first[0].first_air_date == date(2022, 2, 18)
    assert first[1].first_air_date is None
    assert second == first
    assert len(requests) == 1


def test_mapper_defaults_unknown_status_and_episode_type():
    details = dict(SHOW_DETAILS, status="Brand New Status")
    show = tmdb_mapper.map_show(details, [])
    assert show.status == ShowStatus.PLANNED

    episode = tmdb_mapper.map_episode({"id": 1, "episode_number": 1, "season_number": 1, "episode_type": None})
    assert episode.episode_type == EpisodeType.STANDARD
    assert episode.air_date is None


def test_pick_logo_falls_back_to_any_language():
    assert tmdb_mapper.pick_logo({"logos": [{"file_path": "/x.png", "iso_639_1": "fr"}]}) == "/x.png"
    assert tmdb_mapper.pick_logo({"logos": []}) is None
