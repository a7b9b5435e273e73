"""Maps TMDB API responses to domain values."""

from typing import Optional

from ..domain import Episode, Genre, Network, Season, Show, ShowStatus
from ..timeutil import parse_date
from .catalog import ShowSummary


def map_show(details: dict, seasons: list[Season], logo_path: Optional[str] = None) -> Show:
    """Build a Show from ``/tv/{id}`` details and already mapped seasons."""
    return Show(
        id=details["id"],
        name=details.get("name") or "",
        overview=details.get("overview"),
        poster_path=details.get("poster_path"),
        backdrop_path=details.get("backdrop_path"),
        logo_path=logo_path,
        first_air_date=parse_date(details.get("first_air_date")),
        status=ShowStatus.parse(details.get("status")),
        genres=tuple(
            Genre(id=g["id"], name=g.get("name", ""))
            for g in details.get("genres", []) if g.get("id") is not None
        ),
        networks=tuple(map_network(n) for n in details.get("networks", []) if n.get("id") is not None),
        seasons=tuple(seasons),
        number_of_seasons=details.get("number_of_seasons") or 0,
        number_of_episodes=details.get("number_of_episodes") or 0,
        in_production=bool(details.get("in_production", False)),
    )


def map_network(network: dict) -> Network:
    return Network(id=network["id"], name=network.get("name", ""), logo_path=network.get("logo_path"))


def map_season_summary(summary: dict) -> Season:
    """Season from the summary embedded in show details (no episodes)."""
    return Season(
        id=summary["id"],
        season_number=summary.get("season_number", 0),
        name=summary.get("name") or f"Season {summary.get('season_number', 0)}",
        overview=summary.get("overview"),
        poster_path=summary.get("poster_path"),
        air_date=parse_date(summary.get("air_date")),
        episode_count=summary.get("episode_count") or 0,
        episodes=(),
    )


def map_season_details(details: dict) -> Season:
    """Season from ``/tv/{id}/season/{n}``, including its episodes."""
    episodes = tuple(map_episode(ep) for ep in details.get("episodes", []))
    return Season(
        id=details["id"],
        season_number=details.get("season_number", 0),
        name=details.get("name") or f"Season {details.get('season_number', 0)}",
        overview=details.get("overview"),
        poster_path=details.get("poster_path"),
        air_date=parse_date(details.get("air_date")),
        episode_count=len(episodes),
        episodes=episodes,
    )


def map_episode(episode: dict) -> Episode:
    return Episode(
        id=episode["id"],
        episode_number=episode.get("episode_number", 0),
        season_number=episode.get("season_number", 0),
        name=episode.get("name") or f"Episode {episode.get('episode_number')}",
        overview=episode.get("overview"),
        air_date=parse_date(episode.get("air_date")),
        still_path=episode.get("still_path"),
        runtime=episode.get("runtime"),
        episode_type=episode.get("episode_type"),
    )


def map_summary(result: dict) -> ShowSummary:
    return ShowSummary(
        id=result["id"],
        name=result.get("name") or "",
        overview=result.get("overview"),
        poster_path=result.get("poster_path"),
        backdrop_path=result.get("backdrop_path"),
        first_air_date=parse_date(result.get("first_air_date")),
        vote_average=result.get("vote_average"),
        genre_ids=result.get("genre_ids") or [],
    )


def pick_logo(images: dict) -> Optional[str]:
    """Prefer English logos, then fall back to any available."""
    logos = images.get("logos", [])
    english = [logo for logo in logos if logo.get("iso_639_1") == "en"]
    best = english[0] if english else (logos[0] if logos else None)
    return best.get("file_path") if best else None
