from datetime import date

import pytest
from pydantic import ValidationError

from countdown_binge.domain import Episode, EpisodeType, Season, Show, ShowStatus
from helpers import NOW, complete_season, day, make_episode, make_season, make_show


def test_complete_season_is_binge_ready():
    season = complete_season(1)
    assert season.is_complete(NOW)
    assert season.is_binge_ready(NOW)


def test_specials_season_is_never_binge_ready():
    """Season 0 holds extras and is excluded even when fully aired."""
    season = complete_season(0)
    assert season.is_complete(NOW)
    assert not season.is_binge_ready(NOW)


def test_watched_season_is_not_binge_ready():
    season = complete_season(1, watched_date=NOW)
    assert season.is_complete(NOW)
    assert not season.is_binge_ready(NOW)


def test_season_with_future_episode_is_not_complete():
    season = make_season(1, [day(-7), day(0), day(7)])
    assert not season.is_complete(NOW)
    assert not season.is_binge_ready(NOW)
    assert season.is_airing(NOW)


def test_episode_airing_today_counts_as_aired():
    season = make_season(1, [day(-7), day(0)])
    assert season.is_complete(NOW)


def test_season_with_undated_episode_is_not_complete():
    season = make_season(1, [day(-7), None])
    assert not season.is_complete(NOW)


def test_season_with_zero_episode_count_is_never_complete():
    season = make_season(1, [], episode_count=0)
    assert not season.is_complete(NOW)
    assert not season.is_binge_ready(NOW)


def test_announced_season_without_episodes_is_not_complete():
    season = make_season(2, [], episode_count=10, air_date=day(30))
    assert not season.is_complete(NOW)


def test_finale_date_is_latest_known_air_date():
    season = make_season(1, [day(-14), day(7), None])
    assert season.finale_date == day(7)
    assert make_season(1, [None, None]).finale_date is None
    assert make_season(1, []).finale_date is None


def test_countdowns():
    airing = make_season(1, [day(-7), day(5)])
    assert airing.days_until_finale(NOW) == 5
    assert airing.days_until_premiere(NOW) is None

    upcoming = make_season(2, [day(12), day(19)])
    assert upcoming.days_until_premiere(NOW) == 12
    assert upcoming.aired_episode_count(NOW) == 0

    assert complete_season(1).days_until_finale(NOW) is None


def test_equality_is_by_identifier():
    first = make_episode(1, day(-1))
    renamed = first.model_copy(update={"name": "Pilot"})
    assert first == renamed
    assert len({first, renamed}) == 1

    show = make_show(42, name="Original")
    assert show == make_show(42, name="Renamed")
    assert show != make_show(43)


def test_with_episode_replaces_by_number():
    season = make_season(1, [day(-14), day(-7)])
    watched = season.episodes[1].mark_watched(True, NOW)
    updated = season.with_episode(watched)

    assert updated.episodes[1].watched_date == NOW
    assert updated.episodes[0].watched_date is None
    # The original value is untouched
    assert season.episodes[1].watched_date is None


def test_mark_watched_false_clears_marker():
    episode = make_episode(1, day(-1), watched_date=NOW)
    assert not episode.mark_watched(False).is_watched


def test_unknown_status_decodes_as_planned():
    show = Show(id=1, name="Mystery", status="Something New")
    assert show.status == ShowStatus.PLANNED
    assert Show(id=2, name="Gone", status="Canceled").status == ShowStatus.CANCELLED


def test_snapshot_keeps_watched_markers_and_dates():
    season = complete_season(1, watched_date=NOW)
    season = season.with_episode(season.episodes[0].mark_watched(True, NOW))
    show = make_show(7, seasons=[season, make_season(2, [], episode_count=0, air_date=None)])

    restored = Show.from_snapshot(show.to_snapshot())

    assert restored.status == ShowStatus.RETURNING
    assert [s.season_number for s in restored.seasons] == [1, 2]
    restored_season = restored.get_season(1)
    assert restored_season.watched_date == NOW
    assert restored_season.episodes[0].watched_date == NOW
    assert restored_season.episodes[1].watched_date is None
    assert isinstance(restored_season.episodes[0].air_date, date)
    assert restored.get_season(2).air_date is None


def test_missing_episode_type_defaults_to_standard():
    episode = Episode.model_validate({
        "id": 1, "episode_number": 1, "season_number": 1, "name": "Pilot",
    })
    assert episode.episode_type == EpisodeType.STANDARD
    assert Episode.model_validate({
        "id": 2, "episode_number": 2, "season_number": 1, "name": "x", "episode_type": "finale",
    }).episode_type == EpisodeType.FINALE


def test_current_and_upcoming_season():
    show = make_show(seasons=[
        complete_season(0),
        complete_season(1),
        make_season(2, [day(20)]),
        make_season(3, [], episode_count=0, air_date=None),
    ])
    assert show.current_season.season_number == 3
    assert show.upcoming_season(NOW).season_number == 2
    assert [s.season_number for s in show.regular_seasons] == [1, 2, 3]


def test_season_is_frozen():
    season = make_season(1, [day(-1)])
    with pytest.raises(ValidationError):
        season.watched_date = NOW
    assert isinstance(season, Season)
