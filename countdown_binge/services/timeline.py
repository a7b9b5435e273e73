"""Groups followed shows into timeline sections with countdowns."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..domain import Show, ShowLifecycleState
from .lifecycle import PREMIERING_SOON_DAYS, classify

# Display order of the timeline sections; idle shows are not shown
SECTION_ORDER = (
    ShowLifecycleState.ENDING,
    ShowLifecycleState.PREMIERING_SOON,
    ShowLifecycleState.BINGE_READY,
    ShowLifecycleState.ANTICIPATED,
)


class CountdownKind(str, Enum):
    TO_FINALE = "to_finale"
    TO_PREMIERE = "to_premiere"


@dataclass(frozen=True)
class Countdown:
    kind: CountdownKind
    days: int
    target_date: date

    @property
    def description(self) -> str:
        """Human-readable countdown, e.g. "Finale in 3 days"."""
        label = "Finale in" if self.kind == CountdownKind.TO_FINALE else "Premieres in"
        unit = "day" if self.days == 1 else "days"
        return f"{label} {self.days} {unit}"

    @property
    def short_description(self) -> str:
        return f"{self.days}d"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "days": self.days,
            "target_date": self.target_date.isoformat(),
            "description": self.description,
        }


@dataclass(frozen=True)
class TimelineEntry:
    show: Show
    state: ShowLifecycleState
    countdown: Optional[Countdown] = None


@dataclass(frozen=True)
class TimelineSection:
    state: ShowLifecycleState
    entries: list[TimelineEntry]


def _countdown(show: Show, state: ShowLifecycleState, now: Optional[datetime]) -> Optional[Countdown]:
    if state == ShowLifecycleState.ENDING:
        airing = [s for s in show.regular_seasons if s.is_airing(now)]
        for season in airing:
            days = season.days_until_finale(now)
            if days is not None:
                return Countdown(CountdownKind.TO_FINALE, max(0, days), season.finale_date)
        return None

    if state == ShowLifecycleState.PREMIERING_SOON:
        dated = [s for s in show.regular_seasons if s.days_until_premiere(now) is not None]
        if not dated:
            return None
        season = min(dated, key=lambda s: s.air_date)
        return Countdown(CountdownKind.TO_PREMIERE, season.days_until_premiere(now), season.air_date)

    return None


def create_entry(
    show: Show,
    now: Optional[datetime] = None,
    premiering_soon_days: int = PREMIERING_SOON_DAYS,
) -> TimelineEntry:
    state = classify(show, now, premiering_soon_days)
    return TimelineEntry(show=show, state=state, countdown=_countdown(show, state, now))


def _sort_key(entry: TimelineEntry):
    # Soonest countdown first, then by name; entries without one sort by name
    days = entry.countdown.days if entry.countdown else float("inf")
    return (days, entry.show.name.lower())


def build_timeline(
    shows: list[Show],
    now: Optional[datetime] = None,
    premiering_soon_days: int = PREMIERING_SOON_DAYS,
) -> list[TimelineSection]:
    """Classify shows and return the non-empty sections in display order."""
    grouped = {state: [] for state in SECTION_ORDER}
    for show in shows:
        entry = create_entry(show, now, premiering_soon_days)
        if entry.state in grouped:
            grouped[entry.state].append(entry)

    return [
        TimelineSection(state=state, entries=sorted(grouped[state], key=_sort_key))
        for state in SECTION_ORDER
        if grouped[state]
    ]
