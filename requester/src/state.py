"""
Client view state.

The whole view is one frozen ViewState. User actions and request outcomes
are small action objects, and reduce() returns a new snapshot for each one
without touching the old snapshot.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple, Union

from requester.src.models import Country, Holiday


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


@dataclass(frozen=True)
class ViewState:
    """Snapshot of everything the view renders."""

    theme: Theme = Theme.LIGHT
    country: str = ""
    year: str = ""
    countries: Tuple[Country, ...] = ()
    holidays: Tuple[Holiday, ...] = ()
    error: str = ""
    loading: bool = False


# ============================================================================
# Actions
# ============================================================================


@dataclass(frozen=True)
class ToggleTheme:
    pass


@dataclass(frozen=True)
class ThemeRestored:
    theme: Theme


@dataclass(frozen=True)
class EditCountry:
    value: str


@dataclass(frozen=True)
class EditYear:
    value: str


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class HolidaysLoaded:
    holidays: Tuple[Holiday, ...]


@dataclass(frozen=True)
class RequestFailed:
    message: str


@dataclass(frozen=True)
class CountriesLoaded:
    countries: Tuple[Country, ...]


Action = Union[
    ToggleTheme,
    ThemeRestored,
    EditCountry,
    EditYear,
    SubmitStarted,
    HolidaysLoaded,
    RequestFailed,
    CountriesLoaded,
]


def reduce(state: ViewState, action: Action) -> ViewState:
    """
    Apply one action to a snapshot.

    Args:
        state: Current snapshot, left unchanged
        action: What happened

    Returns:
        The next snapshot

    Raises:
        TypeError: If the action type is unknown
    """
    if isinstance(action, ToggleTheme):
        return replace(state, theme=state.theme.toggled())
    if isinstance(action, ThemeRestored):
        return replace(state, theme=action.theme)
    if isinstance(action, EditCountry):
        return replace(state, country=action.value)
    if isinstance(action, EditYear):
        return replace(state, year=action.value)
    if isinstance(action, SubmitStarted):
        return replace(state, loading=True)
    if isinstance(action, HolidaysLoaded):
        return replace(state, holidays=tuple(action.holidays), error="", loading=False)
    if isinstance(action, RequestFailed):
        return replace(state, holidays=(), error=action.message, loading=False)
    if isinstance(action, CountriesLoaded):
        return replace(state, countries=tuple(action.countries))
    raise TypeError(f"Unknown action: {type(action).__name__}")
