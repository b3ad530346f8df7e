"""Plain-text rendering of the client view."""

from typing import List

from requester.src.models import Country, Holiday
from requester.src.state import ViewState

TITLE = "Holidays Finder"


def format_holiday(holiday: Holiday) -> str:
    """One list entry, e.g. "New Year — 2023-01-01 (National)"."""
    return f"{holiday.name} — {holiday.date} ({holiday.type})"


def format_country(country: Country) -> str:
    return f"{country.name} ({country.code})"


def render_holidays(state: ViewState) -> List[str]:
    """Entries in the order the proxy returned them."""
    return [format_holiday(h) for h in state.holidays]


def render_view(state: ViewState) -> str:
    lines = [TITLE, ""]
    if state.loading:
        lines.append("Loading...")
    if state.error:
        lines.append(state.error)
    lines.extend(render_holidays(state))
    return "\n".join(lines)
