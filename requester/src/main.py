"""
Command-line front end for the holiday finder.

Example:
    python -m requester.src.main --country US --year 2023
"""

import argparse
import asyncio
from typing import List, Optional

from requester.src.config import RequesterSettings, get_requester_settings
from requester.src.preferences import PreferenceStore
from requester.src.render import format_country, render_view
from requester.src.requester import HolidayRequester
from requester.src.state import (
    EditCountry,
    EditYear,
    ThemeRestored,
    ToggleTheme,
    ViewState,
    reduce,
)
from shared.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up public holidays through the holiday proxy.")
    parser.add_argument("--country", default="", help="Country code, e.g. US")
    parser.add_argument("--year", default="", help="Year, e.g. 2023")
    parser.add_argument("--list-countries", action="store_true", help="Print the available countries")
    parser.add_argument("--toggle-theme", action="store_true", help="Switch between light and dark")
    return parser


async def run(args: argparse.Namespace, settings: RequesterSettings) -> str:
    store = PreferenceStore(settings.preferences_path)

    state = ViewState()
    stored_theme = store.load_theme()
    if stored_theme is not None:
        state = reduce(state, ThemeRestored(stored_theme))

    if args.toggle_theme:
        state = reduce(state, ToggleTheme())
        store.save_theme(state.theme)

    output: List[str] = [f"Theme: {state.theme.value}"]

    async with HolidayRequester(settings.proxy_url, timeout=settings.timeout) as requester:
        if args.list_countries:
            state = await requester.load_countries(state)
            output.extend(format_country(c) for c in state.countries)

        if args.country or args.year:
            state = reduce(state, EditCountry(args.country))
            state = reduce(state, EditYear(args.year))
            state = await requester.submit(state)
            output.append(render_view(state))

    return "\n".join(output)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_requester_settings()
    configure_logging(log_level=settings.log_level, json_logs=False, service_name="holiday-finder")

    print(asyncio.run(run(args, settings)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
