"""
calendar_cli.py
===============
Command-line front end for the quarterly events calendar.

It wires the modular components together and prints the render contract
as plain text:

* ``calendar_service.quarter_store`` – quarter-keyed lazy loading and caching
* ``calendar_service.csv_parser`` – CSV rows → typed event records
* ``calendar_service.range_resolver`` – visible window → quarter keys
* ``app.view_state`` – commands, reducer and controller
* ``app.search`` – text/tag filtering, day cells and paginated search
* ``app.metrics`` – chats/revenue series for a date range

Quarter files are read from ``--data-url`` (HTTP) when given, otherwise
from ``--data-dir`` on the local disk.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from typing import List

from tqdm import tqdm

from app.event_detail.services import event_label, format_count, format_currency
from app.metrics.models import ChartSeries
from app.view_state import (
    CalendarSnapshot,
    EnterSearch,
    GoToPage,
    PickDate,
    SetQuery,
    SetTag,
    SetViewMode,
)
from app.view_state.factory import create_calendar_module
from calendar_service.logging_config import get_logger, setup_logging, stop_logging
from calendar_service.range_resolver import quarter_keys_in_range, search_visible_range
from config_manager import get_app_config, get_calendar_config, get_data_config

_LOG = get_logger(__name__)


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:  # noqa: D401
    p = argparse.ArgumentParser(
        description="Show scheduled events from quarterly CSV files as a month/week calendar, a paginated search, or a chats/revenue series.",
        epilog="""
Examples:
  %(prog)s --data-dir site --view week --date 2024-03-12
  %(prog)s --data-url https://example.org --search --query finals --page 2
  %(prog)s --data-dir site --chart 2024-01-01 2024-06-30
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--data-url", dest="data_url", help="Base URL the data/events-<year>-Q<n>.csv files live under")
    p.add_argument("--data-dir", dest="data_dir", help="Local directory holding data/events-<year>-Q<n>.csv")
    p.add_argument("--view", choices=["month", "week"], help="Calendar layout (default from config)")
    p.add_argument("--date", help="Anchor date YYYY-MM-DD (default today)")
    p.add_argument("--query", default="", help="Free-text filter")
    p.add_argument("--tag", help="Only events carrying this tag")
    p.add_argument("--search", action="store_true", help="Search the whole history instead of showing the grid")
    p.add_argument("--page", type=int, default=1, help="Search result page")
    p.add_argument(
        "--chart",
        nargs=2,
        metavar=("START", "END"),
        help="Print the chats/revenue series for a date range",
    )
    p.add_argument("--prefetch", action="store_true", help="Load every quarter of the searchable history first")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def format_snapshot(snapshot: CalendarSnapshot) -> str:
    """Plain-text rendering of a calendar snapshot."""
    lines = [snapshot.period_label, "=" * len(snapshot.period_label)]

    if snapshot.is_search:
        for event in snapshot.search_items:
            lines.append(f"{event.start_date.isoformat()}  {event_label(event)}")
        if not snapshot.search_items:
            lines.append("No matching events.")
        if snapshot.pagination:
            p = snapshot.pagination
            lines.append(f"Page {p.page}/{p.total_pages} ({p.total_items} results)")
        return "\n".join(lines)

    shown = 0
    for cell in snapshot.days:
        if not cell.events or not cell.in_current_month:
            continue
        labels = ", ".join(event_label(e) for e in cell.events)
        more = f" (+{cell.hidden_count} more)" if cell.hidden_count else ""
        lines.append(f"{cell.day:%a %b} {cell.day.day:>2}: {labels}{more}")
        shown += 1
    if not shown:
        lines.append("No events")
    return "\n".join(lines)


def format_series(series: ChartSeries | None) -> str:
    """Plain-text rendering of a chart series."""
    if series is None or series.is_empty:
        return "No data in selected date range."
    lines = [f"{series.start.isoformat()} to {series.end.isoformat()}: {series.event_count} events"]
    for day, chats in series.chats:
        lines.append(f"{day.isoformat()}  chats={format_count(chats)}")
    for day, revenue in series.revenue:
        lines.append(f"{day.isoformat()}  revenue={format_currency(revenue)}")
    lines.append(f"max chats={format_count(series.max_chats)}  max revenue={format_currency(series.max_revenue)}")
    return "\n".join(lines)


async def _run(args: argparse.Namespace) -> int:
    data_config = get_data_config()
    if args.data_url:
        data_config = replace(data_config, base_url=args.data_url)
    elif args.data_dir:
        data_config = replace(data_config, base_url="", data_dir=args.data_dir)

    module = create_calendar_module(data_config, get_calendar_config())
    controller = module["controller"]
    source = module["source"]

    try:
        if args.prefetch:
            window = search_visible_range(controller.today, controller.settings.min_date)
            total = len(quarter_keys_in_range(window.start, window.end))
            with tqdm(total=total, desc="Loading quarters", unit="quarter") as bar:
                count = await controller.prefetch_history(on_loaded=lambda _key: bar.update(1))
            _LOG.info(f"Loaded {count} events from {total} quarters")

        if args.chart:
            series = await controller.load_chart(*args.chart)
            print(format_series(series))
            return 0

        snapshot = await controller.start()
        commands = []
        if args.view:
            commands.append(SetViewMode(args.view))
        if args.date:
            commands.append(PickDate(args.date))
        if args.query:
            commands.append(SetQuery(args.query))
        if args.tag:
            commands.append(SetTag(args.tag))
        if args.search:
            commands.append(EnterSearch())
            if args.page != 1:
                commands.append(GoToPage(args.page))
        if commands:
            snapshot = await controller.dispatch_all(commands)

        print(format_snapshot(snapshot))
        return 0
    finally:
        aclose = getattr(source, "aclose", None)
        if aclose is not None:
            await aclose()


def main(argv: List[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(debug=args.debug or get_app_config().debug)
    try:
        return asyncio.run(_run(args))
    finally:
        stop_logging()


if __name__ == "__main__":
    sys.exit(main())
