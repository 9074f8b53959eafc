"""
Command-line interface: extract a widget schedule from saved frame content
and export it to file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__, config
from .content import ContentUnavailableError, HtmlContent, TextContent
from .export import export, to_json
from .pipeline import extract_schedule
from .visible_date import pick_iso, venue_today
from .widget_shell import build_widget_shell


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Extract a class schedule from a rendered HelloWalla booking widget "
            "and export it to JSON / CSV / ICS."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--html",
        metavar="HTML_PATH",
        help="Saved HTML of the widget iframe (the frame document, not the host page).",
    )
    mode.add_argument(
        "--text",
        metavar="TEXT_PATH",
        help="Visible text of the widget iframe (e.g. copied from document.body.innerText).",
    )
    mode.add_argument(
        "--shell",
        action="store_true",
        help="Print a local HTML page that embeds the widget for --date, then exit.",
    )
    parser.add_argument(
        "--date",
        metavar="YYYY-MM-DD",
        help="Day that was requested from the widget. Default: today at the venue.",
    )
    parser.add_argument(
        "--url",
        default="",
        help="URL of the widget iframe when the HTML was captured; its ?start= is trusted as the shown day.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="schedule",
        help="Output path (without extension). Default: schedule",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "csv", "ics"],
        default="json",
        help="Export format. Default: json",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the JSON result instead of writing a file.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    requested = args.date or venue_today().isoformat()
    if args.date and not pick_iso(args.date):
        print(f"Error: --date must be YYYY-MM-DD, got {args.date!r}", file=sys.stderr)
        return 1

    if args.shell:
        print(build_widget_shell(start=requested, end=requested))
        return 0

    try:
        if args.html:
            content = HtmlContent.from_path(args.html, url=args.url)
        elif args.text:
            content = TextContent.from_path(args.text, url=args.url)
        else:
            print(
                "No input specified. Use --html for a saved widget frame, "
                "--text for its visible text, or --shell to get an embed page.",
                file=sys.stderr,
            )
            return 1
        result = extract_schedule(requested, content)
    except ContentUnavailableError as e:
        print(f"Error reading widget content: {e}", file=sys.stderr)
        return 1

    if result.day_mismatch:
        print(
            f"WARNING: day mismatch: requested {result.requested_date}, widget shows {result.visible_date}",
            file=sys.stderr,
        )

    if args.stdout:
        print(to_json(result))
        return 0

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    try:
        export(result, out_path, args.format)
    except (ValueError, OSError) as e:
        print(f"Error exporting schedule: {e}", file=sys.stderr)
        return 1
    shown = result.visible_date or f"{result.requested_date} (unconfirmed)"
    print(f"Exported {len(result.entries)} class(es) for {shown} via {result.strategy_used} to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
