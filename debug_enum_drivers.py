#!/usr/bin/env python3
"""Debug pnputil driver enumeration, filtering, sorting and removal from the console."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Sequence

from pnputil_manager.constants import IMMUTABLE_CONFIG
from pnputil_manager.user_settings import SettingsStore, UserSettings
from services.catalog import SortOrder, SortState, apply_filter, column_text, sort_records
from services.driver_parser import DriverRecord, parse_enum_drivers
from services.driver_store import CommandRunner, DriverStoreService, PnpUtilClient
from services.errors import DriverStoreError


def _log_to_stderr(message: str) -> None:
    print(message, file=sys.stderr)


def _load_records(args: argparse.Namespace, service: DriverStoreService) -> list[DriverRecord]:
    if args.input:
        with open(args.input, "r", encoding=args.encoding) as handle:
            return parse_enum_drivers(handle.read())
    return service.refresh()


def _print_table(records: Sequence[DriverRecord]) -> None:
    captions = IMMUTABLE_CONFIG.display.column_captions
    rows = [[column_text(record, column) for column in range(len(captions))] for record in records]
    widths = [max([len(caption)] + [len(row[i]) for row in rows]) for i, caption in enumerate(captions)]
    print("  ".join(caption.ljust(widths[i]) for i, caption in enumerate(captions)))
    print("  ".join("-" * width for width in widths))
    for row in rows:
        print("  ".join(value.ljust(widths[i]) for i, value in enumerate(row)))


def main(argv: Sequence[str] | None = None, *, command_runner: CommandRunner | None = None) -> int:
    parser = argparse.ArgumentParser(description="Debug pnputil driver store enumeration and removal.")
    parser.add_argument("--input", help="Parse a saved 'pnputil /enum-drivers' output file instead of running pnputil")
    parser.add_argument("--encoding", default="utf-8", help="Encoding of --input (default: utf-8)")
    parser.add_argument("--pnputil", help="Path to pnputil.exe (default: saved settings, then System32)")
    parser.add_argument("--filter", default="", help="Case-insensitive provider substring filter")
    parser.add_argument(
        "--sort-column",
        type=int,
        default=IMMUTABLE_CONFIG.display.default_sort_column,
        help="Sort column: 0=published, 1=original, 2=provider, 3=version, 4=class (default: 2)",
    )
    parser.add_argument("--descending", action="store_true", help="Sort descending")
    parser.add_argument("--no-sort", action="store_true", help="Keep pnputil output order")
    parser.add_argument("--output-json", help="Write the displayed records to a JSON file")
    parser.add_argument("--uninstall", nargs="+", metavar="PUBLISHED_NAME", help="Delete these driver packages and print a summary")
    parser.add_argument("--force", action="store_true", help="Pass /force to pnputil when deleting")
    parser.add_argument("--ignore-settings", action="store_true", help="Do not read the saved user settings")
    args = parser.parse_args(argv)

    settings = UserSettings() if args.ignore_settings else SettingsStore().load()
    if args.pnputil:
        settings.pnputil_path = args.pnputil
    if args.force:
        settings.force_delete = True
    client = PnpUtilClient.from_settings(settings, command_runner)
    service = DriverStoreService(client=client, log_callback=_log_to_stderr)

    if args.uninstall:
        report = service.uninstall(args.uninstall)
        print(report.summary())
        return 0 if not report.failed and not report.refresh_error else 1

    try:
        records = _load_records(args, service)
    except (DriverStoreError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.no_sort:
        state = SortState()
    else:
        state = SortState(args.sort_column, SortOrder.DESCENDING if args.descending else SortOrder.ASCENDING)
    try:
        shown = sort_records(apply_filter(records, args.filter), state)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output_json:
        with open(args.output_json, "w", encoding="utf-8") as handle:
            json.dump([asdict(record) for record in shown], handle, indent=2, ensure_ascii=False)
    else:
        _print_table(shown)
    print(f"{len(shown)} of {len(records)} driver package(s) shown.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
