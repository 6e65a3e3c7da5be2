from __future__ import annotations

import argparse
import json
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .address import format_mac, is_private, parse_mac
from .database import Database, default_database
from .errors import AddressError
from .records import AssignmentRecord

ENV_CSV = "MAC_OUI_CSV"


def _build_table(title: str) -> Table:
    t = Table(title=title, show_lines=False)
    t.add_column("Query", style="bold")
    t.add_column("OUI")
    t.add_column("Manufacturer")
    t.add_column("Country")
    t.add_column("Block")
    t.add_column("Private")
    return t


def _add_record(t: Table, query: str, rec: AssignmentRecord) -> None:
    t.add_row(
        escape(query),
        escape(rec.oui),
        escape(rec.company_name),
        escape(rec.country_code),
        rec.block_size.value,
        "yes" if rec.is_private else "",
    )


def _log_level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity > 1:
        return logging.DEBUG
    return logging.WARNING


def _setup_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=_log_level(verbosity),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load(args: argparse.Namespace) -> Database:
    if args.csv:
        return Database.from_csv_file(args.csv)
    return default_database()


def cmd_mac(args: argparse.Namespace) -> int:
    console = Console()
    db = _load(args)

    table = _build_table("MAC lookup")
    rows_out: list[dict[str, object]] = []
    failures = 0

    for text in args.address:
        try:
            address = parse_mac(text)
        except AddressError as e:
            failures += 1
            table.add_row(escape(text), "", f"[red]{escape(e.reason)}[/red]", "", "", "")
            rows_out.append({"query": text, "error": e.reason})
            continue

        rec = db.lookup_address(address)
        if rec is None:
            failures += 1
            private = "yes" if is_private(address) else ""
            table.add_row(format_mac(address), "", "(unknown)", "", "", private)
            rows_out.append({"query": text, "record": None, "is_private": is_private(address)})
            continue

        _add_record(table, format_mac(address), rec)
        rows_out.append({"query": text, "record": rec.to_dict()})

    if args.json:
        console.print_json(json.dumps(rows_out))
    else:
        console.print(table)

    return 1 if failures else 0


def cmd_manufacturer(args: argparse.Namespace) -> int:
    console = Console()
    db = _load(args)

    if args.contains:
        records = db.search_manufacturers(args.name)
    else:
        records = db.lookup_by_manufacturer(args.name)

    if args.json:
        console.print_json(json.dumps([r.to_dict() for r in records]))
    elif records:
        table = _build_table("Manufacturer lookup")
        for rec in records:
            _add_record(table, args.name, rec)
        console.print(table)
    else:
        console.print(f"No entry found for: {escape(args.name)}")

    return 0 if records else 1


def cmd_stats(args: argparse.Namespace) -> int:
    console = Console()
    db = _load(args)

    manufacturers = db.unique_manufacturers()
    ouis = db.unique_ouis()
    blocks = {b.value: n for b, n in db.block_size_counts().items()}

    if args.json:
        console.print_json(
            json.dumps(
                {
                    "total_records": db.total_records,
                    "manufacturers": len(manufacturers),
                    "ouis": len(ouis),
                    "block_sizes": blocks,
                    "warnings": len(db.warnings),
                }
            )
        )
        return 0

    console.print(
        f"Records: [bold]{db.total_records}[/bold]  |  "
        f"Manufacturers: [bold]{len(manufacturers)}[/bold]  |  "
        f"OUIs: [bold]{len(ouis)}[/bold]  |  "
        f"Warnings: [bold]{len(db.warnings)}[/bold]"
    )

    t = Table(title="Block sizes")
    t.add_column("Block", style="bold")
    t.add_column("Records", justify="right")
    for label, n in blocks.items():
        t.add_row(label, str(n))
    console.print(t)

    if args.top > 0:
        console.print("\n[dim]====Manufacturers====[/dim]")
        for name in manufacturers[: args.top]:
            console.print(f"  {escape(name)}")
        if len(manufacturers) > args.top:
            console.print("  ...")
            for name in manufacturers[-args.top :]:
                console.print(f"  {escape(name)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mac-oui")
    p.add_argument(
        "--csv",
        default=os.environ.get(ENV_CSV),
        help=f"OUI CSV database (default: ${ENV_CSV}, else the bundled dataset)",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for build warnings)")
    sub = p.add_subparsers(dest="cmd", required=True)

    mac_cmd = sub.add_parser("mac", help="Look up the vendor block of MAC addresses")
    mac_cmd.add_argument("address", nargs="+", help="MAC address, e.g. 70:B3:D5:E7:4F:81")
    mac_cmd.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    mac_cmd.set_defaults(func=cmd_mac)

    manuf_cmd = sub.add_parser("manufacturer", help="List blocks assigned to a manufacturer")
    manuf_cmd.add_argument("name", help='Company name, e.g. "Apple, Inc"')
    manuf_cmd.add_argument("--contains", action="store_true", help="Substring match instead of exact name")
    manuf_cmd.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    manuf_cmd.set_defaults(func=cmd_manufacturer)

    stats_cmd = sub.add_parser("stats", help="Database statistics")
    stats_cmd.add_argument("--top", type=int, default=20, help="Show first/last N manufacturers")
    stats_cmd.add_argument("--json", action="store_true", help="Print JSON instead of text")
    stats_cmd.set_defaults(func=cmd_stats)

    return p


def main(argv: list[str] | None = None) -> None:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        _setup_logging(args.verbose)
        code = args.func(args)
        raise SystemExit(code)
    except KeyboardInterrupt:
        raise SystemExit(2)
    except Exception as e:
        Console().print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(2)
