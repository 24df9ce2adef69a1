"""
CLI (Command Line Interface).

Quick terminal commands over a catalog workbook, e.g.:

    classpicker list catalog.xlsx --query "ریاضی"
    classpicker pick 1234 5678
    classpicker unpick 1234
    classpicker plan catalog.xlsx --max-credit 20
    classpicker conflicts catalog.xlsx
    classpicker credits field_lessons.xlsx

Picked class ids and cached credit mappings are kept in the data directory
(--data-dir, or CLASSPICKER_DATA_DIR).
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from classpicker import __version__
from classpicker.catalog import search
from classpicker.config import DEFAULT_MAX_CREDIT, configure_logging, picked_ids_path, preferences_path
from classpicker.conflicts import find_conflicts, find_exam_conflicts, plan_week
from classpicker.errors import DatasetError
from classpicker.loader import DatasetLoader
from classpicker.model import ClassInfo, to_dict
from classpicker.storage import JsonFileStore, load_picked_ids, save_picked_ids
from classpicker.timeutil import DAY_NAMES, format_exam, format_session

logger = logging.getLogger(__name__)

console = Console()


def _make_loader(args: argparse.Namespace) -> DatasetLoader:
    store = JsonFileStore(preferences_path(args.data_dir))
    return DatasetLoader(store=store, use_store=not args.no_cache)


def _picked_path(args: argparse.Namespace) -> Path:
    return picked_ids_path(args.data_dir)


def _record_label(record: ClassInfo) -> str:
    return f"{record.course_title} [{record.id}]"


def _cmd_list(args: argparse.Namespace) -> int:
    """
    Load a workbook and print matching classes (max --limit rows).
    """
    records = _make_loader(args).load_path(args.file)
    matches = search(records, args.query or "")
    if not matches:
        console.print("No results.")
        return 0

    if args.json:
        console.print_json(json.dumps([to_dict(r) for r in matches[: args.limit]], ensure_ascii=False))
        return 0

    picked = load_picked_ids(_picked_path(args))

    table = Table(title=f"Classes ({len(matches)} of {len(records)})", box=box.SIMPLE)
    table.add_column("", justify="center")
    table.add_column("ID", justify="right")
    table.add_column("Course", justify="right")
    table.add_column("Title")
    table.add_column("Credit", justify="right")
    table.add_column("Capacity", justify="right")
    table.add_column("Teachers")
    table.add_column("Sessions")
    table.add_column("Exams")

    for r in matches[: args.limit]:
        table.add_row(
            "*" if r.id in picked else "",
            str(r.id),
            str(r.course_id),
            escape(r.course_title),
            "" if r.credit is None else str(r.credit),
            str(r.capacity),
            escape(", ".join(r.teachers)),
            escape("\n".join(format_session(s, append_place=True) for s in r.sessions)),
            escape("\n".join(format_exam(e) for e in r.exams)),
        )
    console.print(table)

    if len(matches) > args.limit:
        console.print(f"... and {len(matches) - args.limit} more results")
    return 0


def _cmd_pick(args: argparse.Namespace) -> int:
    path = _picked_path(args)
    picked = load_picked_ids(path)
    added = [i for i in args.class_ids if i not in picked]
    picked.update(args.class_ids)
    save_picked_ids(picked, path)
    for i in added:
        console.print(f"Picked: {i}")
    console.print(f"Picked classes: {len(picked)}")
    return 0


def _cmd_unpick(args: argparse.Namespace) -> int:
    path = _picked_path(args)
    picked = load_picked_ids(path)
    if args.all:
        picked.clear()
    for i in args.class_ids:
        if i in picked:
            picked.remove(i)
            console.print(f"Removed: {i}")
        else:
            console.print(f"Not picked: {i}")
    save_picked_ids(picked, path)
    console.print(f"Picked classes: {len(picked)}")
    return 0


def _picked_records(args: argparse.Namespace) -> list[ClassInfo]:
    records = _make_loader(args).load_path(args.file)
    picked = load_picked_ids(_picked_path(args))
    missing = picked - {r.id for r in records}
    if missing:
        logger.warning("picked ids not in this dataset: %s", sorted(missing))
    return [r for r in records if r.id in picked]


def _cmd_plan(args: argparse.Namespace) -> int:
    """
    Print the weekly plan of the picked classes, conflicts in red.
    """
    picked = _picked_records(args)
    if not picked:
        console.print("No picked classes.")
        return 0

    plan = plan_week(picked, args.max_credit)

    credit_style = "bold red" if plan.over_limit else "bold"
    table = Table(
        title=f"Picked classes ([{credit_style}]{plan.total_credit}[/] / {plan.max_credit} credits)",
        box=box.SIMPLE,
    )
    table.add_column("Day", justify="right")
    table.add_column("Sessions")

    for day, items in plan.days.items():
        lines = []
        for p in items:
            s = p.session
            span = escape(f"[{format_session(s, append_place=True, full_time=True)}]")
            if p.time_overlap:
                span = f"[red]{span}[/]"
            line = f"{span} [bold]{escape(_record_label(p.record))}[/]"
            if p.record.exams:
                exams = escape(", ".join(format_exam(e) for e in p.record.exams))
                line += f" [red](exam: {exams})[/]" if p.exam_overlap else f" (exam: {exams})"
            lines.append(line)
        table.add_row(f"{escape(DAY_NAMES[day])} ({len(items)})", "\n".join(lines))

    console.print(table)
    if plan.has_conflicts:
        console.print("[red]The plan has conflicts.[/] See: classpicker conflicts FILE")
    return 0


def _cmd_conflicts(args: argparse.Namespace) -> int:
    picked = _picked_records(args)
    sessions = find_conflicts(picked)
    exams = find_exam_conflicts(picked)

    if not sessions and not exams:
        console.print("No conflicts found.")
        return 0

    console.print(f"Conflicts found: {len(sessions) + len(exams)}")
    for r1, s1, r2, s2 in sessions:
        console.print(
            escape(f"- {format_session(s1, full_time=True)} {_record_label(r1)}")
            + "  <->  "
            + escape(f"{format_session(s2, full_time=True)} {_record_label(r2)}")
        )
    for r1, r2 in exams:
        console.print(escape(f"- exam date: {_record_label(r1)}  <->  {_record_label(r2)}"))
    return 0


def _cmd_credits(args: argparse.Namespace) -> int:
    """
    Import a companion credit workbook into the preference store.
    """
    loader = _make_loader(args)
    path = Path(args.file)
    count = loader.load_credit_mappings(path.read_bytes(), path.suffix)
    console.print(f"Known credit mappings: {count}")
    if args.no_cache:
        console.print("(not saved: --no-cache)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classpicker", description="Course catalog planner")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory for picked ids and preferences")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write cached credit mappings")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List or search classes in a workbook")
    p_list.add_argument("file", type=str, help="Catalog workbook (.xlsx)")
    p_list.add_argument("--query", "-q", type=str, default="", help="Search words")
    p_list.add_argument("--limit", type=int, default=20, help="Maximum rows to print")
    p_list.add_argument("--json", action="store_true", help="Print records as JSON")

    p_pick = sub.add_parser("pick", help="Pick classes by id")
    p_pick.add_argument("class_ids", type=int, nargs="+", help="Class id(s)")

    p_unpick = sub.add_parser("unpick", help="Remove picked classes by id")
    p_unpick.add_argument("class_ids", type=int, nargs="*", help="Class id(s)")
    p_unpick.add_argument("--all", action="store_true", help="Clear every pick")

    p_plan = sub.add_parser("plan", help="Show the weekly plan of picked classes")
    p_plan.add_argument("file", type=str, help="Catalog workbook (.xlsx)")
    p_plan.add_argument("--max-credit", type=int, default=DEFAULT_MAX_CREDIT, help="Credit limit")

    p_conf = sub.add_parser("conflicts", help="Show conflicts among picked classes")
    p_conf.add_argument("file", type=str, help="Catalog workbook (.xlsx)")

    p_credits = sub.add_parser("credits", help="Import course credits from a companion workbook")
    p_credits.add_argument("file", type=str, help="Credit workbook (.xlsx)")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    handlers = {
        "list": _cmd_list,
        "pick": _cmd_pick,
        "unpick": _cmd_unpick,
        "plan": _cmd_plan,
        "conflicts": _cmd_conflicts,
        "credits": _cmd_credits,
    }
    handler = handlers.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        raise SystemExit(handler(args))
    except DatasetError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1)
    except OSError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1)
