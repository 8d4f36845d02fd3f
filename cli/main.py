#!/usr/bin/env python3
"""
Design Planner CLI - inspect slots and preview drops from the terminal.
"""

import sys
from datetime import date
from pathlib import Path

import yaml

from planner import config, db, paths
from planner.config import SLOT_COLUMNS
from planner.observability import configure_logging
from planner.slot_layout import (
    HalfDay,
    SlotBounds,
    SlotKey,
    SlotManager,
    SlotTask,
    place_task,
    resolve_column,
    validate_drop,
)


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths, strict=False))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths, strict=False)))


def render_slot(tasks: list[SlotTask]):
    """Print a slot as a table plus a one-line column bar."""
    if not tasks:
        print("  (empty slot)")
        return

    rows = [[t.id, t.title or "-", f"{t.column_start:g}", f"{t.width:g}"] for t in tasks]
    print_table(["ID", "Title", "Start", "Width"], rows)

    cells = []
    for task in tasks:
        label = str(task.id)
        cells.append(f"[{label:^{max(len(label), int(task.width * 4) - 2)}}]")
    print("\n  " + "".join(cells))


def cmd_init(args):
    """Create the app home and the assignments table."""
    home = paths.app_home()
    paths.config_dir()
    paths.data_dir()
    version = db.ensure_schema()
    print(f"App home:       {home}")
    print(f"Database:       {db.get_db_path()}")
    print(f"Schema version: {version}")


def cmd_slot(args):
    """Show the stored arrangement of one slot."""
    if len(args) < 3:
        print("Usage: slot <employee> <YYYY-MM-DD> <am|pm>")
        return

    try:
        key = SlotKey(args[0], date.fromisoformat(args[1]), HalfDay.parse(args[2]))
    except ValueError as e:
        print(f"Invalid slot: {e}")
        return

    manager = SlotManager()
    report = manager.check_capacity(key)

    print_header(f"SLOT {key.label}")
    render_slot(report.tasks)
    print(f"\n  Tasks: {report.current}/{report.max_capacity}", end="")
    if report.is_overbooked:
        print("  ⚠️  OVERBOOKED")
    elif not report.is_available:
        print("  (full)")
    else:
        print()


def _load_scenario(path: Path) -> dict:
    with open(path) as f:
        scenario = yaml.safe_load(f) or {}
    if not isinstance(scenario, dict) or "incoming" not in scenario:
        raise ValueError(f"{path}: expected a mapping with an 'incoming' task")
    return scenario


def _task(data: dict) -> SlotTask:
    return SlotTask(
        id=data["id"],
        column_start=data.get("column_start", 0),
        width=data.get("width"),
        title=data.get("title", ""),
    )


def _target_column(scenario: dict) -> int:
    """Column 0-3 from target_column, or from drop_x over bounds."""
    if "target_column" in scenario:
        target = int(scenario["target_column"])
        if not 0 <= target <= SLOT_COLUMNS - 1:
            raise ValueError(f"target_column {target} outside 0-{SLOT_COLUMNS - 1}")
        return target
    if "drop_x" in scenario and "bounds" in scenario:
        raw = scenario["bounds"]
        bounds = SlotBounds(left=float(raw["left"]), width=float(raw["width"]))
        return resolve_column(float(scenario["drop_x"]), bounds)
    raise ValueError("scenario needs target_column, or drop_x and bounds")


def cmd_preview(args):
    """
    Preview a drop described in a YAML file without touching the database.

    The file holds ``existing`` (list of tasks), ``incoming`` (one task) and
    either ``target_column`` or ``drop_x`` with ``bounds: {left, width}``.
    """
    if not args:
        print("Usage: preview <scenario.yaml>")
        return

    try:
        scenario = _load_scenario(Path(args[0]))
        existing = [_task(t) for t in scenario.get("existing") or []]
        incoming = _task(scenario["incoming"])
    except (OSError, KeyError, TypeError, ValueError, yaml.YAMLError) as e:
        print(f"Cannot load scenario: {e}")
        return

    try:
        target = _target_column(scenario)
    except (KeyError, TypeError, ValueError) as e:
        print(f"Invalid drop position: {e}")
        return

    print_header("BEFORE")
    render_slot(existing)

    decision = validate_drop(existing, incoming)
    if not decision.accepted:
        print(f"\n❌ REJECTED: {decision.reason} ({decision.code})")
        return

    print_header(f"AFTER dropping {incoming.id} on column {target}")
    render_slot(place_task(existing, incoming, target))


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    settings = config.load_settings()
    port = settings["api_port"]
    if "--port" in args:
        index = args.index("--port")
        if index + 1 < len(args):
            port = int(args[index + 1])

    uvicorn.run("api.server:app", host=settings["api_host"], port=port)


def cmd_help(args):
    """Show help."""
    print("""
Design Planner CLI

USAGE: python -m cli.main <command> [args]

COMMANDS:

  init                        Create app home and database
  slot <emp> <date> <am|pm>   Show a stored slot
  preview <scenario.yaml>     Preview a drop without saving it
  serve [--port N]            Run the API server
  help                        Show this help
""")


COMMANDS = {
    "init": cmd_init,
    "slot": cmd_slot,
    "s": cmd_slot,
    "preview": cmd_preview,
    "p": cmd_preview,
    "serve": cmd_serve,
    "help": cmd_help,
    "h": cmd_help,
}


def main(argv: list = None):
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv
    settings = config.load_settings()
    configure_logging(settings["log_level"], settings["json_logs"])

    if not argv:
        cmd_help([])
        return

    cmd = argv[0]
    args = argv[1:]

    if cmd in COMMANDS:
        COMMANDS[cmd](args)
    else:
        print(f"Unknown command: {cmd}")
        print("Run 'help' for available commands.")


if __name__ == "__main__":
    main()
