"""
Main Entry Point for the Shift Grid engine

Command line access to exchange payloads: hours summary, import
validation report and schedule export, with logging setup and global
error handling.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .data_manager import DataManager
from .errors import ImportValidationError, ShiftGridError
from .hours import format_hours
from .models import SchedulingContext
from .reporting import ExportManager
from .scheduler_logic import ShiftScheduler
from .time_model import slots_in_domain


def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs"):
    """Setup application logging"""
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"shift_grid_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    return logging.getLogger(__name__)


def handle_exception(exc_type, exc_value, exc_traceback):
    """Global exception handler"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = logging.getLogger(__name__)
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback)
    )


def load_payload(path: str, strict: bool = False) -> DataManager:
    """Create a fresh engine state from a payload file"""
    data_manager = DataManager()
    data_manager.import_from_file(path, strict=strict)
    return data_manager


def build_context(day: str, teams: Optional[str]) -> SchedulingContext:
    selected = [team.strip() for team in teams.split(",") if team.strip()] if teams else []
    return SchedulingContext.create(selected, day)


def run_summary(args) -> int:
    """Print hours categories and the visible grid for one day"""
    data_manager = load_payload(args.payload, args.strict)
    scheduler = ShiftScheduler(data_manager)
    context = build_context(args.day, args.teams)

    employees = scheduler.visible_employees(context)
    stats = scheduler.get_hours_statistics(employees)

    print(f"Day {context.active_day}: {stats['total_employees']} employee(s) shown")
    if context.team_filter:
        print(f"  Teams: {', '.join(sorted(context.team_filter))}")

    for title, key in (("Fully Scheduled", "fully_scheduled"), ("Needs Hours", "needs_hours")):
        print(f"\n{title}:")
        for emp_id in stats[key]:
            emp_stats = stats["employee_stats"][emp_id]
            line = (f"  {emp_stats['name']} ({emp_id}): "
                    f"{format_hours(emp_stats['assigned_hours'])}/"
                    f"{format_hours(emp_stats['expected_hours'])} hours")
            if emp_stats["label"]:
                line += f" - {emp_stats['label']}"
            print(line)

    print("\nSchedule:")
    for slot in slots_in_domain():
        cells = []
        for location in scheduler.visible_locations(context):
            working = scheduler.working_employees(context.active_day, slot, location.name)
            if working:
                cells.append(f"{location.name}: {', '.join(emp.name for emp in working)}")
        if cells:
            print(f"  {slot.label}  " + "; ".join(cells))

    return 0


def run_validate(args) -> int:
    """Import a payload into a fresh engine and print the import report"""
    data_manager = DataManager()
    report = data_manager.import_from_file(args.payload, strict=args.strict)

    print(report.summary())
    for issue in report.issues:
        print(f"  - {issue}")

    return 0 if report.is_clean else 1


def run_export(args) -> int:
    """Export the schedule in the requested format"""
    data_manager = load_payload(args.payload, args.strict)
    export_manager = ExportManager(data_manager)

    output = args.output or export_manager.get_default_filename(args.day, args.format)
    if export_manager.export_schedule(args.day, args.format, output):
        print(f"Schedule exported to {output}")
        return 0

    print(f"Failed to export schedule to {output}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shift-grid",
        description="Shift assignment and conflict validation engine"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-dir", default="logs", help="Directory for log files; empty to disable")
    parser.add_argument("--strict", action="store_true",
                        help="Reject payloads whose assignments break forbidden hours or double-book")

    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="Show hours and grid occupancy for a day")
    summary.add_argument("payload", help="Exchange payload JSON file")
    summary.add_argument("--day", default="1", help="Day label (default: 1)")
    summary.add_argument("--teams", help="Comma separated team filter")
    summary.set_defaults(handler=run_summary)

    validate = subparsers.add_parser("validate", help="Report problems in a payload")
    validate.add_argument("payload", help="Exchange payload JSON file")
    validate.set_defaults(handler=run_validate)

    export = subparsers.add_parser("export", help="Export the schedule as PDF, Excel or CSV")
    export.add_argument("payload", help="Exchange payload JSON file")
    export.add_argument("--format", choices=["pdf", "excel", "csv"], default="pdf")
    export.add_argument("--day", default="1", help="Day label (default: 1)")
    export.add_argument("--output", "-o", help="Output file path")
    export.set_defaults(handler=run_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    sys.excepthook = handle_exception

    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level, args.log_dir or None)

    try:
        return args.handler(args)
    except ImportValidationError as e:
        logger.error(f"Import rejected: {e}")
        for issue in e.report.issues:
            print(f"  - {issue}")
        return 1
    except ShiftGridError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
