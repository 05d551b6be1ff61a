"""Command line access to the staff review queues."""
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from courtrecords.api.client import CourtRecordsClient
from courtrecords.browser.table import DESCENDING, ASCENDING, TableState, TableView, browse
from courtrecords.core.errors import WorkflowError
from courtrecords.core.logging import configure_logging
from courtrecords.core.models import LayoutMode
from courtrecords.core.settings import Settings
from courtrecords.reporting.sinks import (
    push_to_google_sheets,
    table_rows_for_export,
    write_csv,
    write_excel,
)
from courtrecords.review.modal import AutoConfirmModal, ConsoleModal
from courtrecords.review.presentation import columns_for_stage, status_label
from courtrecords.review.stages import load_stages
from courtrecords.review.workflow import ReviewWorkflow


def build_client(settings: Settings) -> CourtRecordsClient:
    return CourtRecordsClient.from_settings(settings)


def _add_table_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default="", help="Case-insensitive text to match in any field")
    parser.add_argument("--from", dest="date_from", help="Earliest created date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", help="Latest created date (YYYY-MM-DD)")
    parser.add_argument("--sort", help="Column key to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--compact", action="store_true", help="Hide low-priority columns")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""

    parser = argparse.ArgumentParser(description="Review court applications from the terminal")
    parser.add_argument("--stage", default="probate-cr", help="Review queue to work on")
    parser.add_argument("--stages-file", type=Path, help="JSON file with extra stage definitions")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("stages", help="List the configured review queues")

    list_cmd = commands.add_parser("list", help="Show one page of the queue")
    _add_table_options(list_cmd)
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--page-size", type=int, help="Rows per page (default CRMS_PAGE_SIZE)")

    show_cmd = commands.add_parser("show", help="Show the full detail of one application")
    show_cmd.add_argument("record_id")

    for name in ("approve", "reject"):
        action_cmd = commands.add_parser(name, help=f"{name.capitalize()} one application")
        action_cmd.add_argument("record_id")
        action_cmd.add_argument("--remarks", default="", help="Reviewer remarks")
        action_cmd.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    export_cmd = commands.add_parser("export", help="Export the filtered queue")
    _add_table_options(export_cmd)
    export_cmd.add_argument("--sink", choices=["csv", "excel", "sheets"], default="csv")
    export_cmd.add_argument("--output", type=Path, default=Path("output/records.csv"))
    export_cmd.add_argument("--spreadsheet-id", help="Google Sheets spreadsheet ID for the sheets sink")
    export_cmd.add_argument("--worksheet", default="Sheet1")
    export_cmd.add_argument("--service-account", type=Path)
    return parser


def _table_state(args: argparse.Namespace, page: int = 1) -> TableState:
    return TableState(
        search=args.search,
        date_start=args.date_from,
        date_end=args.date_to,
        sort_key=args.sort,
        sort_direction=DESCENDING if args.desc else ASCENDING,
        page=page,
    )


def format_table(view: TableView) -> str:
    """Render a table view as aligned plain text."""

    if view.is_empty:
        return "No records found."
    headers = [column.label for column in view.columns]
    body = [
        ["" if row.cells[column.key] is None else str(row.cells[column.key]) for column in view.columns]
        for row in view.rows
    ]
    widths = [max(len(cell) for cell in column) for column in zip(headers, *body)]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip() for line in [headers, *body]]
    lines.append("")
    lines.append(f"{view.summary} (page {view.page} of {view.page_count})")
    return "\n".join(lines)


def _print_detail(workflow: ReviewWorkflow, maturity_days: int) -> None:
    record = workflow.selected or {}
    print(f"Status: {status_label(record.get('status'))}")
    for key, value in record.items():
        if isinstance(value, list):
            print(f"{key}: {len(value)} item(s)")
        else:
            print(f"{key}: {'' if value is None else value}")
    maturity = workflow.maturity(maturity_days)
    if maturity:
        print(f"Gazette: {maturity.label} ({maturity.days_label})")
    actions = workflow.available_actions
    print(f"Actions: {', '.join(actions) if actions else 'none (read-only)'}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entrypoint for running review operations from the command line."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = Settings.from_env()
    stages = load_stages(args.stages_file or settings.stages_file)

    if args.command == "stages":
        for stage in stages.values():
            print(f"{stage.name:<20} {stage.title}")
        return 0

    stage = stages.get(args.stage)
    if stage is None:
        print(f"Unknown stage {args.stage!r}. Choose from: {', '.join(stages)}", file=sys.stderr)
        return 2

    yes = getattr(args, "yes", False)
    workflow = ReviewWorkflow(build_client(settings), stage, modal=AutoConfirmModal() if yes else ConsoleModal())
    columns = columns_for_stage(
        stage.name, today=workflow.today(), threshold_days=settings.maturity_days
    )

    if args.command in {"list", "export"} or not stage.detail_path:
        if not workflow.refresh():
            print(workflow.error, file=sys.stderr)
            return 1

    if args.command == "list":
        view = browse(
            columns,
            workflow.records,
            _table_state(args, page=args.page),
            layout=LayoutMode.COMPACT if args.compact else LayoutMode.NORMAL,
            page_size=args.page_size or settings.page_size,
        )
        print(format_table(view))
        return 0

    if args.command == "export":
        view = browse(
            columns,
            workflow.records,
            _table_state(args),
            layout=LayoutMode.COMPACT if args.compact else LayoutMode.NORMAL,
        )
        rows: List[dict] = table_rows_for_export(view)
        if args.sink == "excel":
            target = args.output.with_suffix(".xlsx")
            write_excel(rows, target, sheet_title=stage.name)
        elif args.sink == "sheets":
            if not args.spreadsheet_id:
                print("--spreadsheet-id is required for the sheets sink", file=sys.stderr)
                return 2
            push_to_google_sheets(
                rows,
                spreadsheet_id=args.spreadsheet_id,
                worksheet_title=args.worksheet,
                service_account_path=args.service_account,
            )
            target = args.spreadsheet_id
        else:
            target = args.output
            write_csv(rows, target)
        print(f"Exported {len(rows)} record(s) to {target}")
        return 0

    if not workflow.select(args.record_id):
        print(workflow.detail_error, file=sys.stderr)
        return 1

    if args.command == "show":
        _print_detail(workflow, settings.maturity_days)
        return 0

    try:
        if args.command == "approve":
            done = workflow.approve(args.remarks)
        else:
            done = workflow.reject(args.remarks)
    except WorkflowError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if not done:
        if workflow.action_error:
            print(workflow.action_error, file=sys.stderr)
            return 1
        print("Cancelled.")
        return 0
    verb = "approved" if args.command == "approve" else "rejected"
    print(f"Application {args.record_id} {verb}. {len(workflow.records)} record(s) remain in {stage.name}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
