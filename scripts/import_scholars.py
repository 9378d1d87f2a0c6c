"""
Run the scholar import pipeline on a CSV file from the command line.

Usage:
    # Dry run: show the auto-mapping and validation issues
    python scripts/import_scholars.py data/scholars.csv

    # Override a column and commit the valid rows
    python scripts/import_scholars.py data/scholars.csv \
        --map "Apelyido=lastName" --map "Notes=ignore" --commit

    # Write an empty template
    python scripts/import_scholars.py --template scholars_template.csv
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Allow imports from the project root when running as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from exceptions import AppError
from models.scholar import CanonicalField, FIELD_LABELS
from services.import_workflow_service import ImportWorkflowService
from services.scholar_store_service import InMemoryScholarStore
from services.template_service import build_template_csv


def parse_overrides(values: list[str]) -> list[tuple[str, CanonicalField]]:
    """Parse --map "Header=field" arguments."""
    overrides = []
    for value in values:
        header, sep, target = value.partition("=")
        if not sep:
            raise ValueError(f"Expected Header=field, got: {value}")
        overrides.append((header.strip(), CanonicalField(target.strip())))
    return overrides


def print_mapping(service: ImportWorkflowService) -> None:
    print("\nColumn mapping:")
    for header, target in service.session.mapping.items():
        print(f"  {header:<30} -> {FIELD_LABELS[target]}")


def print_preview(service: ImportWorkflowService, limit: int) -> None:
    shown, more = service.issue_summary(limit)
    print(f"\nValid rows:   {service.valid_count}")
    print(f"Invalid rows: {service.invalid_count}")

    if shown:
        print(f"\n{len(service.session.issues)} validation issue(s), these rows will be skipped:")
        for issue in shown:
            print(f"  Row {issue.row:<6} {issue.field:<20} {issue.message}")
        if more:
            print(f"  +{more} more issues...")


def run(args: argparse.Namespace) -> int:
    if args.template:
        Path(args.template).write_text(build_template_csv(), encoding="utf-8")
        print(f"[OK] Template written to {args.template}")
        return 0

    path = Path(args.file)
    if not path.exists():
        print(f"[ERROR] File not found: {path}")
        return 1

    service = ImportWorkflowService(store=InMemoryScholarStore(delay_seconds=0))

    print("=" * 60)
    print("SCHOLAR IMPORT")
    print("=" * 60)

    service.accept_text(path.name, path.read_text(encoding="utf-8-sig"))
    print(f"File: {path.name} ({service.session.row_count} rows)")

    for header, target in parse_overrides(args.map):
        service.update_mapping(header, target)

    print_mapping(service)

    service.proceed_to_preview()
    print_preview(service, args.show_issues)

    if not args.commit:
        print("\nDry run. Pass --commit to import the valid rows.")
        return 0

    result = asyncio.run(service.commit())
    print(f"\n[OK] {result.valid_count} scholar(s) imported, {result.skipped_count} row(s) skipped")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Import scholars from a CSV file."
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="CSV file to import",
    )
    parser.add_argument(
        "--map",
        action="append",
        default=[],
        help='Override a column mapping, e.g. "Apelyido=lastName" (repeatable)',
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Import the valid rows after validation",
    )
    parser.add_argument(
        "--show-issues",
        type=int,
        default=8,
        help="Validation issues to list before summarizing the rest (default: 8)",
    )
    parser.add_argument(
        "--template",
        default="",
        help="Write an empty import template to this path and exit",
    )
    args = parser.parse_args()

    if not args.file and not args.template:
        parser.error("a CSV file or --template is required")

    try:
        sys.exit(run(args))
    except (AppError, ValueError) as e:
        print(f"[ERROR] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
