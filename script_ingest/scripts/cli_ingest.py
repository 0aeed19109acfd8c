#!/usr/bin/env python3
"""CLI entry point for script ingestion."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

load_dotenv()

KINDS = ["auto", "screenplay", "transcript", "table"]


def setup_logging(verbose: bool = False):
    """Configure logging."""
    from script_ingest.config import settings

    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert screenplays, transcripts and tables into script lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Auto-detect each input and print a summary
  script-ingest episode01.txt episode02.fountain

  # Spreadsheet export with explicit columns, written to JSON
  script-ingest lines.csv --role-column "Character" --text-column "English" -o out.json

  # Second sheet of a JSON workbook, keeping rows without a role
  script-ingest workbook.json --sheet 1 --keep-empty-roles

  # Role list with replica counts
  script-ingest roles.csv --roles

  # Validate records before persistence
  script-ingest episode01.txt --validate -v
        """,
    )

    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Input files (.txt, .text, .fountain, .csv, .tsv, .json)",
    )
    parser.add_argument(
        "--kind",
        default="auto",
        choices=KINDS,
        help="Ingestion path for text files (default: auto)",
    )
    parser.add_argument(
        "--sheet",
        type=int,
        default=0,
        help="Sheet index for table inputs (default: 0)",
    )
    parser.add_argument("--role-column", help="Header of the role name column")
    parser.add_argument("--timecode-column", help="Header of the timecode column")
    parser.add_argument("--text-column", help="Header of the source text column")
    parser.add_argument("--translation-column", help="Header of the translation column")
    parser.add_argument("--status-column", help="Header of the recording status column")
    parser.add_argument("--notes-column", help="Header of the notes column")
    parser.add_argument(
        "--keep-empty-roles",
        action="store_true",
        help="Keep table rows whose role cell is empty",
    )
    parser.add_argument(
        "--roles",
        action="store_true",
        help="Output a role list with replica counts instead of script lines",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate records and report rejected lines",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write results as JSON to this file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def column_overrides(args) -> dict:
    """Column mapping fields given on the command line."""
    overrides = {
        "role_name_column": args.role_column,
        "timecode_column": args.timecode_column,
        "source_text_column": args.text_column,
        "translation_column": args.translation_column,
        "rec_status_column": args.status_column,
        "notes_column": args.notes_column,
    }
    return {name: value for name, value in overrides.items() if value}


def load_tables(file_path: Path, kind: str):
    """Read a table input, or return None for text ingested as text."""
    from script_ingest.ingestion.loader import (
        is_table_file,
        parse_delimited_text,
        read_table_file,
        read_text_file,
    )

    if is_table_file(file_path):
        return read_table_file(file_path)
    if kind == "table":
        return [parse_delimited_text(read_text_file(file_path), sheet_name=file_path.stem)]
    return None


def ingest_one(pipeline, file_path: Path, args):
    """Ingest a single file; returns (JSON-ready payload, diagnostics)."""
    from script_ingest.ingestion import (
        InputKind,
        auto_detect_columns,
        detect_role_columns,
        read_text_file,
    )
    from script_ingest.ingestion.row_mapper import headers_of

    tables = load_tables(file_path, args.kind)
    kind = None if args.kind == "auto" else InputKind(args.kind)

    if args.roles:
        if tables is not None:
            mapping = replace(detect_role_columns(headers_of(tables, args.sheet)), sheet_index=args.sheet)
            if args.role_column:
                mapping = replace(mapping, role_name_column=args.role_column)
            result = pipeline.extract_roles_from_table(tables, mapping)
        else:
            result = pipeline.extract_roles_from_text(read_text_file(file_path), kind)
        result.source = str(file_path)
        return result.to_dict(), result.diagnostics

    if tables is None:
        result = pipeline.ingest_file(file_path, kind)
        return result.to_dict(), result.diagnostics

    mapping = replace(
        auto_detect_columns(headers_of(tables, args.sheet)),
        sheet_index=args.sheet,
        skip_empty_role=not args.keep_empty_roles,
        **column_overrides(args),
    )
    result = pipeline.ingest_table(tables, mapping)
    result.source = str(file_path)
    return result.to_dict(), result.diagnostics


def main():
    """Main entry point."""
    args = build_parser().parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    from script_ingest.ingestion import ScriptIngestionPipeline
    from script_ingest.models import DiagnosticSeverity, summarize_diagnostics

    pipeline = ScriptIngestionPipeline(validate=args.validate)

    results = []
    errors = []
    files_failed = 0
    total_lines = 0
    total_rejected = 0

    for file_path in tqdm(args.files, desc="Processing files"):
        try:
            output, diagnostics = ingest_one(pipeline, file_path, args)
        except ValueError as e:
            error_msg = f"Error processing {file_path}: {e}"
            logger.error(error_msg)
            errors.append(error_msg)
            files_failed += 1
            continue

        results.append(output)
        total_lines += len(output.get("lines", output.get("roles", [])))
        total_rejected += output.get("stats", {}).get("records_rejected", 0)

        for diagnostic in diagnostics:
            if diagnostic.severity != DiagnosticSeverity.INFO:
                logger.warning(f"{file_path}: {diagnostic.format()}")
        logger.info(f"{file_path}: {summarize_diagnostics(diagnostics)}")

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(results, f, ensure_ascii=False, indent=2)
        logger.info(f"Wrote results to {args.output}")

    # Print summary
    print("\n" + "=" * 50)
    print("INGESTION COMPLETE")
    print("=" * 50)
    print(f"Files processed:  {len(results)}")
    print(f"Files failed:     {files_failed}")
    print(f"{'Roles' if args.roles else 'Lines'} extracted: {total_lines}")
    if args.validate:
        print(f"Lines rejected:   {total_rejected}")

    if errors:
        print(f"\nErrors ({len(errors)}):")
        for error in errors[:5]:  # Show first 5 errors
            print(f"  - {error}")
        if len(errors) > 5:
            print(f"  ... and {len(errors) - 5} more")

    # Exit with error code if there were failures
    if files_failed > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
