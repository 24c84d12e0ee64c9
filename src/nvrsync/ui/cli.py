from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, date, datetime
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from nvrsync.app import RunOptions, ledger_summary, run_batch
from nvrsync.config import OBJECT_KINDS, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise Naturvårdsregistret protected areas with Wikidata and Commons"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log delta details at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Reconcile one object kind")
    run.add_argument("kind", choices=sorted(OBJECT_KINDS), help="Object kind to process")
    run.add_argument(
        "--published-date",
        type=str,
        required=True,
        help="Publication date (YYYY-MM-DD) of the dataset snapshot",
    )
    run.add_argument(
        "--retrieved-date",
        type=str,
        help="Date (YYYY-MM-DD) the snapshot was downloaded (defaults to the publication date)",
    )
    run.add_argument(
        "--reprocess-before",
        type=str,
        help="ISO-8601 timestamp; successful entries started before it are processed again",
    )
    run.add_argument(
        "--retained-generations",
        type=int,
        help="Ledger entries kept per object, the newest included (defaults to config)",
    )
    run.add_argument(
        "--dry-run",
        action="store_true",
        help="Read remote state but write nothing",
    )
    run.add_argument(
        "--sandbox",
        action="store_true",
        help="Write shape documents under the sandbox title prefix",
    )
    run.add_argument(
        "--no-geometry",
        dest="evaluate_geometry",
        action="store_false",
        help="Skip coordinate and shape document reconciliation",
    )
    run.add_argument(
        "--skip-entity-check",
        dest="verify_entities",
        action="store_false",
        help="Do not verify that named properties and entities exist before starting",
    )

    summary = subparsers.add_parser("summary", help="Summarise the progress ledger of a kind")
    summary.add_argument("kind", choices=sorted(OBJECT_KINDS), help="Object kind to summarise")

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _build_run_options(args: argparse.Namespace) -> RunOptions:
    published = _parse_date(args.published_date)
    retrieved = _parse_date(args.retrieved_date) if args.retrieved_date else published
    if retrieved < published:
        raise ValueError("Retrieval date must not precede the publication date")
    if args.retained_generations is not None and args.retained_generations < 1:
        raise ValueError("At least one ledger generation must be retained")
    return RunOptions(
        published=published,
        retrieved=retrieved,
        reprocess_before=(
            _parse_iso_datetime(args.reprocess_before) if args.reprocess_before else None
        ),
        retained_generations=args.retained_generations,
        dry_run=args.dry_run,
        sandbox=args.sandbox,
        evaluate_geometry=args.evaluate_geometry,
        verify_entities=args.verify_entities,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    configure_logging(level=logging.DEBUG if "--verbose" in args_list else logging.INFO)
    parsed_args: argparse.Namespace
    options: RunOptions | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "run":
            options = _build_run_options(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "run" and options is not None:
            result = run_batch(parsed_args.kind, options)
            if result.failed:
                log.warning("%d objects failed, rerun to retry them", result.failed)
        elif parsed_args.command == "summary":
            for line in ledger_summary(parsed_args.kind).lines():
                log.info(line)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def entrypoint() -> None:
    """Console script: load `.env`, install the SIGINT handler and run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
