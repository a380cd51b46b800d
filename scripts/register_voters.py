"""Bulk-register voters from a CSV file into the configured record store."""

from __future__ import annotations

import argparse
import csv
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Register voters listed in a CSV file with voter_id,name columns.",
    )
    parser.add_argument(
        "csv_path",
        type=Path,
        help="CSV file with a header row containing voter_id and name.",
    )
    parser.add_argument(
        "--attempts",
        type=int,
        default=None,
        help="Retries per voter on write conflicts (default: CONFLICT_RETRY_ATTEMPTS).",
    )
    return parser.parse_args(argv)


def read_rows(csv_path: Path) -> list[tuple[str, str]]:
    """Return ``(voter_id, name)`` pairs, skipping blank ids."""
    with csv_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        missing = {"voter_id", "name"} - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"CSV is missing columns: {', '.join(sorted(missing))}")
        return [
            (row["voter_id"].strip(), row["name"].strip())
            for row in reader
            if (row.get("voter_id") or "").strip()
        ]


def register_all(
    service,
    rows: Iterable[tuple[str, str]],
    attempts: int,
) -> tuple[list[str], list[str]]:
    """Register each voter; return ``(created, already_registered)`` ids."""
    from app.services.voting_service import retry_on_conflict
    from app.utils.errors import StateConflictError

    created: list[str] = []
    existing: list[str] = []
    for voter_id, name in rows:
        try:
            retry_on_conflict(lambda: service.register_voter(voter_id, name), attempts)
        except StateConflictError as exc:
            if exc.code != "VOTER_EXISTS":
                raise
            existing.append(voter_id)
            continue
        created.append(voter_id)
    return created, existing


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)

    from app.config import settings
    from app.dependencies import get_record_store
    from app.services.voting_service import VotingService

    if settings.record_store.strip().lower() == "memory":
        raise SystemExit(
            "RECORD_STORE is 'memory'; registrations would be lost when this script exits. "
            "Set RECORD_STORE=supabase with SUPABASE_URL and SUPABASE_SERVICE_KEY."
        )

    attempts = args.attempts or settings.conflict_retry_attempts
    service = VotingService(get_record_store())
    created, existing = register_all(service, read_rows(args.csv_path), attempts)

    print(f"Registered {len(created)} voter(s)")
    if existing:
        print(f"Skipped {len(existing)} already registered: {', '.join(existing)}")


if __name__ == "__main__":
    main()
