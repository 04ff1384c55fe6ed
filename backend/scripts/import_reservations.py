"""Import exported reservation CSV files into the lodging database."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from lodging_admin.core.errors import NotificationError, RepositoryError, UnresolvedInnError
from lodging_admin.db.session import dispose_engine, get_sessionmaker
from lodging_admin.repositories import SqlInnRepository, SqlReservationRepository
from lodging_admin.services import notification_service
from lodging_admin.services.csv_import_service import parse_documents
from lodging_admin.services.reconciliation_service import ImportType, import_reservations

LOGGER = logging.getLogger("import_reservations")


def configure_logging(log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    for logger in (LOGGER, logging.getLogger("lodging_admin")):
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
        logger.addHandler(console)


def collect_csv_paths(paths: list[Path]) -> list[Path]:
    """Expand directories and keep only ``.csv`` files."""
    collected: list[Path] = []
    for path in paths:
        if path.is_dir():
            collected.extend(sorted(p for p in path.iterdir() if p.suffix.lower() == ".csv"))
        elif path.suffix.lower() == ".csv":
            collected.append(path)
        else:
            LOGGER.info("Skipping non-CSV file %s", path)
    return collected


async def run_import(
    paths: list[Path], *, import_type: ImportType, dry_run: bool, notify: bool
) -> int:
    texts = [path.read_text(encoding="utf-8-sig") for path in paths]
    batch = parse_documents(texts)
    LOGGER.info(
        "Parsed %d rows from %d files (%d malformed)",
        batch.total_rows,
        len(paths),
        batch.malformed_rows,
    )

    sessionmaker = get_sessionmaker()
    try:
        async with sessionmaker() as session:
            result = await import_reservations(
                batch.reservations,
                inn_repository=SqlInnRepository(session),
                reservation_repository=SqlReservationRepository(session),
                import_type=import_type,
                dry_run=dry_run,
            )
    finally:
        await dispose_engine()

    LOGGER.info(
        "%s: %d inserted, %d updated",
        "Dry run" if dry_run else "Import",
        result.inserted,
        result.updated,
    )
    if notify and import_type.notifies and not dry_run:
        try:
            await notification_service.notify_import(import_type, result.summaries)
        except NotificationError as exc:
            LOGGER.warning("Notification was not delivered: %s", exc)
    return len(result.reservations)


def main() -> None:
    parser = argparse.ArgumentParser(description="Import reservation CSV exports")
    parser.add_argument("paths", nargs="+", type=Path, help="CSV files or directories")
    parser.add_argument(
        "--type",
        dest="import_type",
        choices=[item.value for item in ImportType],
        default=ImportType.CHECKIN.value,
        help="Which export the files came from",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Reconcile without writing data"
    )
    parser.add_argument(
        "--no-notify", action="store_true", help="Skip the chat notification"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("imports/reservations.log"),
        help="Append log output to this file",
    )
    args = parser.parse_args()

    configure_logging(args.log_file)

    missing = [path for path in args.paths if not path.exists()]
    if missing:
        LOGGER.error("Paths not found: %s", ", ".join(str(path) for path in missing))
        raise SystemExit(1)
    csv_paths = collect_csv_paths(args.paths)
    if not csv_paths:
        LOGGER.error("No CSV files to import")
        raise SystemExit(1)

    try:
        asyncio.run(
            run_import(
                csv_paths,
                import_type=ImportType(args.import_type),
                dry_run=args.dry_run,
                notify=not args.no_notify,
            )
        )
    except UnresolvedInnError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(2) from exc
    except RepositoryError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(3) from exc


if __name__ == "__main__":
    main()
