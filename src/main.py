import csv
import logging
import os
import sys
from typing import Iterable, TextIO

from currency import format_amount
from engine import LedgerEngine
from models import AccountSnapshot

logger = logging.getLogger(__name__)

SUMMARY_HEADER = "client,available,held,total,locked"


def get_log_level() -> int:
    """Level from the LOG_LEVEL environment variable, WARNING if unset or unknown."""
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "WARNING").upper())
    if not isinstance(level, int):
        return logging.WARNING
    return level


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def write_summary(accounts: Iterable[AccountSnapshot], out: TextIO) -> None:
    """Write one row per client, ordered by client id."""
    print(SUMMARY_HEADER, file=out)
    for account in sorted(accounts, key=lambda a: a.client_id):
        print(
            f"{account.client_id},"
            f"{format_amount(account.available)},"
            f"{format_amount(account.held)},"
            f"{format_amount(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


def main():
    configure_logging()

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = LedgerEngine()
    try:
        ledger = engine.process_file(filepath)
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {filepath}: {e}")
        sys.exit(1)

    write_summary(ledger.accounts(), sys.stdout)
    print(engine.stats, file=sys.stderr)


if __name__ == "__main__":
    main()
