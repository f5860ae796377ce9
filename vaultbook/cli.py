"""CLI interface for Vaultbook - regenerate the derived notes of a study vault."""

import argparse
import logging
import sys

from vaultbook.config import get_settings
from vaultbook.errors import ConfigurationError
from vaultbook.pipeline import RunReport, run_pipeline


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )


def print_summary(report: RunReport) -> None:
    """Print a short summary of the run."""
    print(f"\n{Colors.BOLD}Vaultbook run{Colors.RESET}")
    if report.snapshot:
        print(f"  Backup:     {report.snapshot.name}")
    if report.rotation and report.rotation.removed:
        print(f"  Rotated:    {len(report.rotation.removed)} snapshots removed")
    print(f"  Topics:     {report.topics}")
    print(f"  Homepages:  {len(report.homepages)}")
    if report.statistics:
        print(f"  Statistics: {report.statistics.total} tagged lines")
    print(f"  Banners:    {report.bannered} notes updated")
    print(f"  Playlist:   {len(report.playlist)} entries")

    if report.failures:
        print(f"\n{Colors.YELLOW}{len(report.failures)} failures:{Colors.RESET}")
        for failure in report.failures:
            print(f"  - {failure}")
    else:
        print(f"\n{Colors.GREEN}✓ Done{Colors.RESET}")


def cli() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="vaultbook",
        description="Regenerate homepages, banners, statistics and the export playlist of a vault.",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Skip the vault snapshot and backup rotation",
    )
    parser.add_argument(
        "--no-numbering",
        action="store_true",
        help="Disable book-style section numbers on homepages",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    # Load settings
    try:
        settings = get_settings()
        logger.info(f"{Colors.DIM}Vault: {settings.vault_path}{Colors.RESET}")
    except Exception as e:
        logger.error(f"{Colors.RED}Failed to load settings: {e}{Colors.RESET}")
        logger.error(f"{Colors.RED}Make sure you have a .env file with VAULT_PATH.{Colors.RESET}")
        sys.exit(1)

    try:
        report = run_pipeline(
            settings,
            backup=not args.no_backup,
            book_numbering=False if args.no_numbering else None,
        )
    except ConfigurationError as e:
        logger.error(f"{Colors.RED}{e}{Colors.RESET}")
        sys.exit(1)

    print_summary(report)
    if not report.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
