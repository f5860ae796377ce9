"""Full indexing run: backup, rotation, homepages, statistics, banners, playlist."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from vaultbook.config import Settings
from vaultbook.errors import RotationError
from vaultbook.indexer.banner import BannerManager
from vaultbook.indexer.homepage import HomepageBuilder
from vaultbook.indexer.playlist import PlaylistGenerator
from vaultbook.indexer.scanner import VaultScanner
from vaultbook.indexer.stats import StatisticsAggregator, StatisticsRecord
from vaultbook.storage.rotation import RotationPolicy, RotationReport, rotate_pool
from vaultbook.storage.snapshots import BackupPool

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """What a run produced and what it had to skip."""

    snapshot: Path | None = None
    rotation: RotationReport | None = None
    topics: int = 0
    homepages: list[Path] = field(default_factory=list)
    portal: Path | None = None
    statistics: StatisticsRecord | None = None
    bannered: int = 0
    playlist: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.aborted


def backup_stage(settings: Settings, report: RunReport, now: datetime) -> bool:
    """Mirror the vault and rotate the pool. Returns False if the mirror failed."""
    pool = BackupPool(settings.backup_pool)

    try:
        report.snapshot = pool.create_snapshot(settings.vault_path, now).path
    except OSError as e:
        logger.error(f"Backup failed, leaving the vault untouched: {e}")
        report.failures.append(f"backup: {e}")
        return False

    policy = RotationPolicy(
        threshold=settings.backup_threshold_bytes,
        target=settings.backup_target_bytes,
        min_keep=settings.backup_min_keep,
    )
    try:
        report.rotation = rotate_pool(pool, policy)
    except RotationError as e:
        logger.error(f"{e} (failed: {', '.join(e.failed)})")
        report.rotation = e.report

    if report.rotation is not None:
        report.failures.extend(f"rotation: {name}" for name in report.rotation.failed)

    return True


def run_pipeline(
    settings: Settings,
    backup: bool = True,
    book_numbering: bool | None = None,
    now: datetime | None = None,
) -> RunReport:
    """Run every pass over the vault in order.

    Raises:
        ConfigurationError: If the vault layout is invalid; nothing is written
    """
    now = now or datetime.now()
    if book_numbering is None:
        book_numbering = settings.book_numbering

    report = RunReport()
    scanner = VaultScanner(settings.vault_path, revision_marker=settings.revision_marker)
    scanner.validate()

    if backup and not backup_stage(settings, report, now):
        report.aborted = True
        return report

    vault = scanner.scan()
    report.topics = len(vault.topics)

    builder = HomepageBuilder(vault, book_numbering=book_numbering)
    report.homepages = builder.build_all(now)
    report.portal = builder.build_portal(report.homepages, now, special_page=settings.special_page)
    report.failures.extend(builder.failures)

    aggregator = StatisticsAggregator()
    report.statistics = aggregator.collect(vault.members)
    aggregator.write(report.statistics, vault.portals_dir, now)
    report.failures.extend(aggregator.failures)

    banners = BannerManager()
    report.bannered = banners.apply_all(vault.members + vault.support_notes, now)
    report.failures.extend(banners.failures)

    generator = PlaylistGenerator(
        vault,
        part_only_marker=settings.part_only_marker,
        special_page=settings.special_page,
    )
    playlist = generator.build()
    generator.write(playlist)
    report.playlist = playlist.entries
    report.failures.extend(generator.failures)

    logger.info(f"Run finished with {len(report.failures)} failures")
    return report
