"""Size-bounded rotation of the backup pool."""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from vaultbook.errors import RotationError

from .snapshots import BackupPool

logger = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024


@dataclass(frozen=True)
class RotationPolicy:
    """When to rotate and when to stop.

    Rotation starts once the pool exceeds ``threshold`` bytes and evicts the
    oldest snapshots while the pool is above ``target`` bytes and more than
    ``min_keep`` snapshots remain.
    """

    threshold: int
    target: int
    min_keep: int

    def __post_init__(self) -> None:
        if self.target >= self.threshold:
            raise ValueError(f"Target {self.target} must be below threshold {self.threshold}")
        if self.min_keep < 1:
            raise ValueError(f"min_keep must be at least 1, got {self.min_keep}")


@dataclass
class RotationReport:
    size_before: int
    size_after: int
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def freed(self) -> int:
        return self.size_before - self.size_after


def _mb(size: int) -> str:
    return f"{size / MEGABYTE:.1f} MB"


def rotate_pool(
    pool: BackupPool,
    policy: RotationPolicy,
    remove: Callable[[Path], None] = shutil.rmtree,
) -> RotationReport:
    """Evict the oldest snapshots until the pool fits the policy.

    A snapshot whose deletion fails is skipped for the rest of the pass, so
    every iteration either removes a snapshot or rules one out.

    Raises:
        RotationError: If every remaining candidate failed to delete while
            the pool is still over target and above the minimum count
    """
    size = pool.total_size()
    report = RotationReport(size_before=size, size_after=size)

    if size <= policy.threshold:
        logger.debug(f"Backup pool at {_mb(size)}, below threshold {_mb(policy.threshold)}")
        return report

    logger.info(f"Backup pool at {_mb(size)} exceeds {_mb(policy.threshold)}, rotating")
    snapshots = pool.snapshots()
    failed: set[str] = set()

    while size > policy.target and len(snapshots) > policy.min_keep:
        candidates = [s for s in snapshots if s.name not in failed]
        if not candidates:
            report.size_after = size
            raise RotationError(
                f"Backup rotation stalled at {_mb(size)}: no snapshot could be deleted",
                failed=sorted(failed),
                report=report,
            )

        oldest = candidates[0]
        try:
            remove(oldest.path)
        except OSError as e:
            logger.warning(f"Failed to delete snapshot {oldest.name}: {e}")
            failed.add(oldest.name)
            report.failed.append(oldest.name)
        else:
            logger.info(f"Deleted snapshot {oldest.name}")
            report.removed.append(oldest.name)

        snapshots = pool.snapshots()
        size = pool.total_size()

    report.size_after = size
    logger.info(
        f"Rotation done: removed {len(report.removed)} snapshots, pool now {_mb(size)} "
        f"in {len(snapshots)} snapshots"
    )
    return report
