"""Backup pool of full-vault snapshots."""

import logging
import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

SNAPSHOT_STAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
STAMP_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2})(?: \(\d+\))?$")


def tree_size(root: Path) -> int:
    """Sum of the sizes of every regular file under root."""
    total = 0
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            path = Path(dirpath) / name
            try:
                if not path.is_symlink():
                    total += path.stat().st_size
            except OSError as e:
                logger.debug(f"Skipping {path} while sizing: {e}")
    return total


def parse_stamp(name: str) -> float | None:
    """Creation time encoded in a snapshot name, if any."""
    match = STAMP_PATTERN.search(name)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), SNAPSHOT_STAMP_FORMAT).timestamp()
    except ValueError:
        return None


@dataclass(frozen=True)
class Snapshot:
    """One full-vault mirror in the pool."""

    path: Path
    created: float

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def sort_key(self) -> tuple[float, str]:
        return (self.created, self.name)

    def size(self) -> int:
        return tree_size(self.path)


class BackupPool:
    """Directory holding snapshot directories."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def snapshots(self) -> list[Snapshot]:
        """All snapshots, oldest first, ties broken by name."""
        if not self.root.is_dir():
            return []

        snapshots = []
        for entry in self.root.iterdir():
            if not entry.is_dir() or entry.is_symlink():
                continue
            created = parse_stamp(entry.name)
            if created is None:
                created = entry.stat().st_mtime
            snapshots.append(Snapshot(path=entry, created=created))

        return sorted(snapshots, key=lambda s: s.sort_key)

    def total_size(self) -> int:
        if not self.root.is_dir():
            return 0
        return tree_size(self.root)

    def _unique_path(self, base: str) -> Path:
        candidate = self.root / base
        counter = 2
        while candidate.exists():
            candidate = self.root / f"{base} ({counter})"
            counter += 1
        return candidate

    def create_snapshot(self, vault_path: Path, now: datetime | None = None) -> Snapshot:
        """Mirror the whole vault into a new uniquely named snapshot.

        Raises:
            OSError: If the copy fails; a partial snapshot is removed
        """
        now = now or datetime.now()
        self.root.mkdir(parents=True, exist_ok=True)
        target = self._unique_path(f"{vault_path.name} {now.strftime(SNAPSHOT_STAMP_FORMAT)}")

        pool = self.root.resolve()

        def ignore_pool(directory: str, names: list[str]) -> list[str]:
            # The pool may live inside the vault
            return [n for n in names if (Path(directory) / n).resolve() == pool]

        logger.info(f"Creating backup at: {target}")
        try:
            shutil.copytree(vault_path, target, ignore=ignore_pool, symlinks=True)
        except OSError:
            shutil.rmtree(target, ignore_errors=True)
            raise

        logger.info("Backup complete.")
        return Snapshot(path=target, created=now.timestamp())
