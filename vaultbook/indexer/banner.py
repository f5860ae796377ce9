"""Metadata banner kept at the top of every indexed note.

The banner is a callout closed by ``BANNER_SENTINEL``. Applying it removes the
previous banner (everything up to and including the sentinel line) and puts a
fresh one in its place, so a note never carries more than one. YAML
frontmatter stays above the banner.
"""

import logging
import os
import re
from datetime import datetime

from .frontmatter import split_frontmatter
from .scanner import NoteFlavor, NoteInfo

logger = logging.getLogger(__name__)

BANNER_SENTINEL = "%% vaultbook:metadata-end %%"
PROVENANCE = "Maintained by vaultbook, edit below the marker line."
BANNER_TIME_FORMAT = "%Y-%m-%d %H:%M"
NBSP = "\u00a0"


def canonical_name(flavor: NoteFlavor, stem: str) -> str:
    """Flavor prefix plus the filename with whitespace runs joined by NBSP."""
    return flavor.prefix + re.sub(r"\s+", NBSP, stem.strip())


def render_banner(name: str, created: datetime, modified: datetime, indexed: datetime) -> str:
    lines = [
        "> [!abstract] Metadata",
        f"> Canonical name: {name}",
        f"> Created: {created.strftime(BANNER_TIME_FORMAT)}",
        f"> Modified: {modified.strftime(BANNER_TIME_FORMAT)}",
        f"> Indexed: {indexed.strftime(BANNER_TIME_FORMAT)}",
        f"> {PROVENANCE}",
        BANNER_SENTINEL,
    ]
    return "\n".join(lines)


def find_sentinel(lines: list[str]) -> int | None:
    """Index of the first sentinel line, if any."""
    for i, line in enumerate(lines):
        if line.rstrip("\r") == BANNER_SENTINEL:
            return i
    return None


def strip_banner(content: str) -> str:
    """Return the content after the sentinel line, or all of it."""
    lines = content.split("\n")
    end = find_sentinel(lines)
    if end is None:
        return content
    return "\n".join(lines[end + 1 :])


def has_banner(content: str) -> bool:
    _, body = split_frontmatter(content)
    return find_sentinel(body.split("\n")) is not None


def apply_banner(
    content: str,
    name: str,
    created: datetime,
    modified: datetime,
    indexed: datetime,
) -> str:
    """Replace the note's banner (if any) with a fresh one."""
    frontmatter, body = split_frontmatter(content)
    banner = render_banner(name, created, modified, indexed)
    return f"{frontmatter}{banner}\n{strip_banner(body)}"


class BannerManager:
    """Rewrites metadata banners in place."""

    def __init__(self) -> None:
        self.failures: list[str] = []

    def apply(self, note: NoteInfo, now: datetime) -> bool:
        """Rewrite one note's banner, returning True if the file changed.

        The note's access and modification times are restored afterwards so
        the rewrite does not count as an edit on the next run.
        """
        try:
            stat = note.path.stat()
            content = note.path.read_text(encoding="utf-8")
            updated = apply_banner(
                content,
                name=canonical_name(note.flavor, note.title),
                created=datetime.fromtimestamp(note.created),
                modified=datetime.fromtimestamp(note.modified),
                indexed=now,
            )
            if updated == content:
                return False
            if not has_banner(content):
                logger.debug(f"Adding first banner to {note.rel_path}")

            note.path.write_text(updated, encoding="utf-8")
            os.utime(note.path, ns=(stat.st_atime_ns, stat.st_mtime_ns))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to update banner in {note.rel_path}: {e}")
            self.failures.append(note.rel_path)
            return False

        return True

    def apply_all(self, notes: list[NoteInfo], now: datetime) -> int:
        """Rewrite banners on every note, returning how many changed."""
        changed = sum(1 for note in notes if self.apply(note, now))
        logger.info(f"Updated metadata banners on {changed}/{len(notes)} notes")
        return changed
