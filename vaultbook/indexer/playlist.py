"""Export playlist - the ordered table of contents for the PDF export.

The playlist walks Knowledge topics, then LectureNotes topics, then an
Appendix. Every topic becomes a numbered Part: a placeholder note in the
export-parts directory, followed by the topic's notes in creation order.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .homepage import PORTAL_NAME
from .scanner import (
    EXPORT_PARTS_DIR,
    NOTES_ROOT,
    PORTALS_DIR,
    SUPPORT_DIR,
    NoteInfo,
    Topic,
    Vault,
)
from .stats import REPORT_NAME

logger = logging.getLogger(__name__)

PLAYLIST_NAME = "Export Playlist.txt"
BIBLIOGRAPHY_NAME = "Bibliography"
APPENDIX_TITLE = "Appendix"

ROMAN_NUMERAL = r"(?=[MDCLXVI])M{0,3}(?:CM|CD|D?C{0,3})(?:XC|XL|L?X{0,3})(?:IX|IV|V?I{0,3})"
ROMAN_TAIL_PATTERN = re.compile(rf" (?={ROMAN_NUMERAL}$)")


def roman_joined(stem: str) -> str:
    """Drop the one space before a trailing Roman numeral: "Chapter IV" -> "ChapterIV"."""
    return ROMAN_TAIL_PATTERN.sub("", stem, count=1)


def appendix_references(special_page: str) -> list[str]:
    """Fixed identifiers closing every playlist, in order."""
    return [
        f"{NOTES_ROOT}/{PORTALS_DIR}/{PORTAL_NAME}",
        f"{NOTES_ROOT}/{PORTALS_DIR}/{REPORT_NAME}",
        f"{NOTES_ROOT}/{PORTALS_DIR}/{special_page}",
        f"{NOTES_ROOT}/{SUPPORT_DIR}/{BIBLIOGRAPHY_NAME}",
    ]


@dataclass
class Part:
    """A numbered placeholder note opening a group of the playlist."""

    number: int
    title: str
    homepage: Path | None = None

    @property
    def filename(self) -> str:
        return f"Part {self.number}.md"

    @property
    def identifier(self) -> str:
        return f"{NOTES_ROOT}/{SUPPORT_DIR}/{EXPORT_PARTS_DIR}/Part {self.number}"

    def render(self) -> str:
        lines = [f"# Part {self.number}: {self.title}"]
        if self.homepage is not None:
            lines.append(f"![[{self.homepage.stem}]]")
        return "\n".join(lines) + "\n"


@dataclass
class Playlist:
    """Ordered export identifiers plus the Part placeholders they refer to."""

    entries: list[str] = field(default_factory=list)
    parts: list[Part] = field(default_factory=list)

    def add_part(self, part: Part) -> None:
        self.parts.append(part)
        self.entries.append(part.identifier)

    def render(self) -> str:
        return "\n".join(self.entries) + "\n"


class PlaylistGenerator:
    """Builds and writes the export playlist for a scanned vault."""

    def __init__(
        self,
        vault: Vault,
        part_only_marker: str = "(Part only)",
        special_page: str = "Formulary",
    ) -> None:
        self.vault = vault
        self.part_only_marker = part_only_marker
        self.special_page = special_page
        self.failures: list[str] = []

    @property
    def parts_dir(self) -> Path:
        return self.vault.support_dir / EXPORT_PARTS_DIR

    @property
    def playlist_path(self) -> Path:
        return self.vault.support_dir / PLAYLIST_NAME

    def note_identifier(self, note: NoteInfo) -> str:
        folder, _, _ = self.vault.identifier(note.path).rpartition("/")
        return f"{folder}/{roman_joined(note.title)}"

    def build(self) -> Playlist:
        """Compute the playlist without touching the filesystem.

        Homepages are looked up on disk, so build after they are generated.
        """
        playlist = Playlist()

        for topic in self.vault.knowledge:
            self._add_topic_part(playlist, topic, topic.find_homepage(exact=True))
            playlist.entries.extend(self.note_identifier(n) for n in topic.notes)

        for topic in self.vault.lectures:
            self._add_topic_part(playlist, topic, topic.find_homepage(exact=False))
            if self.part_only_marker and self.part_only_marker in topic.name:
                logger.debug(f"Listing only the Part for {topic.name}")
                continue
            playlist.entries.extend(
                self.note_identifier(n) for n in topic.notes if not n.is_revision
            )

        playlist.add_part(Part(number=len(playlist.parts) + 1, title=APPENDIX_TITLE))
        playlist.entries.extend(appendix_references(self.special_page))
        return playlist

    def _add_topic_part(self, playlist: Playlist, topic: Topic, homepage: Path | None) -> None:
        playlist.add_part(Part(number=len(playlist.parts) + 1, title=topic.name, homepage=homepage))

    def write(self, playlist: Playlist) -> Path | None:
        """Replace the Part placeholders and the playlist file."""
        try:
            self.parts_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create {self.parts_dir}: {e}")
            self.failures.append(str(self.parts_dir))
            return None

        for stale in self.parts_dir.glob("Part *.md"):
            try:
                stale.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove stale part {stale}: {e}")
                self.failures.append(str(stale))

        for part in playlist.parts:
            target = self.parts_dir / part.filename
            try:
                target.write_text(part.render(), encoding="utf-8")
            except OSError as e:
                logger.warning(f"Failed to write part {target}: {e}")
                self.failures.append(str(target))

        try:
            self.playlist_path.write_text(playlist.render(), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to write playlist {self.playlist_path}: {e}")
            self.failures.append(str(self.playlist_path))
            return None

        logger.info(
            f"Wrote export playlist: {len(playlist.entries)} entries, {len(playlist.parts)} parts"
        )
        return self.playlist_path
