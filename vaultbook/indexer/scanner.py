"""Vault scanner - validates the layout and discovers topics and notes."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from vaultbook.errors import ConfigurationError

from .frontmatter import frontmatter_timestamp, parse_frontmatter

logger = logging.getLogger(__name__)

NOTES_ROOT = "Notes Root"
KNOWLEDGE_DIR = "Knowledge"
LECTURE_DIR = "LectureNotes"
PORTALS_DIR = "Portals"
SUPPORT_DIR = "SupportFiles"
EXPORT_PARTS_DIR = "Export Parts"

HOMEPAGE_SUFFIX = " Homepage"
APPENDIX_MARKER = "Appendix"


class NoteFlavor(Enum):
    """Classification of a note, used for banner prefixes."""

    KNOWLEDGE = "knowledge"
    LECTURE = "lecture"
    APPENDIX = "appendix"

    @property
    def prefix(self) -> str:
        return {
            NoteFlavor.KNOWLEDGE: "K.",
            NoteFlavor.LECTURE: "L.",
            NoteFlavor.APPENDIX: "A.",
        }[self]


def resolve_flavor(zone: str, stem: str) -> NoteFlavor:
    """Resolve the flavor of a note from its zone directory and filename."""
    if zone == SUPPORT_DIR or APPENDIX_MARKER in stem:
        return NoteFlavor.APPENDIX
    if zone == LECTURE_DIR:
        return NoteFlavor.LECTURE
    return NoteFlavor.KNOWLEDGE


def is_homepage(path: Path) -> bool:
    return path.stem.endswith(HOMEPAGE_SUFFIX)


def birthtime(path: Path) -> float | None:
    """Filesystem creation time, where the platform records one."""
    return getattr(path.stat(), "st_birthtime", None)


@dataclass
class NoteInfo:
    """Information about a single note."""

    path: Path
    rel_path: str
    title: str
    created: float
    modified: float
    flavor: NoteFlavor
    is_revision: bool = False

    @property
    def sort_key(self) -> tuple[float, str]:
        return (self.created, self.title)


@dataclass
class Topic:
    """A directory of related notes under Knowledge or LectureNotes."""

    path: Path
    zone: str
    created: float
    notes: list[NoteInfo] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def homepage_path(self) -> Path:
        """Where this topic's generated homepage is written."""
        return self.path / f"{self.name}{HOMEPAGE_SUFFIX}.md"

    def find_homepage(self, exact: bool = True) -> Path | None:
        """Locate the topic homepage on disk.

        With ``exact`` only ``<topic> Homepage.md`` counts; otherwise the first
        file (by name) whose stem ends with the homepage suffix.
        """
        if exact:
            return self.homepage_path if self.homepage_path.is_file() else None

        matches = sorted(p for p in self.path.glob("*.md") if p.is_file() and is_homepage(p))
        return matches[0] if matches else None


@dataclass
class Vault:
    """Scanned vault: topics per zone and the support notes."""

    root: Path
    knowledge: list[Topic] = field(default_factory=list)
    lectures: list[Topic] = field(default_factory=list)
    support_notes: list[NoteInfo] = field(default_factory=list)

    @property
    def notes_root(self) -> Path:
        return self.root / NOTES_ROOT

    @property
    def portals_dir(self) -> Path:
        return self.notes_root / PORTALS_DIR

    @property
    def support_dir(self) -> Path:
        return self.notes_root / SUPPORT_DIR

    @property
    def topics(self) -> list[Topic]:
        return self.knowledge + self.lectures

    @property
    def members(self) -> list[NoteInfo]:
        """Every non-homepage note of every topic, in topic order."""
        return [note for topic in self.topics for note in topic.notes]

    def identifier(self, path: Path) -> str:
        """Vault-relative identifier of a file: POSIX path without extension."""
        return path.relative_to(self.root).with_suffix("").as_posix()

    def has_note(self, stem: str) -> bool:
        """Check whether a note with the given stem exists under the notes root."""
        return any(p.stem == stem for p in self.notes_root.rglob("*.md"))


class VaultScanner:
    """Scans a study vault and builds the topic tree."""

    def __init__(self, vault_path: Path, revision_marker: str = "Revision") -> None:
        self.vault_path = vault_path
        self.revision_marker = revision_marker.lower()

    @property
    def notes_root(self) -> Path:
        return self.vault_path / NOTES_ROOT

    def validate(self) -> None:
        """Check the required subtrees exist, before anything is mutated."""
        for required in (KNOWLEDGE_DIR, PORTALS_DIR):
            subtree = self.notes_root / required
            if not subtree.is_dir():
                raise ConfigurationError(f"Missing required vault directory: {subtree}")

    def scan(self) -> Vault:
        """Perform a full scan of the vault."""
        self.validate()
        logger.info(f"Scanning vault: {self.vault_path}")

        vault = Vault(root=self.vault_path)
        vault.knowledge = self._scan_zone(KNOWLEDGE_DIR)
        vault.lectures = self._scan_zone(LECTURE_DIR)
        vault.support_notes = self._scan_support()

        logger.info(
            f"Found {len(vault.knowledge)} knowledge topics, {len(vault.lectures)} lecture "
            f"topics, {len(vault.members)} notes"
        )
        return vault

    def _scan_zone(self, zone: str) -> list[Topic]:
        zone_dir = self.notes_root / zone
        if not zone_dir.is_dir():
            logger.debug(f"Skipping missing zone: {zone_dir}")
            return []

        topics = []
        for topic_dir in zone_dir.iterdir():
            if not topic_dir.is_dir() or topic_dir.name.startswith("."):
                continue
            try:
                topics.append(self._scan_topic(topic_dir, zone))
            except OSError as e:
                logger.warning(f"Failed to scan topic {topic_dir}: {e}")

        topics.sort(key=lambda t: (t.created, t.name))
        return topics

    def _scan_topic(self, topic_dir: Path, zone: str) -> Topic:
        notes = []
        for md_file in topic_dir.glob("*.md"):
            if not md_file.is_file() or is_homepage(md_file):
                continue
            note = self._try_scan_note(md_file, zone)
            if note:
                notes.append(note)

        notes.sort(key=lambda n: n.sort_key)

        created = birthtime(topic_dir)
        if created is None:
            created = notes[0].created if notes else topic_dir.stat().st_mtime

        return Topic(path=topic_dir, zone=zone, created=created, notes=notes)

    def _scan_support(self) -> list[NoteInfo]:
        support_dir = self.notes_root / SUPPORT_DIR
        if not support_dir.is_dir():
            return []

        notes = []
        for md_file in support_dir.rglob("*.md"):
            rel_parts = md_file.relative_to(support_dir).parts
            if rel_parts[0] == EXPORT_PARTS_DIR or any(p.startswith(".") for p in rel_parts):
                continue
            note = self._try_scan_note(md_file, SUPPORT_DIR)
            if note:
                notes.append(note)

        notes.sort(key=lambda n: (n.rel_path, n.created))
        return notes

    def _try_scan_note(self, file_path: Path, zone: str) -> NoteInfo | None:
        try:
            return self._scan_note(file_path, zone)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to scan {file_path}: {e}")
            return None

    def _scan_note(self, file_path: Path, zone: str) -> NoteInfo:
        """Extract information from a single note."""
        stat = file_path.stat()
        content = file_path.read_text(encoding="utf-8")

        # Frontmatter wins over filesystem times, which copies and syncs reset
        created = frontmatter_timestamp(parse_frontmatter(content), "created")
        if created is None:
            created = getattr(stat, "st_birthtime", None)
        if created is None:
            created = stat.st_mtime

        stem = file_path.stem
        return NoteInfo(
            path=file_path,
            rel_path=file_path.relative_to(self.vault_path).as_posix(),
            title=stem,
            created=created,
            modified=stat.st_mtime,
            flavor=resolve_flavor(zone, stem),
            is_revision=zone == LECTURE_DIR and self.revision_marker in stem.lower(),
        )
