"""Topic homepages and the portal page that embeds them."""

import logging
from datetime import datetime
from pathlib import Path

from .frontmatter import split_frontmatter
from .headings import rewrite_headings
from .scanner import Topic, Vault

logger = logging.getLogger(__name__)

GENERATED_MARKER = "%% automatically generated by vaultbook; edits are overwritten %%"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PORTAL_NAME = "Homepages"


def info_callout(title: str, now: datetime) -> list[str]:
    """Closing callout carrying the generation time."""
    return [f"> [!info] {title}", f"> Generated on {now.strftime(TIMESTAMP_FORMAT)}"]


def render_homepage(sections: list[tuple[str, list[str]]], now: datetime) -> str:
    """Render a homepage from ``(note title, link lines)`` pairs."""
    lines = [GENERATED_MARKER, ""]

    for title, links in sections:
        lines.append(f"# [[{title}]]")
        lines.extend(links)
        lines.append("")

    lines.extend(info_callout("Homepage", now))
    return "\n".join(lines) + "\n"


def render_portal(homepages: list[str], special_page: str | None, now: datetime) -> str:
    """Render the portal page embedding every homepage."""
    lines = [GENERATED_MARKER, ""]
    lines.extend(f"![[{stem}]]" for stem in homepages)
    if special_page:
        lines.append(f"![[{special_page}]]")
    lines.append("")
    lines.extend(info_callout("Portal", now))
    return "\n".join(lines) + "\n"


class HomepageBuilder:
    """Regenerates topic homepages and the portal aggregate."""

    def __init__(self, vault: Vault, book_numbering: bool = True) -> None:
        self.vault = vault
        self.book_numbering = book_numbering
        self.failures: list[str] = []

    @property
    def portal_path(self) -> Path:
        return self.vault.portals_dir / f"{PORTAL_NAME}.md"

    def topic_sections(self, topic: Topic) -> list[tuple[str, list[str]]]:
        """Heading links for every note of a topic, in creation order."""
        sections = []
        for index, note in enumerate(topic.notes, start=1):
            try:
                content = note.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                # Keep the note's section so the homepage still lists it
                logger.warning(f"Failed to read {note.rel_path}: {e}")
                self.failures.append(note.rel_path)
                content = ""

            _, body = split_frontmatter(content)
            links = rewrite_headings(
                body.splitlines(),
                note_title=note.title,
                note_index=index,
                book_numbering=self.book_numbering,
            )
            sections.append((note.title, links))
        return sections

    def build_topic(self, topic: Topic, now: datetime) -> Path | None:
        """Write one topic's homepage, returning its path on success."""
        content = render_homepage(self.topic_sections(topic), now)
        target = topic.homepage_path

        try:
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to write homepage {target}: {e}")
            self.failures.append(str(target))
            return None

        logger.debug(f"Wrote homepage {target.name} ({len(topic.notes)} notes)")
        return target

    def build_all(self, now: datetime) -> list[Path]:
        """Write homepages for every topic, knowledge first."""
        written = []
        for topic in self.vault.topics:
            path = self.build_topic(topic, now)
            if path:
                written.append(path)

        logger.info(f"Generated {len(written)} homepages")
        return written

    def build_portal(
        self, homepages: list[Path], now: datetime, special_page: str | None = None
    ) -> Path | None:
        """Write the portal page embedding the given homepages."""
        if special_page and not self.vault.has_note(special_page):
            logger.debug(f"Special page not found, leaving it out: {special_page}")
            special_page = None

        content = render_portal([p.stem for p in homepages], special_page, now)
        try:
            self.portal_path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to write portal {self.portal_path}: {e}")
            self.failures.append(str(self.portal_path))
            return None

        logger.info(f"Wrote portal {self.portal_path.name} ({len(homepages)} homepages)")
        return self.portal_path
