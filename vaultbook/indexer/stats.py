"""Vault statistics - counts tagged callout lines across all notes."""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .homepage import GENERATED_MARKER, TIMESTAMP_FORMAT
from .scanner import NoteInfo

logger = logging.getLogger(__name__)

REPORT_NAME = "Vault Statistics"


@dataclass(frozen=True)
class Category:
    """A named category of tagged lines."""

    name: str
    pattern: re.Pattern

    def matches(self, line: str) -> bool:
        return bool(self.pattern.match(line))


def _callout(*kinds: str) -> re.Pattern:
    """Pattern for a callout opener of the given kinds, nested quotes allowed."""
    alternatives = "|".join(re.escape(kind) for kind in kinds)
    return re.compile(rf"^\s*(?:>\s*)+\[!(?:{alternatives})\][+-]?", re.IGNORECASE)


# Priority order: the first matching category claims the line
CATEGORIES: tuple[Category, ...] = (
    Category("Definitions", _callout("definition")),
    Category("Theorems", _callout("theorem")),
    Category("Lemmas", _callout("lemma")),
    Category("Propositions", _callout("proposition")),
    Category("Corollaries", _callout("corollary")),
    Category("Examples", _callout("example")),
    Category("Cautions", _callout("caution", "warning")),
    Category("Questions", _callout("question")),
    Category("Axioms", _callout("axiom")),
)


def classify_line(line: str, categories: tuple[Category, ...] = CATEGORIES) -> str | None:
    """Name of the first category matching the line, or None."""
    for category in categories:
        if category.matches(line):
            return category.name
    return None


@dataclass
class StatisticsRecord:
    """Per-category line counts."""

    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, categories: tuple[Category, ...] = CATEGORIES) -> "StatisticsRecord":
        return cls(counts={c.name: 0 for c in categories})

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def add(self, name: str) -> None:
        self.counts[name] = self.counts.get(name, 0) + 1


def render_report(record: StatisticsRecord, now: datetime) -> str:
    """Render the statistics table."""
    lines = [
        GENERATED_MARKER,
        "",
        "| Category | Count |",
        "| --- | ---: |",
    ]
    lines.extend(f"| {name} | {count} |" for name, count in record.counts.items())
    lines.append(f"| **Total** | **{record.total}** |")
    lines.append("")
    lines.append(f"*Generated on {now.strftime(TIMESTAMP_FORMAT)}*")
    return "\n".join(lines) + "\n"


class StatisticsAggregator:
    """Scans notes and writes the statistics report."""

    def __init__(self, categories: tuple[Category, ...] = CATEGORIES) -> None:
        self.categories = categories
        self.failures: list[str] = []

    def count_text(self, content: str, record: StatisticsRecord) -> None:
        for line in content.splitlines():
            name = classify_line(line, self.categories)
            if name:
                record.add(name)

    def collect(self, notes: list[NoteInfo]) -> StatisticsRecord:
        """Count tagged lines over every note."""
        record = StatisticsRecord.empty(self.categories)

        for note in notes:
            try:
                content = note.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {note.rel_path} for statistics: {e}")
                self.failures.append(note.rel_path)
                continue
            self.count_text(content, record)

        logger.info(f"Counted {record.total} tagged lines in {len(notes)} notes")
        return record

    def write(self, record: StatisticsRecord, portals_dir: Path, now: datetime) -> Path | None:
        """Overwrite the report in the portals directory."""
        target = portals_dir / f"{REPORT_NAME}.md"
        try:
            target.write_text(render_report(record, now), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to write statistics report {target}: {e}")
            self.failures.append(str(target))
            return None
        return target
