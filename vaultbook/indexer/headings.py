"""Heading parsing and back-link generation for topic homepages."""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .sections import SectionCounter

HEADING_PATTERN = re.compile(r"^(?P<marks>#+)\s+(?P<title>.+?)\s*$")
FENCE_PATTERN = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

# Homepage headings sit two levels below the note's own markers
NESTING_OFFSET = 2


@dataclass(frozen=True)
class Heading:
    """A heading found in a note."""

    depth: int
    title: str
    line_no: int


def parse_heading(line: str) -> tuple[int, str] | None:
    """Map a line to ``(depth, title)`` if it is a heading, else None.

    Depth is the marker count minus one, so ``# Title`` has depth 0.
    """
    match = HEADING_PATTERN.match(line)
    if not match:
        return None
    return len(match.group("marks")) - 1, match.group("title")


def iter_headings(lines: Iterable[str]) -> Iterator[Heading]:
    """Yield headings in document order, skipping fenced code blocks."""
    fence: str | None = None

    for line_no, line in enumerate(lines, start=1):
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group("fence")
            if fence is None:
                fence = marker
            elif (
                marker[0] == fence[0]
                and len(marker) >= len(fence)
                and not fence_match.group("info").strip()
            ):
                # Closing fence: same character, at least as long, no info string
                fence = None
            continue

        if fence is not None:
            continue

        parsed = parse_heading(line)
        if parsed:
            depth, title = parsed
            yield Heading(depth=depth, title=title, line_no=line_no)


def heading_link(heading: Heading, note_title: str, prefix: str = "") -> str:
    """Render one homepage line linking back to a heading in its note.

    The anchor keeps the original title so it resolves inside the note.
    """
    marks = "#" * (heading.depth + 1 + NESTING_OFFSET)
    return f"{marks} {prefix}{heading.title} [[{note_title}#{heading.title}|→]]"


def rewrite_headings(
    lines: Iterable[str],
    note_title: str,
    note_index: int,
    book_numbering: bool = False,
) -> list[str]:
    """Turn the headings of one note into homepage link lines.

    Args:
        lines: Raw lines of the note body
        note_title: Title of the note, used as the link target
        note_index: 1-based position of the note among its siblings
        book_numbering: Prefix each heading with ``§<note>.<section>``

    Returns:
        One link line per heading, in document order
    """
    counter = SectionCounter()
    links = []

    for heading in iter_headings(lines):
        prefix = ""
        if book_numbering:
            prefix = f"§{note_index}.{counter.increment(heading.depth)} "
        links.append(heading_link(heading, note_title, prefix))

    return links
