"""YAML frontmatter handling for notes."""

import re
from datetime import date, datetime, time
from typing import Any

import yaml

FRONTMATTER_PATTERN = re.compile(r"^---\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|$)", re.DOTALL)


def split_frontmatter(content: str) -> tuple[str, str]:
    """Split note content into the raw frontmatter block and the body.

    The frontmatter block is returned verbatim, closing delimiter and newline
    included, so callers can put it back without reformatting it. Content that
    does not start with a valid YAML mapping block has no frontmatter.
    """
    if not content.startswith("---"):
        return "", content

    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return "", content

    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError:
        return "", content

    if data is not None and not isinstance(data, dict):
        return "", content

    return match.group(0), content[match.end() :]


def parse_frontmatter(content: str) -> dict[str, Any]:
    """Parse frontmatter from note content into a dict."""
    block, _ = split_frontmatter(content)
    if not block:
        return {}

    match = FRONTMATTER_PATTERN.match(block)
    try:
        return yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError:
        return {}


def frontmatter_timestamp(frontmatter: dict[str, Any], key: str) -> float | None:
    """Read a date-like frontmatter field as a POSIX timestamp.

    PyYAML already turns unquoted ISO dates into ``date``/``datetime``; quoted
    values are parsed with ``datetime.fromisoformat``.
    """
    value = frontmatter.get(key)
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp()
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).timestamp()
        except ValueError:
            return None
    return None
