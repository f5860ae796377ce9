"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def make_note() -> Callable[..., Path]:
    """Factory writing a note with a frontmatter creation date."""

    def _make(path: Path, created: str, body: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"---\ncreated: {created}\n---\n{body}", encoding="utf-8")
        return path

    return _make


@pytest.fixture
def tmp_vault(tmp_path: Path, make_note) -> Path:
    """Create a temporary vault with two knowledge topics and no lecture notes."""
    vault = tmp_path / "vault"
    root = vault / "Notes Root"
    for zone in ("Knowledge", "Portals", "SupportFiles"):
        (root / zone).mkdir(parents=True)

    algebra = root / "Knowledge" / "Algebra"
    make_note(
        algebra / "Rings.md",
        "2024-01-05",
        "# Rings\n\n> [!definition] Ring\n> A set with two operations.\n\n## Ideals\n",
    )
    make_note(
        algebra / "Groups.md",
        "2024-01-01",
        "# Groups\n\nIntro text.\n\n> [!definition] Group\n\n## Subgroups\n\n"
        "> [!theorem] Lagrange\n\n## Cosets\n",
    )

    analysis = root / "Knowledge" / "Analysis"
    make_note(
        analysis / "Chapter IV.md",
        "2024-02-03",
        "# Series\n\n> [!theorem] Ratio test\n\n```python\n# not a heading\n```\n",
    )
    make_note(analysis / "Limits.md", "2024-02-01", "# Limits\n\n> [!definition] Limit\n")

    make_note(root / "SupportFiles" / "Bibliography.md", "2023-12-01", "# Bibliography\n")

    return vault


@pytest.fixture
def sample_note_content() -> str:
    """Sample note content for testing."""
    return """---
created: 2024-03-01
tags: [test, sample]
---

# Test Note

This is a test note with some content.

## Details
"""
