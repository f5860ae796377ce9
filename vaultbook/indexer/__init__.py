"""Vault indexing - scans the vault and regenerates its derived notes."""

from .banner import BannerManager, apply_banner, canonical_name
from .headings import parse_heading, rewrite_headings
from .homepage import HomepageBuilder, render_homepage, render_portal
from .playlist import Playlist, PlaylistGenerator, roman_joined
from .scanner import NoteFlavor, NoteInfo, Topic, Vault, VaultScanner
from .sections import SectionCounter
from .stats import CATEGORIES, StatisticsAggregator, StatisticsRecord, classify_line

__all__ = [
    "CATEGORIES",
    "BannerManager",
    "HomepageBuilder",
    "NoteFlavor",
    "NoteInfo",
    "Playlist",
    "PlaylistGenerator",
    "SectionCounter",
    "StatisticsAggregator",
    "StatisticsRecord",
    "Topic",
    "Vault",
    "VaultScanner",
    "apply_banner",
    "canonical_name",
    "classify_line",
    "parse_heading",
    "render_homepage",
    "render_portal",
    "rewrite_headings",
    "roman_joined",
]
