"""Persistent storage for vault backup snapshots."""

from .rotation import RotationPolicy, RotationReport, rotate_pool
from .snapshots import BackupPool, Snapshot

__all__ = [
    "BackupPool",
    "RotationPolicy",
    "RotationReport",
    "Snapshot",
    "rotate_pool",
]
