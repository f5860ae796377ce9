"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Vault
    vault_path: Path

    # Backups - pool defaults to a sibling of the vault
    backup_path: Path | None = None
    backup_threshold_mb: int = 2048
    backup_target_mb: int = 512
    backup_min_keep: int = 4

    # Indexing
    book_numbering: bool = True
    part_only_marker: str = "(Part only)"
    revision_marker: str = "Revision"
    special_page: str = "Formulary"

    @field_validator("vault_path")
    @classmethod
    def validate_vault_path(cls, v: Path) -> Path:
        """Ensure vault path exists and is a directory."""
        if not v.exists():
            raise ValueError(f"Vault path does not exist: {v}")
        if not v.is_dir():
            raise ValueError(f"Vault path is not a directory: {v}")
        return v.resolve()

    @field_validator("backup_min_keep")
    @classmethod
    def validate_min_keep(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"backup_min_keep must be at least 1, got {v}")
        return v

    @model_validator(mode="after")
    def validate_backup_sizes(self) -> "Settings":
        """Rotation target must sit below the trigger threshold."""
        if self.backup_target_mb < 0:
            raise ValueError("backup_target_mb must not be negative")
        if self.backup_target_mb >= self.backup_threshold_mb:
            raise ValueError(
                f"backup_target_mb ({self.backup_target_mb}) must be lower than "
                f"backup_threshold_mb ({self.backup_threshold_mb})"
            )
        return self

    @property
    def backup_pool(self) -> Path:
        """Resolved backup pool root."""
        if self.backup_path is not None:
            return self.backup_path
        return self.vault_path.parent / f"{self.vault_path.name} Backups"

    @property
    def backup_threshold_bytes(self) -> int:
        return self.backup_threshold_mb * MEGABYTE

    @property
    def backup_target_bytes(self) -> int:
        return self.backup_target_mb * MEGABYTE


def get_settings() -> Settings:
    """Load settings from environment."""
    return Settings()
