"""Configuration models."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FixesOptions(BaseModel):
    """Options controlling a single fix-finding run."""

    revision: str = Field("HEAD", description="Revision or range to walk")
    base: Optional[str] = Field(None, description="Walk merge-base(base, revision)..revision instead")
    reverse: bool = Field(True, description="Walk oldest commits first")
    committer: str = Field("", description="Only report fixes whose owner contains this string")
    show_all: bool = Field(False, description="Disable the committer filter")
    match_all: bool = Field(False, description="Consider every reference, not only 'Fixes:' lines")
    no_group: bool = Field(False, description="Collapse all owners into one group")
    stable_only: bool = Field(False, description="Only match commits carrying a stable marker")
    paths: List[str] = Field(default_factory=list, description="Only report commits touching these paths")
    domains: List[str] = Field(default_factory=list, description="Email domains whose authors take ownership")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "revision": "v6.1..v6.2",
                "reverse": True,
                "committer": "maintainer@example.com",
                "match_all": False,
                "paths": ["drivers/iommu"],
                "domains": ["example.com"],
            }
        }


class WhoOptions(BaseModel):
    """Options for a path-ownership query."""

    params: List[str] = Field(default_factory=list, description="Revisions or paths to look up")
    ignore: List[str] = Field(default_factory=list, description="Owners or ignore-files to leave out")
    database: Optional[str] = Field(None, description="Named database selecting git-config keys")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are prefixed with GITFIXES_ (e.g., GITFIXES_FIXES_FILE).
    Values not set here fall back to git config (``fixes.file``,
    ``fixes.blacklist``, ``fixes.pathblacklist``).
    """

    model_config = SettingsConfigDict(
        env_prefix="GITFIXES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Databases
    fixes_file: Optional[Path] = None
    blacklist_file: Optional[Path] = None
    path_blacklist_file: Optional[Path] = None
    path_map_file: Optional[Path] = None

    # Attribution
    domains: List[str] = Field(default_factory=list)

    # Logging
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
