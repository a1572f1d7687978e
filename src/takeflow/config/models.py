"""Configuration models describing takeflow settings."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

SUBSTANTIAL_BYTES = 5 * 1024 * 1024


class TakeflowBaseModel(BaseModel):
    """Shared configuration for takeflow settings models."""

    model_config = ConfigDict(extra="forbid")


class ServiceSettings(TakeflowBaseModel):
    """Connection settings for the external file service.

    Attributes:
        base_url: Root URL of the file service API.
        timeout_seconds: Per-request timeout handed to the HTTP client.
    """

    base_url: str = "http://localhost:5101"
    timeout_seconds: float = 10.0


class NamingSettings(TakeflowBaseModel):
    """Defaults used when building recording filenames.

    Attributes:
        extension: Video extension appended to every built filename.
        placeholder: Preview shown while chapter or name is missing.
        available_tags: Tag codes offered for toggling on the template.
        default_chapter: Chapter used when no suggestion is available.
        default_sequence: Sequence used when no suggestion is available.
        default_name: Name used when no suggestion is available.
    """

    extension: str = ".mov"
    placeholder: str = "..."
    available_tags: List[str] = Field(default_factory=lambda: ["cta", "endcards"])
    default_chapter: str = "01"
    default_sequence: str = "1"
    default_name: str = "intro"


class RankingSettings(TakeflowBaseModel):
    """Take-rank classifier policy.

    Attributes:
        substantial_bytes: Minimum size for a recording to count as a real take.
    """

    substantial_bytes: int = Field(default=SUBSTANTIAL_BYTES, ge=0)


class LedgerSettings(TakeflowBaseModel):
    """Retention policy for the in-memory undo ledger.

    Attributes:
        expiry_minutes: Age after which a rename can no longer be undone.
        max_entries: Number of most recent renames retained.
    """

    expiry_minutes: int = Field(default=10, ge=1)
    max_entries: int = Field(default=5, ge=1)


class LoggingSettings(TakeflowBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(TakeflowBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class TakeflowConfig(TakeflowBaseModel):
    """Top-level configuration struct for takeflow."""

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    naming: NamingSettings = Field(default_factory=NamingSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "SUBSTANTIAL_BYTES",
    "TakeflowBaseModel",
    "ServiceSettings",
    "NamingSettings",
    "RankingSettings",
    "LedgerSettings",
    "LoggingSettings",
    "CLIOptions",
    "TakeflowConfig",
]
