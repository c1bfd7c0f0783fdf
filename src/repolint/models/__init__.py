"""Data models and schemas."""

from repolint.models.schemas import (
    CheckInput,
    CheckMetadata,
    CheckOutput,
    CheckSet,
    LinterMode,
    LintReport,
    RemoteMetadata,
    ScorecardReport,
)

__all__ = [
    "CheckInput",
    "CheckMetadata",
    "CheckOutput",
    "CheckSet",
    "LinterMode",
    "LintReport",
    "RemoteMetadata",
    "ScorecardReport",
]
