"""Pydantic models for check inputs, outputs and evidence sources."""

import re
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckSet(str, Enum):
    """Categories a check contributes to."""

    CODE = "code"
    CODE_LITE = "code-lite"
    COMMUNITY = "community"
    INCUBATOR = "incubator"


class LinterMode(str, Enum):
    """Which evidence sources checks may consult."""

    LOCAL = "local"  # Filesystem clone only
    REMOTE = "remote"  # Clone plus GitHub metadata and scorecard


class RepoRef(BaseModel):
    """Reference to a GitHub repository."""

    owner: str
    repo: str

    @property
    def url(self) -> str:
        """Get the full repository URL."""
        return f"https://github.com/{self.owner}/{self.repo}"


# --- Check registry models ---


class CheckMetadata(BaseModel):
    """Static scoring metadata of a check."""

    model_config = ConfigDict(frozen=True)

    id: str
    weight: int = Field(gt=0)
    check_sets: frozenset[CheckSet]
    scorecard_name: str | None = None

    @field_validator("check_sets")
    @classmethod
    def _not_empty(cls, value: frozenset[CheckSet]) -> frozenset[CheckSet]:
        if not value:
            raise ValueError("a check must belong to at least one check set")
        return value


class CheckOutput(BaseModel):
    """Verdict of a single check.

    ``details`` and ``fail_reason`` are supplementary; only ``passed`` is
    used for scoring.
    """

    model_config = ConfigDict(frozen=True)

    passed: bool
    evidence_url: str | None = None
    details: str | None = None
    fail_reason: str | None = None

    @classmethod
    def passing(cls, url: str | None = None, details: str | None = None) -> "CheckOutput":
        return cls(passed=True, evidence_url=url, details=details)

    @classmethod
    def not_passed(cls, fail_reason: str | None = None) -> "CheckOutput":
        return cls(passed=False, fail_reason=fail_reason)


# --- Remote evidence models ---


class RemoteMetadata(BaseModel):
    """Snapshot of the hosting platform's view of a repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    code_of_conduct_url: str | None = None
    security_policy_url: str | None = None
    status_checks: tuple[str, ...] = ()

    def has_check(self, pattern: re.Pattern[str]) -> bool:
        """Check if any status check on the default branch matches the pattern."""
        return any(pattern.search(name) for name in self.status_checks)


class ScorecardCheckDocs(BaseModel):
    """Scorecard check documentation."""

    url: str


class ScorecardCheck(BaseModel):
    """A single named result inside a scorecard report."""

    model_config = ConfigDict(frozen=True)

    name: str
    reason: str
    details: list[str] | None = None
    score: float = Field(ge=-1.0, le=10.0)  # Scorecard uses -1 for inconclusive
    documentation: ScorecardCheckDocs


class ScorecardReport(BaseModel):
    """Scorecard report (list of checks)."""

    model_config = ConfigDict(frozen=True)

    checks: list[ScorecardCheck] = Field(default_factory=list)


class ScorecardResult(BaseModel):
    """Either a decoded scorecard report or the failure that prevented it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    report: ScorecardReport | None = None
    error: Exception | None = None


# --- Linting models ---


class CheckInput(BaseModel):
    """Everything a check may look at. Built once per repository."""

    model_config = ConfigDict(frozen=True)

    root: Path
    mode: LinterMode = LinterMode.LOCAL
    remote_metadata: RemoteMetadata | None = None
    scorecard: ScorecardResult | None = None


class CheckResult(BaseModel):
    """A check verdict paired with the check's metadata."""

    id: str
    metadata: CheckMetadata
    output: CheckOutput


class LintReport(BaseModel):
    """Complete linting results for a repository."""

    root: Path
    mode: LinterMode
    repo_url: str | None = None
    results: list[CheckResult] = Field(default_factory=list)

    # Checks that could not be evaluated, by check id
    errors: dict[str, str] = Field(default_factory=dict)

    # Scorecard failure, if the report could not be obtained
    scorecard_error: str | None = None

    linted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, check_id: str) -> CheckOutput | None:
        """Get the output of a check by id."""
        for result in self.results:
            if result.id == check_id:
                return result.output
        return None
