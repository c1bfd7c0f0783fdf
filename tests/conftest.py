"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from git import Actor, Repo

from repolint.models.schemas import (
    CheckInput,
    LinterMode,
    RemoteMetadata,
    ScorecardCheck,
    ScorecardCheckDocs,
    ScorecardReport,
    ScorecardResult,
)

SIGNOFF = "\n\nSigned-off-by: Jane Doe <jane@example.com>\n"


class Untouchable:
    """Stand-in for evidence that must never be consulted."""

    def __getattr__(self, name: str):
        raise AssertionError(f"Unexpected access to {name!r}")

    def __bool__(self) -> bool:
        raise AssertionError("Unexpected truth test")


def write(root: Path, relative: str, content: str = "content\n") -> Path:
    """Create a file (and its parents) under root."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def make_git_repo(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Create a git repository with one commit per message, oldest first."""

    def _make(messages: list[str], name: str = "repo") -> Path:
        root = tmp_path / name
        root.mkdir()
        repo = Repo.init(root)
        author = Actor("Jane Doe", "jane@example.com")
        for i, message in enumerate(messages):
            write(root, f"file_{i}.txt", f"{i}\n")
            repo.index.add([f"file_{i}.txt"])
            repo.index.commit(message, author=author, committer=author)
        repo.close()
        return root

    return _make


@pytest.fixture
def remote_metadata() -> RemoteMetadata:
    """GitHub metadata without any community files."""
    return RemoteMetadata(owner="acme", repo="rocket")


@pytest.fixture
def sample_report() -> ScorecardReport:
    """Scorecard report with a couple of checks."""
    return ScorecardReport(
        checks=[
            ScorecardCheck(
                name="Code-Review",
                reason="Found 8/10 approved changesets",
                details=None,
                score=8.0,
                documentation=ScorecardCheckDocs(url="https://scorecard.dev/checks#code-review"),
            ),
            ScorecardCheck(
                name="Maintained",
                reason="30 commit(s) out of 30 and 5 issue activity out of 30 found in the last 90 days",
                details=["Info: commits found: 30"],
                score=10.0,
                documentation=ScorecardCheckDocs(url="https://scorecard.dev/checks#maintained"),
            ),
        ]
    )


@pytest.fixture
def make_input(tmp_path: Path) -> Callable[..., CheckInput]:
    """Build a CheckInput rooted at tmp_path unless told otherwise."""

    def _make(
        mode: LinterMode = LinterMode.LOCAL,
        root: Path | None = None,
        remote_metadata: RemoteMetadata | None = None,
        scorecard: ScorecardResult | None = None,
    ) -> CheckInput:
        return CheckInput(
            root=root or tmp_path,
            mode=mode,
            remote_metadata=remote_metadata,
            scorecard=scorecard,
        )

    return _make
