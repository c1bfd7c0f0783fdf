"""Contributor sign-off (DCO) detection in recent commit history."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from git import Repo
from git.exc import GitError

logger = logging.getLogger(__name__)

# Maximum number of commits inspected, starting at HEAD
DCO_MAX_COMMITS = 20

# Commits created automatically when merging, excluded from the verdict
MERGE_PATTERNS = [
    re.compile(r"^Merge pull request "),
    re.compile(r"^Merge branch "),
]

SIGNOFF_PATTERN = re.compile(r"(?m)^Signed-off-by: ")


class RepositoryAccessError(Exception):
    """Raised when a repository or its history cannot be opened."""

    def __init__(self, root: Path, reason: Exception) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot read git history at {root}: {reason}")


@dataclass
class SignoffSummary:
    """Classification of the commits inspected."""

    visited: int = 0
    signed: int = 0
    excluded: int = 0
    skipped: int = 0  # Unreadable commits, not counted as visited
    aborted: bool = False  # A commit without sign-off was found

    @property
    def passed(self) -> bool:
        return not self.aborted and self.signed == self.visited - self.excluded


def is_merge_commit(message: str) -> bool:
    """Check if a commit message was generated by a merge."""
    return any(pattern.match(message) for pattern in MERGE_PATTERNS)


def has_signoff(message: str) -> bool:
    """Check if a commit message carries a sign-off footer line."""
    return SIGNOFF_PATTERN.search(message) is not None


def analyze_signoff(root: Path, max_commits: int = DCO_MAX_COMMITS) -> SignoffSummary:
    """Inspect the latest commits of the repository for sign-offs.

    Walks back from HEAD through at most ``max_commits`` commits. Merge
    commits are excluded, and the walk stops at the first remaining commit
    that is not signed off.

    Args:
        root: Path of the git repository (working tree root).
        max_commits: Bound of commits consumed from the walk.

    Returns:
        SignoffSummary with the counts and verdict.

    Raises:
        RepositoryAccessError: If the path is not a repository or its history
            cannot be read.
    """
    try:
        repo = Repo(root)
    except (GitError, OSError) as e:
        raise RepositoryAccessError(root, e) from e

    summary = SignoffSummary()
    with repo:
        try:
            head = repo.head.commit
            walk = repo.iter_commits(head, max_count=max_commits)
            for commit in walk:
                try:
                    message = commit.message
                except (GitError, ValueError, OSError) as e:
                    logger.debug(f"Skipping unreadable commit {commit.hexsha}: {e}")
                    summary.skipped += 1
                    continue
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")

                summary.visited += 1
                if is_merge_commit(message):
                    summary.excluded += 1
                    continue
                if not has_signoff(message):
                    logger.debug(f"Commit {commit.hexsha} has no sign-off")
                    summary.aborted = True
                    break
                summary.signed += 1
        except (GitError, ValueError) as e:
            raise RepositoryAccessError(root, e) from e

    logger.debug(
        f"Sign-off walk at {root}: visited={summary.visited} signed={summary.signed} "
        f"excluded={summary.excluded} skipped={summary.skipped}"
    )
    return summary


def commits_have_signoff(root: Path) -> bool:
    """Check if the latest commits in the repository are all signed off."""
    return analyze_signoff(root).passed
