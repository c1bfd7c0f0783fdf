"""Case-insensitive glob matching confined to a repository root."""

import fnmatch
import logging
import re
from collections.abc import Iterator, Sequence
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class PatternError(ValueError):
    """Raised when a static pattern table is malformed."""


class ContentPolicy(str, Enum):
    """What a matched path must hold to count as evidence."""

    EXISTS = "exists"  # Presence is enough
    NON_EMPTY = "non_empty"  # Files need content, directories need entries


class PathPatterns:
    """Compiled glob patterns used to locate a file in a repository.

    Patterns are relative to the repository root and use ``/`` as the
    separator. Wildcards (``*``, ``?``, ``[...]``) expand within a single
    path segment only, and names are compared case-insensitively.
    """

    def __init__(
        self,
        patterns: Sequence[str],
        policy: ContentPolicy = ContentPolicy.EXISTS,
    ) -> None:
        """Compile the patterns.

        Args:
            patterns: Glob patterns, tried in order.
            policy: Content requirement for a match.

        Raises:
            PatternError: If a pattern is empty, absolute or contains ``..``.
        """
        if not patterns:
            raise PatternError("At least one pattern is required")
        self.patterns = tuple(patterns)
        self.policy = policy
        self._segments = [self._compile(p) for p in self.patterns]

    def __repr__(self) -> str:
        return f"PathPatterns({list(self.patterns)!r}, policy={self.policy.value})"

    @staticmethod
    def _compile(pattern: str) -> list[re.Pattern[str]]:
        if pattern.startswith("/") or "\\" in pattern:
            raise PatternError(f"Pattern must be a relative posix path: {pattern!r}")
        segments = pattern.split("/")
        if any(segment in ("", ".", "..") for segment in segments):
            raise PatternError(f"Invalid path segment in pattern: {pattern!r}")
        return [re.compile(fnmatch.translate(segment), re.IGNORECASE) for segment in segments]

    def candidates(self, root: Path) -> Iterator[Path]:
        """Yield every path under root matching a pattern, pattern by pattern."""
        root = root.resolve()
        for segments in self._segments:
            yield from _expand(root, root, segments)


def find_path(root: Path, patterns: PathPatterns) -> str | None:
    """Find the first path in the repository matching any of the patterns.

    Args:
        root: Repository root directory.
        patterns: Compiled patterns, including the content policy.

    Returns:
        Matched path relative to root (posix style), or None if nothing
        satisfying the content policy was found.
    """
    resolved_root = root.resolve()
    for candidate in patterns.candidates(resolved_root):
        if _satisfies(candidate, patterns.policy):
            return candidate.relative_to(resolved_root).as_posix()
        logger.debug(f"Ignoring {candidate}: does not satisfy {patterns.policy.value} policy")
    return None


def _expand(root: Path, directory: Path, segments: list[re.Pattern[str]]) -> Iterator[Path]:
    head, rest = segments[0], segments[1:]
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not head.match(entry.name):
            continue
        if not _is_within(entry, root):
            logger.debug(f"Ignoring {entry}: resolves outside of {root}")
            continue
        if not rest:
            yield entry
        elif entry.is_dir():
            yield from _expand(root, entry, rest)


def _is_within(path: Path, root: Path) -> bool:
    try:
        return path.resolve().is_relative_to(root)
    except OSError:
        return False


def _satisfies(path: Path, policy: ContentPolicy) -> bool:
    if not path.exists():
        return False
    if policy is ContentPolicy.EXISTS:
        return True
    if path.is_dir():
        return any(path.iterdir())
    return path.stat().st_size > 0
