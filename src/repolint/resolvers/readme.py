"""README reference matching."""

import re
from collections.abc import Sequence
from pathlib import Path

from repolint.resolvers.path import PathPatterns, PatternError

# Locations of the README-equivalent document, in priority order
README_FILE = PathPatterns(["README*", ".github/README*", "docs/README*"])


class ReadmeRefs:
    """Set of regular expressions describing a reference in a README.

    Flags are given inline by each expression (e.g. ``(?im)``), so an
    expression can target headings, standalone lines or markdown links.
    """

    def __init__(self, expressions: Sequence[str]) -> None:
        if not expressions:
            raise PatternError("At least one expression is required")
        try:
            self._compiled = [re.compile(expr) for expr in expressions]
        except re.error as e:
            raise PatternError(f"Invalid README reference expression: {e}") from e
        self.expressions = tuple(expressions)

    def is_match(self, text: str) -> bool:
        """Check if any expression matches anywhere in the text."""
        return any(expr.search(text) for expr in self._compiled)


def read_readme(root: Path) -> str | None:
    """Read the repository's README, if there is one."""
    for candidate in README_FILE.candidates(root):
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8", errors="replace")
    return None


def readme_matches(root: Path, refs: ReadmeRefs) -> bool:
    """Check if the repository's README contains any of the references."""
    content = read_readme(root)
    return content is not None and refs.is_match(content)
