"""Evidence resolvers for the repository clone."""

from repolint.resolvers.path import ContentPolicy, PathPatterns, PatternError, find_path
from repolint.resolvers.readme import ReadmeRefs, read_readme, readme_matches

__all__ = [
    "ContentPolicy",
    "PathPatterns",
    "PatternError",
    "ReadmeRefs",
    "find_path",
    "read_readme",
    "readme_matches",
]
