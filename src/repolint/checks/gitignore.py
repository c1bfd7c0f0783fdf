"""Repository ignores build and editor artifacts."""

from repolint.checks.helpers import file_or_readme_ref, run_tiers
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet
from repolint.resolvers.path import ContentPolicy, PathPatterns

ID = "gitignore"

WEIGHT = 2

CHECK_SETS = frozenset({CheckSet.INCUBATOR})

FILE_PATTERNS = PathPatterns([".gitignore"], policy=ContentPolicy.NON_EMPTY)


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, local=[file_or_readme_ref(FILE_PATTERNS)])
