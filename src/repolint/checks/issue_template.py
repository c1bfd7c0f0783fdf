"""Repository provides issue templates."""

from repolint.checks.helpers import file_or_readme_ref, run_tiers
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet
from repolint.resolvers.path import ContentPolicy, PathPatterns

ID = "issue_template"

WEIGHT = 2

CHECK_SETS = frozenset({CheckSet.INCUBATOR})

# Single template file or a directory of markdown templates
FILE_PATTERNS = PathPatterns(
    [".github/issue_template.md", ".github/issue_template/*.md"],
    policy=ContentPolicy.NON_EMPTY,
)


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, local=[file_or_readme_ref(FILE_PATTERNS)])
