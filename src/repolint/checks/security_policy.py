"""Project documents how to report security vulnerabilities."""

from repolint.checks.helpers import file_or_readme_ref, run_tiers, security_policy_url
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet
from repolint.resolvers.path import PathPatterns
from repolint.resolvers.readme import ReadmeRefs

ID = "security_policy"

WEIGHT = 3

CHECK_SETS = frozenset({CheckSet.CODE, CheckSet.COMMUNITY})

FILE_PATTERNS = PathPatterns(["security*", ".github/security*", "docs/security*"])

README_REF = ReadmeRefs(
    [
        r"(?im)^#+.*security.*$",
        r"(?im)^security$",
        r"(?i)\[.*security.*\]\(.*\)",
    ]
)


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(
        input,
        local=[file_or_readme_ref(FILE_PATTERNS, README_REF)],
        # Default community health file, for example
        remote=[security_policy_url],
    )
