"""Project adopts a code of conduct."""

from repolint.checks.helpers import code_of_conduct_url, file_or_readme_ref, run_tiers
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet
from repolint.resolvers.path import PathPatterns
from repolint.resolvers.readme import ReadmeRefs

ID = "code_of_conduct"

WEIGHT = 2

CHECK_SETS = frozenset({CheckSet.COMMUNITY})

FILE_PATTERNS = PathPatterns(
    ["code*of*conduct*", ".github/code*of*conduct*", "docs/code*of*conduct*"]
)

README_REF = ReadmeRefs(
    [
        r"(?im)^#+.*code of conduct.*$",
        r"(?im)^code of conduct$",
        r"(?i)\[.*code of conduct.*\]\(.*\)",
    ]
)


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(
        input,
        local=[file_or_readme_ref(FILE_PATTERNS, README_REF)],
        remote=[code_of_conduct_url],
    )
