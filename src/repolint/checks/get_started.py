"""Project explains how to get started with it.

Only repository evidence counts. Unlike security_policy and code_of_conduct
there is no remote fallback: the code of conduct URL GitHub reports says nothing about
getting started, so it is not accepted here.
"""

from repolint.checks.helpers import file_or_readme_ref, run_tiers
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet
from repolint.resolvers.path import PathPatterns
from repolint.resolvers.readme import ReadmeRefs

ID = "get_started"

WEIGHT = 2

CHECK_SETS = frozenset({CheckSet.INCUBATOR})

FILE_PATTERNS = PathPatterns(["docs/quickstart*", "docs/get*started*"])

README_REF = ReadmeRefs(
    [
        r"(?im)^#+.*get.started.*$",
        r"(?im)^#+.*快速开始.*$",
        r"(?im)^#+.*quickstart.*$",
        r"(?im)^#+.*(开始使用|入门指南).*$",
        r"(?im)^get.started$",
        r"(?im)^快速开始$",
        r"(?im)^quickstart$",
        r"(?i)\[.*get.started.*\]\(.*\)",
        r"(?i)\[.*quickstart.*\]\(.*\)",
        r"(?i)\[.*快速开始.*\]\(.*\)",
    ]
)


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, local=[file_or_readme_ref(FILE_PATTERNS, README_REF)])
