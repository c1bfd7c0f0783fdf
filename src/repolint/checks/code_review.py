"""Changes are reviewed before being merged, according to scorecard."""

from repolint.checks.helpers import run_tiers, scorecard_check
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet

ID = "code_review"

WEIGHT = 1

CHECK_SETS = frozenset({CheckSet.CODE})

SCORECARD_NAME = "Code-Review"


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, remote=[scorecard_check(SCORECARD_NAME)])
