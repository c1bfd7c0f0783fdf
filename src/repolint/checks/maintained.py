"""Project is actively maintained, according to scorecard."""

from repolint.checks.helpers import run_tiers, scorecard_check
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet

ID = "maintained"

WEIGHT = 3

CHECK_SETS = frozenset({CheckSet.CODE})

SCORECARD_NAME = "Maintained"


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, remote=[scorecard_check(SCORECARD_NAME)])
