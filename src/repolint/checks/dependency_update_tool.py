"""Dependencies are kept up to date by a tool, according to scorecard."""

from repolint.checks.helpers import run_tiers, scorecard_check
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet

ID = "dependency_update_tool"

WEIGHT = 1

CHECK_SETS = frozenset({CheckSet.CODE})

SCORECARD_NAME = "Dependency-Update-Tool"


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, remote=[scorecard_check(SCORECARD_NAME)])
