"""Repository is free of checked-in binaries, according to scorecard."""

from repolint.checks.helpers import run_tiers, scorecard_check
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet

ID = "binary_artifacts"

WEIGHT = 1

CHECK_SETS = frozenset({CheckSet.CODE})

SCORECARD_NAME = "Binary-Artifacts"


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(input, remote=[scorecard_check(SCORECARD_NAME)])
