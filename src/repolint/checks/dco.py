"""Contributors sign off their commits (Developer Certificate of Origin)."""

import logging
import re

from repolint.analyzers.signoff import RepositoryAccessError, commits_have_signoff
from repolint.checks.helpers import github_status_check, run_tiers
from repolint.models.schemas import CheckInput, CheckOutput, CheckSet

logger = logging.getLogger(__name__)

ID = "dco"

WEIGHT = 1

CHECK_SETS = frozenset({CheckSet.CODE, CheckSet.CODE_LITE})

# Status check enforcing sign-offs (e.g. the DCO GitHub app)
CHECK_REF = re.compile(r"(?i)dco")


def signed_off_commits(input: CheckInput) -> CheckOutput:
    """Tier inspecting the latest commits of the local clone."""
    try:
        if commits_have_signoff(input.root):
            return CheckOutput.passing()
    except RepositoryAccessError as e:
        # Inconclusive, let the next tier decide
        logger.info(f"Skipping commit history for {input.root}: {e}")
    return CheckOutput.not_passed()


def check(input: CheckInput) -> CheckOutput:
    return run_tiers(
        input,
        local=[signed_off_commits],
        remote=[github_status_check(CHECK_REF)],
    )
