"""Evidence tiers shared by checks and the chain that runs them.

A tier is a function from ``CheckInput`` to ``CheckOutput``. A check lists
its local tiers (repository clone) and remote tiers (GitHub, scorecard)
in priority order and hands them to ``run_tiers``.
"""

import logging
import re
from collections.abc import Callable, Sequence

from repolint.analyzers import scorecard
from repolint.models.schemas import CheckInput, CheckOutput, LinterMode, ScorecardCheck
from repolint.resolvers.path import PathPatterns, find_path
from repolint.resolvers.readme import ReadmeRefs, readme_matches

logger = logging.getLogger(__name__)

Tier = Callable[[CheckInput], CheckOutput]


def run_tiers(
    input: CheckInput,
    local: Sequence[Tier] = (),
    remote: Sequence[Tier] = (),
) -> CheckOutput:
    """Evaluate evidence tiers in order, returning the first that passes.

    Remote tiers are never attempted in local mode. When every tier fails,
    the output of the last remote tier is returned so that a reason for the
    failure (e.g. scorecard unavailable) reaches the caller.
    """
    for tier in local:
        output = tier(input)
        if output.passed:
            return output
    if input.mode is LinterMode.LOCAL:
        return CheckOutput.not_passed()

    output = CheckOutput.not_passed()
    for tier in remote:
        output = tier(input)
        if output.passed:
            return output
    return output


def file_or_readme_ref(patterns: PathPatterns, readme_ref: ReadmeRefs | None = None) -> Tier:
    """Tier looking for a file in the repository or a reference in its README.

    A matched file is returned as evidence; a README reference passes
    without evidence url.
    """

    def tier(input: CheckInput) -> CheckOutput:
        path = find_path(input.root, patterns)
        if path is not None:
            return CheckOutput.passing(url=path)
        if readme_ref is not None and readme_matches(input.root, readme_ref):
            return CheckOutput.passing()
        return CheckOutput.not_passed()

    return tier


def security_policy_url(input: CheckInput) -> CheckOutput:
    """Tier using the security policy GitHub reports for the repository."""
    metadata = input.remote_metadata
    if metadata is not None and metadata.security_policy_url:
        return CheckOutput.passing(url=metadata.security_policy_url)
    return CheckOutput.not_passed()


def code_of_conduct_url(input: CheckInput) -> CheckOutput:
    """Tier using the code of conduct GitHub reports for the repository."""
    metadata = input.remote_metadata
    if metadata is not None and metadata.code_of_conduct_url:
        return CheckOutput.passing(url=metadata.code_of_conduct_url)
    return CheckOutput.not_passed()


def github_status_check(pattern: re.Pattern[str]) -> Tier:
    """Tier looking for a status check on the repository's default branch."""

    def tier(input: CheckInput) -> CheckOutput:
        metadata = input.remote_metadata
        if metadata is not None and metadata.has_check(pattern):
            return CheckOutput.passing()
        return CheckOutput.not_passed()

    return tier


def scorecard_check(name: str) -> Tier:
    """Tier using the named entry of the scorecard report.

    The entry being present is what passes; its score is kept as supporting
    detail only.
    """

    def tier(input: CheckInput) -> CheckOutput:
        if input.scorecard is None:
            return CheckOutput.not_passed(fail_reason="Scorecard was not run")
        try:
            sc_check = scorecard.get_check(input.scorecard, name)
        except scorecard.ScorecardError as e:
            logger.warning(f"Scorecard check {name} unavailable: {e}")
            return CheckOutput.not_passed(fail_reason=str(e))
        if sc_check is None:
            return CheckOutput.not_passed()
        return CheckOutput.passing(
            url=sc_check.documentation.url,
            details=format_scorecard_details(sc_check),
        )

    return tier


def format_scorecard_details(sc_check: ScorecardCheck) -> str:
    """Render a scorecard check's score, reason and details as markdown."""
    lines = [f"# {sc_check.reason}", "", f"**Score**: {sc_check.score}"]
    if sc_check.details:
        lines.append("")
        lines.append("## Details")
        lines.append("")
        lines.extend(sc_check.details)
    return "\n".join(lines)
