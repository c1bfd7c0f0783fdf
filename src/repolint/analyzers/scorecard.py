"""OpenSSF Scorecard CLI wrapper and report lookup."""

import asyncio
import logging
import os
from collections.abc import Sequence

from pydantic import ValidationError

from repolint.models.schemas import ScorecardCheck, ScorecardReport, ScorecardResult

logger = logging.getLogger(__name__)

# Sub-checks requested when the caller does not pass its own list
DEFAULT_CHECKS = [
    "Binary-Artifacts",
    "Code-Review",
    "Dangerous-Workflow",
    "Dependency-Update-Tool",
    "Maintained",
    "Signed-Releases",
    "Token-Permissions",
]


class ScorecardError(Exception):
    """Raised when a scorecard report cannot be obtained or decoded."""


class ScorecardClient:
    """Runs the scorecard CLI against a repository."""

    def __init__(self, executable: str = "scorecard", timeout: int = 600) -> None:
        """Initialize the client.

        Args:
            executable: Path to the scorecard executable.
            timeout: Seconds to wait for the tool before giving up.
        """
        self.executable = executable
        self.timeout = timeout

    def _command(self, repo_url: str, checks: Sequence[str]) -> list[str]:
        return [
            self.executable,
            f"--repo={repo_url}",
            "--format=json",
            "--show-details",
            f"--checks={','.join(checks)}",
        ]

    @staticmethod
    def _environment(github_token: str) -> dict[str, str]:
        env = os.environ.copy()
        env["GITHUB_TOKEN"] = github_token
        # Otherwise scorecard scopes itself to the ref of the calling workflow
        env.pop("GITHUB_REF", None)
        return env

    async def run(
        self,
        repo_url: str,
        github_token: str,
        checks: Sequence[str] = DEFAULT_CHECKS,
    ) -> ScorecardReport:
        """Get the repository's scorecard report.

        Args:
            repo_url: Public URL of the repository.
            github_token: Token scorecard uses to query GitHub.
            checks: Names of the scorecard sub-checks to compute.

        Returns:
            Decoded ScorecardReport.

        Raises:
            ScorecardError: If the tool cannot run, exits with a non-zero
                status, times out or prints malformed output.
        """
        cmd = self._command(repo_url, checks)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._environment(github_token),
            )
        except OSError as e:
            raise ScorecardError(f"Cannot run {self.executable}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except TimeoutError as e:
            await _kill(process)
            raise ScorecardError(f"Scorecard timeout ({self.timeout}s) for {repo_url}") from e
        except BaseException:
            # Cancelled: do not leave the child running
            await _kill(process)
            raise

        if process.returncode != 0:
            error_msg = stderr.decode("utf-8", errors="replace").strip()
            raise ScorecardError(f"Scorecard error (code {process.returncode}): {error_msg[:1000]}")

        return parse_report(stdout.decode("utf-8", errors="replace"))

    async def fetch(
        self,
        repo_url: str,
        github_token: str,
        checks: Sequence[str] = DEFAULT_CHECKS,
    ) -> ScorecardResult:
        """Like run(), but captures the failure in the result instead of raising."""
        try:
            report = await self.run(repo_url, github_token, checks)
        except ScorecardError as e:
            logger.warning(f"Scorecard unavailable for {repo_url}: {e}")
            return ScorecardResult(error=e)
        logger.info(f"Scorecard report for {repo_url}: {len(report.checks)} checks")
        return ScorecardResult(report=report)


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


def parse_report(output: str) -> ScorecardReport:
    """Decode the JSON printed by scorecard.

    Raises:
        ScorecardError: If the output is not a valid report.
    """
    try:
        return ScorecardReport.model_validate_json(output)
    except ValidationError as e:
        raise ScorecardError(f"Malformed scorecard output: {e}") from e


def get_check(result: ScorecardResult, name: str) -> ScorecardCheck | None:
    """Get a check from the scorecard result by its exact name.

    Args:
        result: Outcome of the scorecard run.
        name: Scorecard check name (e.g. "Code-Review").

    Returns:
        The matching check, or None if the report has no such entry.

    Raises:
        ScorecardError: If the report is unavailable, chained to the failure
            captured when scorecard ran.
    """
    if result.error is not None:
        # Fresh instance per lookup, the captured one is shared across threads
        raise ScorecardError(str(result.error)) from result.error
    if result.report is None:
        raise ScorecardError("Scorecard report not available")
    for check in result.report.checks:
        if check.name == name:
            return check
    return None
