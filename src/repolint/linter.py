"""End-to-end linting of a repository against the registered checks."""

import asyncio
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from repolint.analyzers.github import GitHubFetcher, parse_repo_url
from repolint.analyzers.scorecard import ScorecardClient, ScorecardError
from repolint.checks import CHECKS, RegisteredCheck, scorecard_names
from repolint.models.schemas import (
    CheckInput,
    CheckResult,
    LinterMode,
    LintReport,
    ScorecardResult,
)

logger = logging.getLogger(__name__)


class RepositoryRootError(Exception):
    """Raised when the repository root is not an accessible directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"Repository root {root} is not an accessible directory")


class Linter:
    """Orchestrates the linting of a repository.

    Stages:
    1. Validate the repository root
    2. Fetch GitHub metadata and the scorecard report (remote mode only),
       concurrently and once per repository
    3. Run every registered check against the shared, read-only input
    """

    def __init__(
        self,
        github_token: str | None = None,
        fetcher: GitHubFetcher | None = None,
        scorecard: ScorecardClient | None = None,
        checks: Mapping[str, RegisteredCheck] | None = None,
    ) -> None:
        """Initialize the linter.

        Args:
            github_token: GitHub token for metadata and scorecard. If not
                provided, uses GITHUB_TOKEN env var.
            fetcher: GitHub metadata fetcher. Defaults to a new GitHubFetcher.
            scorecard: Scorecard client. Defaults to a new ScorecardClient.
            checks: Checks to run. Defaults to the global registry.
        """
        self.github_token = github_token or os.environ.get("GITHUB_TOKEN")
        self.github = fetcher or GitHubFetcher(token=self.github_token)
        self.scorecard = scorecard or ScorecardClient()
        self.checks = checks if checks is not None else CHECKS

    async def build_input(
        self,
        root: Path,
        mode: LinterMode = LinterMode.LOCAL,
        repo_url: str | None = None,
    ) -> CheckInput:
        """Collect every evidence source the checks may consult.

        Raises:
            RepositoryRootError: If root is not a directory.
            ValueError: If remote mode is requested without a GitHub URL.
        """
        if not root.is_dir():
            raise RepositoryRootError(root)
        if mode is LinterMode.LOCAL:
            return CheckInput(root=root, mode=mode)

        repo_ref = parse_repo_url(repo_url or "")
        if repo_ref is None:
            raise ValueError(f"Remote mode requires a GitHub repository URL, got {repo_url!r}")

        scorecard_task = asyncio.create_task(self._fetch_scorecard(repo_ref.url))
        try:
            remote_metadata = await self.github.fetch_metadata(repo_ref)
        except BaseException:
            # No report is needed once the lint is aborted
            scorecard_task.cancel()
            await asyncio.gather(scorecard_task, return_exceptions=True)
            raise
        scorecard = await scorecard_task
        return CheckInput(
            root=root,
            mode=mode,
            remote_metadata=remote_metadata,
            scorecard=scorecard,
        )

    async def _fetch_scorecard(self, repo_url: str) -> ScorecardResult:
        if not self.github_token:
            return ScorecardResult(error=ScorecardError("GITHUB_TOKEN is required to run scorecard"))
        return await self.scorecard.fetch(repo_url, self.github_token, scorecard_names())

    async def lint(
        self,
        root: Path,
        mode: LinterMode = LinterMode.LOCAL,
        repo_url: str | None = None,
    ) -> LintReport:
        """Lint a repository.

        Args:
            root: Path of the repository clone.
            mode: Whether remote evidence may be consulted.
            repo_url: Repository URL on GitHub (remote mode only).

        Returns:
            LintReport with one result per check that could be evaluated.
        """
        input = await self.build_input(root, mode, repo_url)
        logger.info(f"Linting {root} in {mode.value} mode ({len(self.checks)} checks)")

        registered = list(self.checks.values())
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self._run_check, check, input) for check in registered),
            return_exceptions=True,
        )

        report = LintReport(root=root, mode=mode, repo_url=repo_url)
        if input.scorecard is not None and input.scorecard.error is not None:
            report.scorecard_error = str(input.scorecard.error)

        for check, outcome in zip(registered, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Check {check.id} failed: {type(outcome).__name__}: {outcome}")
                report.errors[check.id] = f"{type(outcome).__name__}: {outcome}"
                continue
            report.results.append(outcome)

        passed = sum(1 for r in report.results if r.output.passed)
        logger.info(f"Linted {root}: {passed}/{len(report.results)} checks passed")
        return report

    @staticmethod
    def _run_check(check: RegisteredCheck, input: CheckInput) -> CheckResult:
        output = check.check(input)
        logger.debug(f"Check {check.id}: {'passed' if output.passed else 'not passed'}")
        return CheckResult(id=check.id, metadata=check.metadata, output=output)
