"""Tests for the scorecard client and report lookup."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from repolint.analyzers.scorecard import (
    DEFAULT_CHECKS,
    ScorecardClient,
    ScorecardError,
    get_check,
    parse_report,
)
from repolint.models.schemas import ScorecardReport, ScorecardResult

SCORECARD_OUTPUT = {
    "date": "2026-10-01",
    "repo": {"name": "github.com/acme/rocket", "commit": "abc123"},
    "scorecard": {"version": "v5.0.0"},
    "score": 7.4,
    "checks": [
        {
            "name": "Code-Review",
            "reason": "Found 8/10 approved changesets",
            "details": None,
            "score": 8,
            "documentation": {
                "short": "Determines if the project requires human code review",
                "url": "https://github.com/ossf/scorecard/blob/main/docs/checks.md#code-review",
            },
        },
        {
            "name": "Maintained",
            "reason": "30 commit(s) found in the last 90 days",
            "details": ["Info: commits found: 30"],
            "score": 10,
            "documentation": {"url": "https://github.com/ossf/scorecard/blob/main/docs/checks.md#maintained"},
        },
    ],
}


def _process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    process = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.returncode = returncode
    return process


class TestGetCheck:
    """Tests for looking up checks in a scorecard result."""

    def test_found(self, sample_report: ScorecardReport) -> None:
        """Test lookup by exact name."""
        check = get_check(ScorecardResult(report=sample_report), "Code-Review")

        assert check is sample_report.checks[0]
        assert check.score == 8.0

    def test_not_found(self, sample_report: ScorecardReport) -> None:
        """Test that a missing entry is not an error."""
        assert get_check(ScorecardResult(report=sample_report), "Fuzzing") is None
        assert get_check(ScorecardResult(report=ScorecardReport()), "Code-Review") is None

    def test_name_match_is_exact(self, sample_report: ScorecardReport) -> None:
        """Test that names are not matched case-insensitively."""
        assert get_check(ScorecardResult(report=sample_report), "code-review") is None

    def test_failed_report_raises_chained_error(self) -> None:
        """Test that lookups on a failed report propagate the failure."""
        error = ScorecardError("Scorecard error (code 1): rate limited")

        with pytest.raises(ScorecardError, match="rate limited") as exc_info:
            get_check(ScorecardResult(error=error), "Code-Review")

        assert exc_info.value.__cause__ is error

    def test_failed_report_raises_new_instance_per_lookup(self) -> None:
        """Test that concurrent lookups never share one exception object."""
        result = ScorecardResult(error=ScorecardError("down"))
        raised = []
        for name in ["Code-Review", "Maintained"]:
            with pytest.raises(ScorecardError) as exc_info:
                get_check(result, name)
            raised.append(exc_info.value)

        assert raised[0] is not raised[1]
        assert result.error.__traceback__ is None


class TestParseReport:
    """Tests for decoding scorecard output."""

    def test_parse_valid_output(self) -> None:
        """Test decoding the JSON printed by scorecard."""
        report = parse_report(json.dumps(SCORECARD_OUTPUT))

        assert [c.name for c in report.checks] == ["Code-Review", "Maintained"]
        assert report.checks[0].details is None
        assert report.checks[1].details == ["Info: commits found: 30"]
        assert report.checks[1].documentation.url.endswith("#maintained")

    def test_parse_invalid_json(self) -> None:
        """Test that invalid JSON is a hard failure."""
        with pytest.raises(ScorecardError):
            parse_report("not valid json")

    def test_parse_missing_fields(self) -> None:
        """Test that checks without documentation are rejected."""
        output = json.dumps({"checks": [{"name": "Maintained", "reason": "", "score": 1}]})
        with pytest.raises(ScorecardError):
            parse_report(output)


class TestScorecardClient:
    """Tests for running the scorecard CLI."""

    @pytest.mark.asyncio
    async def test_run_invocation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the arguments and environment passed to scorecard."""
        monkeypatch.setenv("GITHUB_REF", "refs/heads/feature")
        monkeypatch.setenv("GITHUB_TOKEN", "inherited-token")
        process = _process(stdout=json.dumps(SCORECARD_OUTPUT).encode())

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ) as mock_exec:
            client = ScorecardClient()
            report = await client.run(
                "https://github.com/acme/rocket", "secret-token", ["Code-Review", "Maintained"]
            )

        args = mock_exec.call_args.args
        assert args == (
            "scorecard",
            "--repo=https://github.com/acme/rocket",
            "--format=json",
            "--show-details",
            "--checks=Code-Review,Maintained",
        )
        env = mock_exec.call_args.kwargs["env"]
        assert env["GITHUB_TOKEN"] == "secret-token"
        assert "GITHUB_REF" not in env
        assert len(report.checks) == 2

    @pytest.mark.asyncio
    async def test_run_default_checks(self) -> None:
        """Test that the default sub-check list is requested."""
        process = _process(stdout=b'{"checks": []}')

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ) as mock_exec:
            await ScorecardClient(executable="/opt/scorecard").run("https://github.com/a/b", "t")

        args = mock_exec.call_args.args
        assert args[0] == "/opt/scorecard"
        assert args[-1] == f"--checks={','.join(DEFAULT_CHECKS)}"

    @pytest.mark.asyncio
    async def test_run_nonzero_exit(self) -> None:
        """Test that a failing scorecard run raises."""
        process = _process(stderr=b"Error: repo unreachable", returncode=1)

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            with pytest.raises(ScorecardError, match="repo unreachable"):
                await ScorecardClient().run("https://github.com/a/b", "t")

    @pytest.mark.asyncio
    async def test_run_malformed_output(self) -> None:
        """Test that undecodable output raises."""
        process = _process(stdout=b"<html>oops</html>")

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            with pytest.raises(ScorecardError, match="Malformed"):
                await ScorecardClient().run("https://github.com/a/b", "t")

    @pytest.mark.asyncio
    async def test_run_missing_executable(self) -> None:
        """Test that a missing executable raises ScorecardError."""
        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("scorecard")),
        ):
            with pytest.raises(ScorecardError, match="Cannot run"):
                await ScorecardClient().run("https://github.com/a/b", "t")

    @pytest.mark.asyncio
    async def test_fetch_captures_failure(self) -> None:
        """Test that fetch keeps the failure for later lookups."""
        process = _process(stderr=b"boom", returncode=2)

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            result = await ScorecardClient().fetch("https://github.com/a/b", "t")

        assert result.report is None
        assert isinstance(result.error, ScorecardError)
        with pytest.raises(ScorecardError) as exc_info:
            get_check(result, "Maintained")
        assert exc_info.value.__cause__ is result.error

    @pytest.mark.asyncio
    async def test_fetch_success(self) -> None:
        """Test that fetch wraps the decoded report."""
        process = _process(stdout=json.dumps(SCORECARD_OUTPUT).encode())

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            result = await ScorecardClient().fetch("https://github.com/a/b", "t")

        assert result.error is None
        assert get_check(result, "Maintained").score == 10.0

    @pytest.mark.asyncio
    async def test_run_cancelled_kills_child(self) -> None:
        """Test that cancelling a run terminates the scorecard process."""
        started = asyncio.Event()

        async def hang():
            started.set()
            await asyncio.sleep(30)

        process = MagicMock()
        process.communicate = AsyncMock(side_effect=hang)
        process.wait = AsyncMock(return_value=-9)
        process.returncode = None

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            task = asyncio.create_task(ScorecardClient().run("https://github.com/a/b", "t"))
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_run_timeout_kills_child(self) -> None:
        """Test that a run exceeding the timeout terminates the process."""

        async def hang():
            await asyncio.sleep(30)

        process = MagicMock()
        process.communicate = AsyncMock(side_effect=hang)
        process.wait = AsyncMock(return_value=-9)
        process.returncode = None

        with patch(
            "repolint.analyzers.scorecard.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ):
            with pytest.raises(ScorecardError, match="timeout"):
                await ScorecardClient(timeout=0.01).run("https://github.com/a/b", "t")

        process.kill.assert_called_once()
