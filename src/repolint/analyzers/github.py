"""GitHub metadata fetcher for remote checks."""

import logging
import os
import re
from datetime import datetime, timezone

import httpx

from repolint.models.schemas import RemoteMetadata, RepoRef

logger = logging.getLogger(__name__)

REPOSITORY_QUERY = """
query ($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    securityPolicyUrl
    codeOfConduct {
      url
    }
    defaultBranchRef {
      branchProtectionRule {
        requiredStatusCheckContexts
      }
      target {
        ... on Commit {
          checkSuites(first: 50) {
            nodes {
              checkRuns(first: 50) {
                nodes {
                  name
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


class GitHubError(Exception):
    """Raised when the GitHub API returns an error."""


class RepositoryNotFoundError(GitHubError):
    """Raised when a repository does not exist or is not accessible."""

    def __init__(self, repo_ref: RepoRef) -> None:
        self.repo_ref = repo_ref
        super().__init__(f"Repository {repo_ref.owner}/{repo_ref.repo} not found")


def parse_repo_url(url: str) -> RepoRef | None:
    """Parse a GitHub repository URL into a RepoRef.

    Supports https, ssh and git protocol URLs, with or without ``.git``.

    Args:
        url: Repository URL to parse.

    Returns:
        RepoRef if the URL points to a GitHub repository, None otherwise.
    """
    if not url:
        return None

    # https://github.com/owner/repo
    # https://github.com/owner/repo.git
    # git@github.com:owner/repo.git
    # git://github.com/owner/repo.git
    github_patterns = [
        r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/\s]+?)(?:\.git)?/?$",
        r"git@github\.com:([^/]+)/([^/\s]+?)(?:\.git)?$",
        r"git://github\.com/([^/]+)/([^/\s]+?)(?:\.git)?$",
    ]

    for pattern in github_patterns:
        match = re.match(pattern, url.strip())
        if match:
            return RepoRef(owner=match.group(1), repo=match.group(2))

    return None


class GitHubFetcher:
    """Fetches repository metadata from the GitHub GraphQL API.

    Requires a GitHub personal access token.
    Set GITHUB_TOKEN environment variable or pass token to constructor.
    """

    GRAPHQL_URL = "https://api.github.com/graphql"

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, a new client is created.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client

        # Rate limit tracking
        self.rate_limit_remaining: int = 5000
        self.rate_limit_reset: datetime | None = None

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0, headers=self._headers())

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if reset is not None:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)

    async def _query(self, query: str, variables: dict) -> dict:
        """Run a GraphQL query and return its data.

        Raises on HTTP errors and on GraphQL errors without data.
        """
        if not self._token:
            raise GitHubError("A GitHub token is required to query repository metadata")

        client = await self._get_client()
        try:
            response = await client.post(
                self.GRAPHQL_URL,
                json={"query": query, "variables": variables},
                headers=self._headers(),
            )
            self._update_rate_limits(response)
            response.raise_for_status()
            payload = response.json()
        finally:
            if self._client is None:
                await client.aclose()

        errors = payload.get("errors") or []
        data = payload.get("data") or {}
        if errors:
            messages = "; ".join(e.get("message", "unknown error") for e in errors)
            if any(e.get("type") == "NOT_FOUND" for e in errors):
                logger.debug(f"GitHub query returned NOT_FOUND: {messages}")
            elif not data:
                raise GitHubError(f"GitHub query failed: {messages}")
        return data

    async def fetch_metadata(self, repo_ref: RepoRef) -> RemoteMetadata:
        """Fetch the metadata remote checks rely on.

        Args:
            repo_ref: Reference to the repository.

        Returns:
            RemoteMetadata snapshot.

        Raises:
            RepositoryNotFoundError: If the repository does not exist.
            GitHubError: On GraphQL errors.
            httpx.HTTPStatusError: On HTTP errors.
        """
        data = await self._query(
            REPOSITORY_QUERY,
            {"owner": repo_ref.owner, "repo": repo_ref.repo},
        )
        repository = data.get("repository")
        if not repository:
            raise RepositoryNotFoundError(repo_ref)

        code_of_conduct = repository.get("codeOfConduct") or {}
        metadata = RemoteMetadata(
            owner=repo_ref.owner,
            repo=repo_ref.repo,
            code_of_conduct_url=code_of_conduct.get("url") or None,
            security_policy_url=repository.get("securityPolicyUrl") or None,
            status_checks=tuple(self._status_checks(repository.get("defaultBranchRef"))),
        )
        logger.debug(
            f"GitHub metadata for {repo_ref.owner}/{repo_ref.repo}: "
            f"{len(metadata.status_checks)} status checks, "
            f"{self.rate_limit_remaining} requests remaining"
        )
        return metadata

    @staticmethod
    def _status_checks(branch: dict | None) -> list[str]:
        """Collect status check names from the default branch."""
        if not branch:
            return []

        names: list[str] = []
        protection = branch.get("branchProtectionRule") or {}
        names.extend(protection.get("requiredStatusCheckContexts") or [])

        target = branch.get("target") or {}
        suites = (target.get("checkSuites") or {}).get("nodes") or []
        for suite in suites:
            runs = ((suite or {}).get("checkRuns") or {}).get("nodes") or []
            names.extend(run["name"] for run in runs if run and run.get("name"))

        # Keep first occurrence order
        return list(dict.fromkeys(names))
