"""Analyzers for commit history, GitHub metadata and scorecard reports."""

from repolint.analyzers.github import GitHubFetcher
from repolint.analyzers.scorecard import ScorecardClient
from repolint.analyzers.signoff import analyze_signoff

__all__ = ["GitHubFetcher", "ScorecardClient", "analyze_signoff"]
