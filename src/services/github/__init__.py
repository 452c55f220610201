"""
GitHub Services Package

Provides GitHub API access and push-event scope filtering for collection sync.
"""

from src.services.github.github_client import GithubClient
from src.services.github.webhook_verifier import WebhookVerifier, verify
from src.services.github.scope import (
    filter_relevant_files,
    is_in_scope,
    is_watched_branch,
)

__all__ = [
    "GithubClient",
    "filter_relevant_files",
    "is_in_scope",
    "is_watched_branch",
    "verify",
    "WebhookVerifier",
]
