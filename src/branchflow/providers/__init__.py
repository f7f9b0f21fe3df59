"""Git hosting providers."""

from branchflow.providers.base import GitProvider, GitServer, PullRequest, RemoteLocation, parse_remote
from branchflow.providers.registry import (
    PROVIDERS,
    detect_provider,
    get_provider,
    guess_provider,
    resolve_provider_for_repository,
)

__all__ = [
    "GitProvider",
    "GitServer",
    "PullRequest",
    "RemoteLocation",
    "parse_remote",
    "PROVIDERS",
    "detect_provider",
    "get_provider",
    "guess_provider",
    "resolve_provider_for_repository",
]
