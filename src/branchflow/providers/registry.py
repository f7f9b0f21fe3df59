"""Provider lookup and detection."""

from typing import Optional, Union

from branchflow.config import ConfigStore, repo_server_key
from branchflow.errors import UnknownProvider
from branchflow.log import get_logger
from branchflow.prompts import Prompter
from branchflow.providers.azure import AzureProvider
from branchflow.providers.base import GitProvider, GitServer
from branchflow.providers.bitbucket import BitbucketProvider
from branchflow.providers.github import GithubProvider

logger = get_logger("providers")

PROVIDERS: dict[GitServer, type[GitProvider]] = {
    GitServer.GITHUB: GithubProvider,
    GitServer.AZURE: AzureProvider,
    GitServer.BITBUCKET: BitbucketProvider,
}

# Later entries win when a URL contains several hosts
HOST_HINTS: tuple[tuple[str, GitServer], ...] = (
    ("github.com", GitServer.GITHUB),
    ("azure.com", GitServer.AZURE),
    ("bitbucket.org", GitServer.BITBUCKET),
)


def get_provider(identifier: Union[str, GitServer]) -> GitProvider:
    """Get a new provider instance.

    Raises:
        UnknownProvider: If the identifier is not a supported server
    """
    try:
        server = GitServer(identifier)
    except ValueError as err:
        raise UnknownProvider(str(identifier)) from err
    return PROVIDERS[server]()


def guess_provider(remote_url: str) -> Optional[GitServer]:
    """Guess the provider from host names found in a remote URL."""
    guess = None
    for hint, server in HOST_HINTS:
        if hint in remote_url:
            guess = server
    return guess


def detect_provider(remote_url: str, prompter: Prompter) -> GitServer:
    """Work out which provider hosts a remote, asking the user to confirm.

    A guess from the URL is only used once the user confirms it. Otherwise
    the user picks one of the supported servers, so a valid identifier is
    always returned.
    """
    guess = guess_provider(remote_url)
    if guess is not None:
        if prompter.confirm(f"Looks like this is repository from [blue]{guess.value}[/blue]. Is this correct?", default=False):
            return guess
    else:
        logger.warning("Not able to detect git server...")

    answer = prompter.select("Which git server uses this repository?", [server.value for server in GitServer])
    return GitServer(answer)


def resolve_provider_for_repository(store: ConfigStore, remote_url: str, prompter: Prompter) -> GitServer:
    """Get the provider of a repository, detecting and saving it on first use."""
    key = repo_server_key(remote_url)
    cached = store.get(key)
    if cached:
        try:
            return GitServer(cached)
        except ValueError as err:
            raise UnknownProvider(str(cached)) from err

    server = detect_provider(remote_url, prompter)
    store.set(key, server.value)
    logger.info("Saved %s as git server for %s", server.value, remote_url)
    return server
