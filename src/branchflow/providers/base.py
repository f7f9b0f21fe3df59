"""Provider capability interface."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional
from urllib.parse import urlsplit

from branchflow.errors import ProviderOperationFailed


class GitServer(str, Enum):
    """Supported git hosting providers."""

    GITHUB = "github"
    AZURE = "azure"
    BITBUCKET = "bitbucket"


@dataclass(frozen=True)
class RemoteLocation:
    """Host and repository path of a remote URL."""

    host: str
    path: str

    @property
    def parts(self) -> list[str]:
        return [part for part in self.path.split("/") if part]


@dataclass(frozen=True)
class PullRequest:
    """A pull/merge request initiated on a provider."""

    provider: GitServer
    source: str
    target: str
    url: str


_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>.+)$")


def parse_remote(remote_url: str) -> RemoteLocation:
    """Split a remote URL into host and repository path.

    Handles ``https://host/path``, ``ssh://git@host:22/path`` and scp-like
    ``git@host:path`` forms. A trailing ``.git`` is dropped.

    Raises:
        ValueError: If the URL has no host or path
    """
    url = remote_url.strip()
    if "://" in url:
        parts = urlsplit(url)
        host, path = parts.hostname or "", parts.path
    else:
        match = _SCP_LIKE.match(url)
        if not match:
            raise ValueError(f"Unrecognised remote URL: {remote_url}")
        host, path = match.group("host"), match.group("path")

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not host or not path:
        raise ValueError(f"Unrecognised remote URL: {remote_url}")
    return RemoteLocation(host=host.lower(), path=path)


class GitProvider(ABC):
    """Operations every git hosting provider supports.

    Providers hold no state; anything persistent lives in the config store.
    """

    server: ClassVar[GitServer]

    def create_pull_request(
        self,
        remote_url: str,
        source: str,
        target: str,
        title: Optional[str] = None,
    ) -> PullRequest:
        """Start a pull request from ``source`` into ``target``.

        Raises:
            ProviderOperationFailed: If the provider call fails for any reason
        """
        try:
            location = parse_remote(remote_url)
            url = self._pull_request_url(location, source, target, title)
        except Exception as err:
            raise ProviderOperationFailed(self.server.value, err) from err
        return PullRequest(provider=self.server, source=source, target=target, url=url)

    @abstractmethod
    def _pull_request_url(
        self,
        location: RemoteLocation,
        source: str,
        target: str,
        title: Optional[str],
    ) -> str:
        """Get the provider page that creates the pull request."""
