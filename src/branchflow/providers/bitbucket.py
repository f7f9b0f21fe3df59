"""Bitbucket provider."""

from typing import Optional
from urllib.parse import urlencode

from branchflow.providers.base import GitProvider, GitServer, RemoteLocation


class BitbucketProvider(GitProvider):
    """Pull requests on bitbucket.org."""

    server = GitServer.BITBUCKET

    def _pull_request_url(
        self,
        location: RemoteLocation,
        source: str,
        target: str,
        title: Optional[str],
    ) -> str:
        parts = location.parts
        if len(parts) < 2:
            raise ValueError(f"Expected <workspace>/<repository> in remote path, got '{location.path}'")
        workspace, repository = parts[-2], parts[-1]
        query = urlencode({"source": source, "dest": target})
        return f"https://{location.host}/{workspace}/{repository}/pull-requests/new?{query}"
