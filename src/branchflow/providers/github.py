"""GitHub provider."""

from typing import Optional
from urllib.parse import quote, urlencode

from branchflow.providers.base import GitProvider, GitServer, RemoteLocation


class GithubProvider(GitProvider):
    """Pull requests on github.com and GitHub Enterprise."""

    server = GitServer.GITHUB

    def _pull_request_url(
        self,
        location: RemoteLocation,
        source: str,
        target: str,
        title: Optional[str],
    ) -> str:
        parts = location.parts
        if len(parts) < 2:
            raise ValueError(f"Expected <owner>/<repository> in remote path, got '{location.path}'")
        owner, repository = parts[-2], parts[-1]
        query = {"expand": "1"}
        if title:
            query["title"] = title
        compare = f"{quote(target, safe='/')}...{quote(source, safe='/')}"
        return f"https://{location.host}/{owner}/{repository}/compare/{compare}?{urlencode(query)}"
