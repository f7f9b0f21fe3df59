"""Azure DevOps provider."""

from typing import Optional
from urllib.parse import urlencode

from branchflow.providers.base import GitProvider, GitServer, RemoteLocation


class AzureProvider(GitProvider):
    """Pull requests on Azure DevOps Repos."""

    server = GitServer.AZURE

    def _repository_url(self, location: RemoteLocation) -> str:
        parts = location.parts
        if location.host.startswith("ssh."):
            # git@ssh.dev.azure.com:v3/<organization>/<project>/<repository>
            if len(parts) != 4 or parts[0] != "v3":
                raise ValueError(f"Expected v3/<organization>/<project>/<repository>, got '{location.path}'")
            _, organization, project, repository = parts
            host = location.host[len("ssh.") :]
            return f"https://{host}/{organization}/{project}/_git/{repository}"

        if "_git" not in parts or parts.index("_git") == len(parts) - 1:
            raise ValueError(f"Expected .../_git/<repository> in remote path, got '{location.path}'")
        end = parts.index("_git") + 2
        return f"https://{location.host}/{'/'.join(parts[:end])}"

    def _pull_request_url(
        self,
        location: RemoteLocation,
        source: str,
        target: str,
        title: Optional[str],
    ) -> str:
        query = urlencode({"sourceRef": source, "targetRef": target})
        return f"{self._repository_url(location)}/pullrequestcreate?{query}"
