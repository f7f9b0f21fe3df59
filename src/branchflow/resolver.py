"""Source branch resolution.

Answers "which branch should this branch be created from or synced with?".
Each role (master, develop) can be bound to a branch name at two levels:

1. Repository: ``git.branch.repo.<remote url>`` holds ``{"master": ..., "develop": ...}``
2. Global: ``git.branch.default.<role>``

and falls back to the literal role name when neither level sets it.
"""

from enum import Enum
from typing import Any, Optional

from branchflow.branches import DEFAULT_ROLE_BRANCHES, Role, is_hotfix_or_release
from branchflow.config import ConfigStore, global_branch_key, repo_branches_key
from branchflow.errors import NotAGitRepository
from branchflow.log import get_logger

logger = get_logger("resolver")


class Scope(Enum):
    """Level a role binding is stored at."""

    GLOBAL = "global"
    REPOSITORY = "repository"


def role_needed(branch: str, develop_branch: str) -> Role:
    """Get the role whose branch ``branch`` is created from or synced with.

    The develop branch itself and hotfix/release branches come from master;
    everything else comes from develop.
    """
    if branch == develop_branch or is_hotfix_or_release(branch):
        return Role.MASTER
    return Role.DEVELOP


class SourceBranchResolver:
    """Resolve role bindings and source branches from the config store."""

    def __init__(self, store: ConfigStore, remote_url: Optional[str] = None) -> None:
        """Initialize resolver.

        Args:
            store: Configuration store holding the role bindings
            remote_url: Origin URL identifying the repository; without it
                only global bindings are consulted
        """
        self.store = store
        self.remote_url = remote_url

    def _repository_bindings(self) -> Optional[dict[str, Any]]:
        if self.remote_url is None:
            return None
        bindings = self.store.get(repo_branches_key(self.remote_url))
        return bindings if isinstance(bindings, dict) else None

    def get_role_branch(self, scope: Scope, role: Role) -> Optional[str]:
        """Get the branch bound to a role at one scope, None when unset."""
        if scope is Scope.GLOBAL:
            return self.store.get(global_branch_key(role.value)) or None
        bindings = self._repository_bindings()
        if not bindings:
            return None
        return bindings.get(role.value) or None

    def get_global_role_branch(self, role: Role) -> str:
        return self.get_role_branch(Scope.GLOBAL, role) or DEFAULT_ROLE_BRANCHES[role]

    def get_effective_role_branch(self, role: Role) -> str:
        """Get the branch bound to a role, repository binding first."""
        return self.get_role_branch(Scope.REPOSITORY, role) or self.get_global_role_branch(role)

    def set_role_branch(self, role: Role, name: str) -> None:
        """Bind a role to a branch name for every repository."""
        self.store.set(global_branch_key(role.value), name)

    def set_repository_role_branch(self, role: Role, name: str) -> None:
        """Bind a role to a branch name for the current repository only.

        Raises:
            NotAGitRepository: If no repository identity is known
        """
        if self.remote_url is None:
            raise NotAGitRepository("You are not in a git project")
        key = repo_branches_key(self.remote_url)
        bindings = self._repository_bindings() or {}
        bindings[role.value] = name
        self.store.set(key, bindings)

    def resolve_source_branch(self, branch: str) -> str:
        """Get the branch that ``branch`` should be created from or synced with.

        The needed role is decided twice. Against the literal develop name
        it selects the repository binding, which wins whenever it is set.
        Otherwise it is decided again against the globally configured
        develop name and looked up in the global bindings.
        """
        bindings = self._repository_bindings()
        default_role = role_needed(branch, DEFAULT_ROLE_BRANCHES[Role.DEVELOP])
        if bindings and bindings.get(default_role.value):
            logger.debug("Source of %s from repository binding for %s", branch, default_role.value)
            return bindings[default_role.value]

        global_role = role_needed(branch, self.get_global_role_branch(Role.DEVELOP))
        source = self.get_global_role_branch(global_role)
        logger.debug("Source of %s from global binding for %s: %s", branch, global_role.value, source)
        return source
