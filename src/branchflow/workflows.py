"""Branch create, sync and pull request workflows.

Each workflow runs its git steps strictly in order and stops at the first
failure. Nothing already done is rolled back.
"""

from dataclasses import dataclass
from typing import Optional

from branchflow.branches import BranchCategory, Role, classify
from branchflow.config import ConfigStore
from branchflow.errors import BranchAlreadyExists, InvalidBranchName, WorkflowAborted
from branchflow.git import GitRepo
from branchflow.log import get_logger
from branchflow.prompts import Prompter
from branchflow.providers import PullRequest, get_provider, resolve_provider_for_repository
from branchflow.resolver import SourceBranchResolver

logger = get_logger("workflows")


@dataclass(frozen=True)
class CreatedBranch:
    """Result of creating a branch."""

    name: str
    source: str
    merged: Optional[str] = None
    pushed: bool = False


@dataclass(frozen=True)
class SyncResult:
    """Result of syncing the current branch."""

    branch: str
    source: str
    skipped: bool = False
    output: str = ""


def create_branch(
    repo: GitRepo,
    resolver: SourceBranchResolver,
    new_branch: str,
    source: Optional[str] = None,
    push: bool = False,
) -> CreatedBranch:
    """Create ``new_branch`` from its updated source branch and switch to it.

    Args:
        repo: Repository to work in
        resolver: Resolver used when no explicit source is given
        new_branch: Name of the branch to create
        source: Branch to create from instead of the resolved one
        push: Push the new branch and set its upstream

    Raises:
        InvalidBranchName: If git rejects the branch name
        BranchAlreadyExists: If the branch exists locally or in origin
        GitError: If any git step fails
    """
    if not repo.is_valid_branch_name(new_branch):
        raise InvalidBranchName(new_branch)

    source_branch = source or resolver.resolve_source_branch(new_branch)
    current_branch = repo.get_current_branch_name()

    logger.info("Checking existing branches...")
    if repo.exists_local_branch(new_branch):
        raise BranchAlreadyExists(new_branch)
    if repo.exists_remote_branch(new_branch):
        raise BranchAlreadyExists(new_branch, remote=True)

    logger.info("Pulling most recent changes from branch %s...", source_branch)
    if current_branch == source_branch:
        repo.pull()
    else:
        repo.fetch_into(source_branch)

    logger.info("Creating new branch...")
    repo.checkout_new_branch(new_branch, source_branch)

    merged = None
    if classify(new_branch) is BranchCategory.RELEASE:
        develop_branch = resolver.get_effective_role_branch(Role.DEVELOP)
        logger.info("Merging most recent changes from %s...", develop_branch)
        if current_branch != develop_branch:
            repo.fetch_into(develop_branch)
        repo.merge(develop_branch)
        merged = develop_branch

    if push:
        logger.info("Pushing branch to remote...")
        repo.push_upstream(new_branch)

    return CreatedBranch(name=new_branch, source=source_branch, merged=merged, pushed=push)


def sync_branch(
    repo: GitRepo,
    resolver: SourceBranchResolver,
    source: Optional[str] = None,
    rebase: bool = False,
) -> SyncResult:
    """Pull the source branch of the current branch into it.

    Does nothing when the current branch is the master or develop branch.
    """
    current_branch = repo.get_current_branch_name()
    if not current_branch:
        raise WorkflowAborted("HEAD is detached. Check out a branch to sync.")

    source_branch = source or resolver.resolve_source_branch(current_branch)
    role_branches = {resolver.get_effective_role_branch(role) for role in Role}
    if current_branch in role_branches:
        return SyncResult(branch=current_branch, source=source_branch, skipped=True)

    logger.info("Pulling %s into %s...", source_branch, current_branch)
    args = ["origin", source_branch, "--ff"]
    if rebase:
        args.append("--rebase")
    result = repo.pull(*args)
    return SyncResult(branch=current_branch, source=source_branch, output=result.stdout)


def open_pull_request(
    repo: GitRepo,
    store: ConfigStore,
    prompter: Prompter,
    target: Optional[str] = None,
    title: Optional[str] = None,
) -> PullRequest:
    """Start a pull request from the current branch on the repository's provider.

    The target defaults to the source branch the current branch was created from.
    """
    current_branch = repo.get_current_branch_name()
    if not current_branch:
        raise WorkflowAborted("HEAD is detached. Check out a branch to open a pull request.")

    remote_url = repo.get_remote_url()
    resolver = SourceBranchResolver(store, remote_url)
    target_branch = target or resolver.resolve_source_branch(current_branch)
    if target_branch == current_branch:
        raise WorkflowAborted(f"Cannot open a pull request from {current_branch} into itself.")

    server = resolve_provider_for_repository(store, remote_url, prompter)
    provider = get_provider(server)
    return provider.create_pull_request(remote_url, current_branch, target_branch, title=title)
