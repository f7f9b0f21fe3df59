"""Command line interface for branchflow."""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from branchflow.branches import BRANCH_TYPES, Role, build_branch_name
from branchflow.config import ConfigStore, provider_key, repo_branches_key, repo_key
from branchflow.errors import BranchflowError, NotAGitRepository, WorkflowAborted
from branchflow.git import GitRepo, check_git_installation
from branchflow.log import setup_logging
from branchflow.prompts import Prompter
from branchflow.providers import GitServer
from branchflow.resolver import Scope, SourceBranchResolver
from branchflow.workflows import create_branch, open_pull_request, sync_branch

app = typer.Typer(help="Create and sync feature, hotfix and release branches.")
console = Console()


class BranchType(str, Enum):
    """Branch types offered by branch-create."""

    FEATURE = "feature"
    HOTFIX = "hotfix"
    RELEASE = "release"


PROVIDER_DATA_CHOICES = ["all", *(server.value for server in GitServer)]

CONFIG_MENU = {
    "all": "Show all config data",
    "path": "Get config location",
    "clear": "Clear all config data (can't be undone)",
    "provider": "Remove git provider personal data (token, username, etc)",
    "project": "Remove current git project data",
}

RepoPath = Annotated[Path, typer.Option("--path", help="Path to git repository")]


def fail(err: BranchflowError) -> typer.Exit:
    """Report an error and build the exit to raise."""
    if isinstance(err, WorkflowAborted):
        console.print(f"[yellow]{err}[/yellow]")
    else:
        console.print(f"[red]Error:[/red] {err}")
    return typer.Exit(code=1)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except BranchflowError as err:
        raise fail(err) from err


def get_resolver(repo: Optional[GitRepo], store: ConfigStore) -> SourceBranchResolver:
    """Get a resolver, scoped to the repository when it has an origin remote."""
    remote_url = None
    if repo is not None:
        try:
            remote_url = repo.get_remote_url()
        except NotAGitRepository:
            remote_url = None
    return SourceBranchResolver(store, remote_url)


def _try_repo(path: Path) -> Optional[GitRepo]:
    try:
        return GitRepo(path)
    except NotAGitRepository:
        return None


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show each step as it runs"),
) -> None:
    """Create and sync feature, hotfix and release branches."""
    setup_logging("INFO" if verbose else None)


@app.command("branch-create")
def branch_create(
    issue_id: Annotated[Optional[str], typer.Argument(help="Issue ID, e.g. CJP-100")] = None,
    branch_type: Annotated[Optional[BranchType], typer.Option("--type", "-t", help="Branch type")] = None,
    description: Annotated[
        Optional[str], typer.Option("--description", "-d", help="Description appended to the branch name")
    ] = None,
    source: Annotated[
        Optional[str], typer.Option("--from", help="Use custom source branch to create the branch from")
    ] = None,
    push: Annotated[bool, typer.Option("--push", "-p", help="Push created branch to remote")] = False,
    path: RepoPath = Path("."),
) -> None:
    """Create a new branch from updated master or develop."""
    prompter = Prompter(console)
    try:
        check_git_installation()
        repo = get_repo(path)

        if branch_type is None:
            branch_type = BranchType(prompter.select("Select the branch type", BRANCH_TYPES))
        if not issue_id:
            issue_id = prompter.text("Enter the issue ID: e.g. CJP-100, CORN-2000 or GIS-205")
        if description is None:
            description = prompter.text(
                "Enter a description for the branch. If empty none description text will be appended to branch name"
            )

        new_branch = build_branch_name(branch_type.value, issue_id, description)
        created = create_branch(repo, get_resolver(repo, ConfigStore()), new_branch, source=source, push=push)
    except BranchflowError as err:
        raise fail(err) from err

    if created.merged:
        console.print(f"Merged [bold]{created.merged}[/bold] into the release branch")
    if created.pushed:
        console.print("Pushed branch to [bold]origin[/bold]")
    console.print(f"Created and changed to branch [bold]{created.name}[/bold] from [bold]{created.source}[/bold]")


@app.command("branch-sync")
def branch_sync(
    source: Annotated[
        Optional[str], typer.Option("--from", "-f", help="Use custom source branch to sync the current branch from")
    ] = None,
    rebase: Annotated[bool, typer.Option("--rebase", "-r", help="Use rebase when syncing")] = False,
    path: RepoPath = Path("."),
) -> None:
    """Update current branch with remote changes."""
    try:
        check_git_installation()
        repo = get_repo(path)
        result = sync_branch(repo, get_resolver(repo, ConfigStore()), source=source, rebase=rebase)
    except BranchflowError as err:
        raise fail(err) from err

    if result.skipped:
        console.print(f"[yellow]You are in a source branch: [bold underline]{result.branch}[/bold underline]. Doing nothing.[/yellow]")
        return
    if result.output:
        console.print(result.output, markup=False, highlight=False, soft_wrap=True)
    console.print(f"Synced [bold]{result.branch}[/bold] with [bold]{result.source}[/bold]")


@app.command("pr")
def pull_request(
    target: Annotated[Optional[str], typer.Option("--target", help="Branch to merge into")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Pull request title")] = None,
    open_browser: Annotated[bool, typer.Option("--open", "-o", help="Open the page in a browser")] = False,
    path: RepoPath = Path("."),
) -> None:
    """Start a pull request from the current branch."""
    try:
        repo = get_repo(path)
        request = open_pull_request(repo, ConfigStore(), Prompter(console), target=target, title=title)
    except BranchflowError as err:
        raise fail(err) from err

    console.print(f"Pull request [bold]{request.source}[/bold] → [bold]{request.target}[/bold] on {request.provider.value}:")
    console.print(request.url, markup=False, highlight=False, soft_wrap=True)
    if open_browser:
        typer.launch(request.url)


def _show_path(store: ConfigStore) -> None:
    console.print(str(store.path), markup=False, highlight=False, soft_wrap=True)


def _show_all(store: ConfigStore) -> None:
    console.print(json.dumps(store.all, indent=2), markup=False, highlight=False, soft_wrap=True)


def _clear(store: ConfigStore) -> None:
    store.clear()
    console.print("All saved data has been cleared!")


def _remove_provider_data(store: ConfigStore, provider: str) -> None:
    if provider not in PROVIDER_DATA_CHOICES:
        raise typer.BadParameter(f"Choose one of: {', '.join(PROVIDER_DATA_CHOICES)}", param_hint="--remove-provider-data")
    store.delete(provider_key(None if provider == "all" else provider))
    console.print("Data removed successfully!")


def _remove_project_data(store: ConfigStore, path: Path) -> None:
    remote_url = get_repo(path).get_remote_url()
    store.delete(repo_key(remote_url))
    store.delete(repo_branches_key(remote_url))
    console.print("Data removed successfully!")


@app.command("config")
def config(
    show_path: Annotated[bool, typer.Option("--path", "-p", help="Show path where config data is located")] = False,
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Show all config data saved")] = False,
    clear: Annotated[bool, typer.Option("--clear", "-c", help="Clear all saved config data")] = False,
    remove_provider_data: Annotated[
        Optional[str],
        typer.Option("--remove-provider-data", help="Remove personal data of a provider: all, github, azure or bitbucket"),
    ] = None,
    remove_project: Annotated[
        bool, typer.Option("--remove-project", help="Remove data saved for the current git project")
    ] = False,
    repo_dir: Annotated[
        Path, typer.Option("--repo-dir", help="Path to git repository (--path shows the config location)")
    ] = Path("."),
) -> None:
    """Manage the data saved by this tool.

    The repository for --remove-project is given with --repo-dir.
    """
    store = ConfigStore()
    try:
        if show_path:
            return _show_path(store)
        if show_all:
            return _show_all(store)
        if clear:
            return _clear(store)
        if remove_provider_data is not None:
            return _remove_provider_data(store, remove_provider_data)
        if remove_project:
            return _remove_project_data(store, repo_dir)

        prompter = Prompter(console)
        for option, label in CONFIG_MENU.items():
            console.print(f"  [cyan]{option}[/cyan]: {label}")
        option = prompter.select("Select an option", list(CONFIG_MENU))
        if option == "path":
            return _show_path(store)
        if option == "all":
            return _show_all(store)
        if option == "clear":
            return _clear(store)
        if option == "provider":
            provider = prompter.select("Select the git provider to remove the data", PROVIDER_DATA_CHOICES)
            return _remove_provider_data(store, provider)
        return _remove_project_data(store, repo_dir)
    except BranchflowError as err:
        raise fail(err) from err


@app.command("default-branch")
def default_branch(
    role: Annotated[Role, typer.Argument(help="Role of the branch")],
    name: Annotated[Optional[str], typer.Argument(help="Branch name to bind to the role")] = None,
    repo_scope: Annotated[
        bool, typer.Option("--repo", help="Only change the branch for the current repository")
    ] = False,
    path: RepoPath = Path("."),
) -> None:
    """Show or change the branch used as master or develop."""
    store = ConfigStore()
    try:
        repo = get_repo(path) if repo_scope else _try_repo(path)
        resolver = get_resolver(repo, store)

        if name is None:
            table = Table(title=f"{role.value} branch", show_header=True, header_style="bold", title_style="bold blue")
            table.add_column("Scope", style="cyan")
            table.add_column("Branch", style="magenta")
            table.add_row("global", resolver.get_role_branch(Scope.GLOBAL, role) or "")
            table.add_row("repository", resolver.get_role_branch(Scope.REPOSITORY, role) or "")
            table.add_row("effective", resolver.get_effective_role_branch(role))
            console.print(table)
            return

        if repo_scope:
            resolver.set_repository_role_branch(role, name)
            console.print(f"Using [bold]{name}[/bold] as {role.value} branch in this repository")
        else:
            resolver.set_role_branch(role, name)
            console.print(f"Using [bold]{name}[/bold] as {role.value} branch")
    except BranchflowError as err:
        raise fail(err) from err


if __name__ == "__main__":
    app()
