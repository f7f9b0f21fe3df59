"""Errors raised by branchflow."""

from typing import Optional


class BranchflowError(Exception):
    """Base class for all branchflow errors."""


class ConfigError(BranchflowError):
    """Configuration file could not be read."""


class GitError(BranchflowError):
    """Git operation error."""

    def __init__(self, message: str, exit_code: Optional[int] = None) -> None:
        """Initialize error.

        Args:
            message: Error message
            exit_code: Exit status of the failed git invocation, if any
        """
        super().__init__(message)
        self.exit_code = exit_code


class GitNotInstalled(GitError):
    """No git executable available."""


class NotAGitRepository(GitError):
    """Not inside a git work tree, or no origin remote configured."""


class WorkflowAborted(BranchflowError):
    """Expected early exit of a workflow; nothing unexpected happened."""


class BranchAlreadyExists(WorkflowAborted):
    """Branch to create already exists."""

    def __init__(self, branch: str, remote: bool = False) -> None:
        where = " in remote" if remote else ""
        super().__init__(f"The branch {branch} already exists{where}.")
        self.branch = branch
        self.remote = remote


class InvalidBranchName(WorkflowAborted):
    """Branch name rejected by git."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"'{branch}' is not a valid branch name.")
        self.branch = branch


class UnknownProvider(BranchflowError):
    """Provider identifier outside the supported set."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Unknown git provider: {identifier}")
        self.identifier = identifier


class ProviderOperationFailed(BranchflowError):
    """A provider call failed."""

    def __init__(self, provider: str, cause: BaseException) -> None:
        """Initialize error.

        Args:
            provider: Identifier of the provider that failed
            cause: Underlying exception, kept uninterpreted
        """
        super().__init__(f"{provider} operation failed: {cause}")
        self.provider = provider
        self.cause = cause
