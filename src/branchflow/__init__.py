"""Branch lifecycle assistant for feature/hotfix/release workflows.

Features:
- Create feature, hotfix and release branches from the right source branch
- Sync the current branch with its source branch
- Per-user and per-repository names for the master and develop branches
- Pull request links for GitHub, Azure DevOps and Bitbucket remotes
"""

__version__ = "0.1.0"
