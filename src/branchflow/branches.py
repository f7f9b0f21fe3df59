"""Branch naming conventions."""

import re
from enum import Enum
from typing import Mapping, Optional


class Role(str, Enum):
    """Logical position of a long-lived branch in the branching model."""

    MASTER = "master"
    DEVELOP = "develop"


class BranchCategory(Enum):
    """Branch category derived from its name."""

    FEATURE = "feature"
    HOTFIX = "hotfix"
    RELEASE = "release"
    OTHER = "other"  # A branch currently bound to a role


DEFAULT_ROLE_BRANCHES: dict[Role, str] = {
    Role.MASTER: "master",
    Role.DEVELOP: "develop",
}

BRANCH_TYPES = ("feature", "hotfix", "release")

_HOTFIX_OR_RELEASE = re.compile(r"^(hotfix|release)[/-].+")


def is_hotfix_or_release(name: str) -> bool:
    """Check if a branch name is hotfix or release shaped, e.g. ``release/1.2``."""
    return _HOTFIX_OR_RELEASE.match(name) is not None


def classify(name: str, role_branches: Optional[Mapping[Role, str]] = None) -> BranchCategory:
    """Get the category of a branch name.

    Args:
        name: Branch name
        role_branches: Branch names currently bound to each role; defaults
            to the literal ``master``/``develop``

    Returns:
        BranchCategory: Hotfix and release prefixes win, names bound to a
        role are OTHER, anything else is a feature branch
    """
    match = _HOTFIX_OR_RELEASE.match(name)
    if match:
        return BranchCategory(match.group(1))
    if role_branches is None:
        role_branches = DEFAULT_ROLE_BRANCHES
    if name in role_branches.values():
        return BranchCategory.OTHER
    return BranchCategory.FEATURE


def build_branch_name(branch_type: str, issue_id: str, description: str = "") -> str:
    """Build a branch name such as ``feature/CJP-100-add_login_form``."""
    description = description.strip()
    suffix = "-" + re.sub(r"\s+", "_", description.lower()) if description else ""
    return f"{branch_type}/{issue_id}{suffix}"
