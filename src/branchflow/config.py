"""Persistent user configuration.

Data lives in a single JSON file as nested objects. Keys are dotted paths;
a backslash-escaped dot (``\\.``) inside a key is part of the segment, which
lets remote URLs be used as keys.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir

from branchflow.errors import ConfigError

APP_NAME = "branchflow"
CONFIG_PATH_ENV = "BRANCHFLOW_CONFIG_PATH"

_UNESCAPED_DOT = re.compile(r"(?<!\\)\.")


def escape_key(segment: str) -> str:
    """Escape dots so ``segment`` stays a single key segment.

    Runs of dots collapse into one escaped dot, matching how keys were
    written by earlier releases.
    """
    return re.sub(r"\.+", r"\\.", segment)


def repo_key(remote_url: str) -> str:
    """Get the key holding all data saved for a repository."""
    return f"git.repo.{escape_key(remote_url)}"


def repo_server_key(remote_url: str) -> str:
    """Get the key of the provider saved for a repository."""
    return f"{repo_key(remote_url)}.server"


def repo_branches_key(remote_url: str) -> str:
    """Get the key of the role bindings of a repository."""
    return f"git.branch.repo.{escape_key(remote_url)}"


def global_branch_key(role: str) -> str:
    """Get the key of the global binding of a role."""
    return f"git.branch.default.{role}"


def provider_key(identifier: Optional[str] = None) -> str:
    """Namespace holding personal provider data (tokens, usernames)."""
    return "git.providers" if identifier is None else f"git.providers.{identifier}"


def default_config_path() -> Path:
    """Get the config file location, honouring BRANCHFLOW_CONFIG_PATH."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME)) / "config.json"


def _split_key(key: str) -> list[str]:
    return [segment.replace("\\.", ".") for segment in _UNESCAPED_DOT.split(key)]


class ConfigStore:
    """Hierarchical key-value store backed by a JSON file.

    The file is read on every access so changes made by another invocation,
    or by hand, are picked up immediately.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path: Path = path if path is not None else default_config_path()

    def _load(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as err:
            raise ConfigError(f"Failed to read config file {self.path}: {err}") from err
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as err:
            raise ConfigError(f"Config file {self.path} is not valid JSON: {err}") from err
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.path} must contain a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Write the whole tree, replacing the file in one step."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(json.dumps(data, indent=2) + "\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @property
    def all(self) -> dict[str, Any]:
        """Get the whole configuration tree."""
        return self._load()

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under a dotted key."""
        node: Any = self._load()
        for segment in _split_key(key):
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        return node

    def set(self, key: str, value: Any) -> None:
        """Store a value under a dotted key, creating parents as needed."""
        data = self._load()
        *parents, leaf = _split_key(key)
        node = data
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = value
        self._save(data)

    def delete(self, key: str) -> None:
        """Remove a key and everything below it. Missing keys are ignored."""
        data = self._load()
        *parents, leaf = _split_key(key)
        node: Any = data
        for segment in parents:
            node = node.get(segment) if isinstance(node, dict) else None
            if node is None:
                return
        if isinstance(node, dict) and leaf in node:
            del node[leaf]
            self._save(data)

    def clear(self) -> None:
        """Remove all stored data."""
        self._save({})
