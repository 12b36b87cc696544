"""Locate headershim TOML configuration files."""

import os
from pathlib import Path


def find_git_root(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: cwd) to the nearest directory holding ``.git``."""
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def get_xdg_config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def find_toml_config_file(start: Path | None = None) -> Path | None:
    """Find the first configuration file, in priority order.

    1. .headershim.toml in the current directory
    2. headershim.toml in the git repository root
    3. config.toml in XDG_CONFIG_HOME/headershim/
    """
    cwd = start or Path.cwd()
    local = cwd / ".headershim.toml"
    if local.is_file():
        return local

    git_root = find_git_root(cwd)
    if git_root is not None:
        repo_config = git_root / "headershim.toml"
        if repo_config.is_file():
            return repo_config

    user_config = get_xdg_config_home() / "headershim" / "config.toml"
    if user_config.is_file():
        return user_config

    return None
