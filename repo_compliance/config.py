"""
Configuration management for Repo Compliance.

Loads settings from:
1. .repo-compliance.toml (local config)
2. pyproject.toml (project-level config)
"""

import os
import tomllib
from pathlib import Path

# project_root is the parent directory of repo_compliance/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

LOCAL_CONFIG_NAME = ".repo-compliance.toml"
CONFIG_SECTION = "repo-compliance"

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

DEFAULT_EDITION = "default"
DEFAULT_NUM_WORKERS = 1

# Global settings (can be overridden)
_CONFIG_PATH: Path | None = None
_VERBOSE: bool | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def set_config_path(path: Path | str | None) -> None:
    """
    Set an explicit configuration file, bypassing project discovery.

    Args:
        path: Path to a TOML file, or None to restore discovery.
    """
    global _CONFIG_PATH
    _CONFIG_PATH = Path(path).expanduser() if path is not None else None


def get_settings() -> dict:
    """
    Return the ``[tool.repo-compliance]`` table of the active config file.

    Priority:
    1. Explicitly set path via set_config_path()
    2. REPO_COMPLIANCE_CONFIG environment variable
    3. .repo-compliance.toml (local config)
    4. pyproject.toml (fallback)

    Returns:
        The settings table, or an empty dict when nothing is configured.
    """
    candidates: list[Path] = []
    if _CONFIG_PATH is not None:
        if not _CONFIG_PATH.exists():
            raise ValueError(f"Config file not found: {_CONFIG_PATH}")
        candidates.append(_CONFIG_PATH)
    else:
        env_path = os.getenv("REPO_COMPLIANCE_CONFIG")
        if env_path:
            candidates.append(Path(env_path).expanduser())
        candidates.append(PROJECT_ROOT / LOCAL_CONFIG_NAME)
        candidates.append(PROJECT_ROOT / "pyproject.toml")

    for config_path in candidates:
        if not config_path.exists():
            continue
        settings = load_config_file(config_path).get("tool", {}).get(CONFIG_SECTION)
        if settings:
            return settings
    return {}


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL


def set_verbose(verbose: bool | None) -> None:
    """Force verbose output on or off (None restores config lookup)."""
    global _VERBOSE
    _VERBOSE = verbose


def is_verbose_enabled() -> bool:
    """
    Check if verbose output is enabled.

    Priority:
    1. Explicitly set value via set_verbose()
    2. REPO_COMPLIANCE_VERBOSE environment variable
    3. Config file ``verbose`` key
    4. Default: False
    """
    if _VERBOSE is not None:
        return _VERBOSE

    env_verbose = os.getenv("REPO_COMPLIANCE_VERBOSE")
    if env_verbose:
        return env_verbose.lower() in ("1", "true", "yes", "on")

    return bool(get_settings().get("verbose", False))


def get_edition() -> str:
    """Get the check catalogue edition name (config or default)."""
    return str(get_settings().get("edition", DEFAULT_EDITION))


def get_num_workers() -> int:
    """
    Get the number of repositories evaluated concurrently.

    Priority:
    1. REPO_COMPLIANCE_NUM_WORKERS environment variable
    2. Config file ``num_workers`` key
    3. Default: 1 (sequential)
    """
    env_workers = os.getenv("REPO_COMPLIANCE_NUM_WORKERS")
    if env_workers:
        try:
            return max(1, int(env_workers))
        except ValueError:
            pass

    return max(1, int(get_settings().get("num_workers", DEFAULT_NUM_WORKERS)))


def get_configured_repositories() -> list[dict] | None:
    """
    Get repository entries declared in the config file.

    Returns:
        The raw ``repositories`` array, or None when the built-in registry
        should be used.
    """
    repositories = get_settings().get("repositories")
    if repositories is None:
        return None
    if not isinstance(repositories, list):
        raise ValueError("'repositories' must be an array of tables")
    return repositories
