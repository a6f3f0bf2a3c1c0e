"""
VCS (Version Control System) abstraction layer for Repo Compliance.

This module provides a unified interface for fetching the repository metadata
and file contents that compliance checks inspect.
"""

from repo_compliance.vcs.base import (
    BaseVCSProvider,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    VCSError,
)
from repo_compliance.vcs.github import GitHubProvider

__all__ = [
    "BaseVCSProvider",
    "ForbiddenError",
    "GitHubProvider",
    "NotFoundError",
    "RateLimitedError",
    "UnauthorizedError",
    "VCSError",
    "get_vcs_provider",
]

# Supported VCS providers
_PROVIDERS: dict[str, type[BaseVCSProvider]] = {
    "github": GitHubProvider,
}


def get_vcs_provider(platform: str = "github", **kwargs) -> BaseVCSProvider:
    """
    Factory function to get VCS provider instance.

    Args:
        platform: VCS platform name. Default: 'github'
        **kwargs: Provider-specific configuration (e.g., token, api_url)

    Returns:
        Initialized VCS provider instance

    Raises:
        ValueError: If platform is not supported, or the provider is missing
            its credentials
    """
    platform_lower = platform.lower()

    if platform_lower not in _PROVIDERS:
        supported = ", ".join(sorted(_PROVIDERS.keys()))
        raise ValueError(
            f"Unsupported VCS platform: {platform}. Supported platforms: {supported}"
        )

    return _PROVIDERS[platform_lower](**kwargs)
