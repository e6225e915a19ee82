"""Git platform adapters."""

from mountie.adapters.base import GitPlatformAdapter, GitPlatformError
from mountie.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
