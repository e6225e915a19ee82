"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from mountie.models import PR, Commit, FileContent, PullState, Ref, Repository


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GitPlatformAdapter(ABC):
    """Capabilities the compliance checks need from a Git hosting platform.

    ``repo`` is always the full name (``owner/name``).
    """

    @abstractmethod
    def get_repository(self, repo: str) -> Repository:
        """Fetch repository metadata (default branch, license)."""
        ...

    @abstractmethod
    def list_repositories(self, organization: str | None = None) -> List[Repository]:
        """List repositories of an organization, or of the token owner."""
        ...

    @abstractmethod
    def get_ref(self, repo: str, ref: str) -> Ref:
        """Fetch a reference such as ``heads/main``."""
        ...

    @abstractmethod
    def create_ref(self, repo: str, ref: str, sha: str) -> None:
        """Create a fully qualified reference (``refs/heads/...``) at sha."""
        ...

    @abstractmethod
    def get_content(self, repo: str, path: str, ref: str | None = None) -> FileContent:
        """Fetch file content at a branch, tag or commit."""
        ...

    @abstractmethod
    def create_or_update_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        """Commit a file; content is plain text, sha is required to update."""
        ...

    @abstractmethod
    def list_pulls(self, repo: str, state: PullState = "all") -> List[PR]:
        """List pull requests in the given state."""
        ...

    @abstractmethod
    def create_pr(
        self,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
        maintainer_can_modify: bool = True,
    ) -> PR:
        """Create a pull request."""
        ...

    @abstractmethod
    def list_commits(self, repo: str, path: str, sha: str | None = None) -> List[Commit]:
        """List commits touching path, newest first."""
        ...
