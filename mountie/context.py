"""Event context: the payload of one event and the adapter to act on it."""

from typing import Any, Dict

from mountie.adapters.base import GitPlatformAdapter
from mountie.models import Repository


class EventContext:
    """Payload of a single event plus the platform adapter.

    ``payload["repository"]`` is a GitHub repository object (name,
    full_name, default_branch, license, ...).
    """

    def __init__(self, payload: Dict[str, Any], github: GitPlatformAdapter) -> None:
        self.payload = payload
        self.github = github
        self.repository = Repository.from_payload(payload.get("repository") or {})

    @property
    def repo(self) -> str:
        """Full name (owner/name) used in every adapter call."""
        return self.repository.full_name

    @property
    def default_branch(self) -> str | None:
        return self.repository.default_branch

    def __repr__(self) -> str:
        return f"EventContext(repo={self.repo!r})"
