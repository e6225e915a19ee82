"""Repository metadata as delivered in event payloads and by the repos API."""

from typing import Any, Dict

from pydantic import BaseModel


class License(BaseModel):
    """License detected by the hosting provider."""

    key: str | None = None
    name: str | None = None
    spdx_id: str | None = None


class Repository(BaseModel):
    """Repository metadata; default_branch is None for an empty repository."""

    name: str
    full_name: str
    default_branch: str | None = None
    license: License | None = None
    archived: bool = False
    fork: bool = False

    @property
    def owner(self) -> str:
        return self.full_name.split("/", 1)[0]

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Repository":
        """Build from a webhook or API repository object."""
        lic = data.get("license")
        name = data.get("name") or ""
        owner = (data.get("owner") or {}).get("login", "")
        full_name = data.get("full_name") or (f"{owner}/{name}" if owner else name)
        return cls(
            name=name,
            full_name=full_name,
            default_branch=data.get("default_branch") or None,
            license=License(**lic) if isinstance(lic, dict) else None,
            archived=bool(data.get("archived")),
            fork=bool(data.get("fork")),
        )
