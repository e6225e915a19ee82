"""Parsed COMPLIANCE.yaml: PIA/STRA status of a repository."""

from datetime import date, datetime
from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _ensure_str(value: str | date | datetime | None) -> str | None:
    """YAML turns unquoted ISO dates into date/datetime; keep them as ISO strings."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class ComplianceItem(BaseModel):
    """One assessment entry, e.g. PIA with status not-required."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    status: str = ""
    last_updated: Annotated[str | None, BeforeValidator(_ensure_str)] = Field(
        default=None,
        alias="last-updated",
    )


class ComplianceFile(BaseModel):
    name: str = ""
    description: str = ""
    spec: List[ComplianceItem] = Field(default_factory=list)
