"""Data models for repositories, refs, file contents, commits and pull requests (Pydantic)."""

from mountie.models.compliance import ComplianceFile, ComplianceItem
from mountie.models.content import Commit, FileContent, Ref
from mountie.models.pr import PR, PullState
from mountie.models.repository import License, Repository

__all__ = [
    "Commit",
    "ComplianceFile",
    "ComplianceItem",
    "FileContent",
    "License",
    "PR",
    "PullState",
    "Ref",
    "Repository",
]
