"""Tests for the license and compliance checks run per scheduled repository."""

import base64
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from mountie.adapters.base import GitPlatformAdapter, GitPlatformError
from mountie.constants import (
    COMPLIANCE_BRANCH,
    COMPLIANCE_FILE,
    COMPLIANCE_PR_TITLE,
    LICENSE_BRANCH,
    LICENSE_FILE,
    LICENSE_PR_TITLE,
)
from mountie.context import EventContext
from mountie.models import PR, FileContent, Ref
from mountie.services.repository import (
    add_compliance_file_if_required,
    add_license_if_required,
    has_license,
)
from mountie.services.templates import TemplateError

MUTATIONS = ("create_ref", "create_or_update_file", "create_pr")


def _payload(license=None, default_branch: str | None = "main") -> dict:
    return {
        "action": "repository",
        "repository": {
            "name": "repo",
            "full_name": "owner/repo",
            "default_branch": default_branch,
            "license": license,
        },
    }


@pytest.fixture
def github() -> MagicMock:
    """Adapter for a repository with a main branch, no PRs and no files."""
    adapter = MagicMock(spec=GitPlatformAdapter)
    adapter.get_ref.return_value = Ref(ref="refs/heads/main", sha="abc123")
    adapter.list_pulls.return_value = []
    adapter.get_content.side_effect = GitPlatformError("404: Not Found", status_code=404)
    adapter.create_pr.side_effect = lambda repo, title, body, head, base, maintainer_can_modify: PR(
        number=12, title=title, body=body, head_branch=head, base_branch=base, state="open"
    )
    return adapter


def _mutations(github: MagicMock) -> list[str]:
    return [c[0] for c in github.method_calls if c[0] in MUTATIONS]


def _write_templates(path: Path, compliance: str = "name: compliance\nspec: []\n") -> Path:
    (path / "LICENSE").write_text("Copyright [YEAR] [OWNER]\n", encoding="utf-8")
    (path / "why-license.md").write_text("License for [REPO]", encoding="utf-8")
    (path / "COMPLIANCE.yaml").write_text(compliance, encoding="utf-8")
    (path / "why-comply.md").write_text("Comply, [REPO]", encoding="utf-8")
    return path


def test_has_license() -> None:
    github = MagicMock(spec=GitPlatformAdapter)
    assert has_license(EventContext(_payload(license={"key": "mit", "spdx_id": "MIT"}), github)) is True
    assert has_license(EventContext(_payload(), github)) is False


def test_license_present_creates_nothing(github: MagicMock) -> None:
    ctx = EventContext(_payload(license={"key": "apache-2.0", "spdx_id": "Apache-2.0"}), github)

    assert add_license_if_required(ctx) is None
    assert github.method_calls == []


def test_no_default_branch_creates_nothing(github: MagicMock) -> None:
    github.get_ref.side_effect = GitPlatformError("404: Not Found", status_code=404)
    ctx = EventContext(_payload(), github)

    assert add_license_if_required(ctx) is None
    assert _mutations(github) == []


def test_empty_repository_creates_nothing(github: MagicMock) -> None:
    ctx = EventContext(_payload(default_branch=None), github)

    assert add_license_if_required(ctx) is None
    assert github.method_calls == []


def test_open_license_pr_creates_nothing(github: MagicMock) -> None:
    github.list_pulls.return_value = [
        PR(number=3, title=LICENSE_PR_TITLE, head_branch=LICENSE_BRANCH, base_branch="main", state="open")
    ]
    ctx = EventContext(_payload(), github)

    assert add_license_if_required(ctx) is None
    github.list_pulls.assert_called_once_with("owner/repo", "open")
    assert _mutations(github) == []


def test_existing_license_file_creates_nothing(github: MagicMock) -> None:
    """A LICENSE the provider did not recognise still counts as present."""
    github.get_content.side_effect = None
    github.get_content.return_value = FileContent(path=LICENSE_FILE, content="Q3VzdG9t", encoding="base64")
    ctx = EventContext(_payload(), github)

    assert add_license_if_required(ctx) is None
    github.get_content.assert_called_once_with("owner/repo", LICENSE_FILE, "main")
    assert _mutations(github) == []


def test_missing_license_opens_one_pr(github: MagicMock) -> None:
    ctx = EventContext(_payload(), github)

    pr = add_license_if_required(ctx)

    assert pr is not None and pr.title == LICENSE_PR_TITLE
    assert _mutations(github) == ["create_ref", "create_or_update_file", "create_pr"]
    github.create_ref.assert_called_once_with("owner/repo", f"refs/heads/{LICENSE_BRANCH}", "abc123")
    args = github.create_or_update_file.call_args[0]
    assert args[1] == LICENSE_FILE
    assert "Apache License" in args[2]
    assert args[4] == LICENSE_BRANCH
    kwargs = github.create_pr.call_args[1]
    assert kwargs["base"] == "main"
    assert kwargs["head"] == LICENSE_BRANCH
    assert "repo" in kwargs["body"]


def test_license_uses_configured_templates(github: MagicMock, tmp_path: Path) -> None:
    _write_templates(tmp_path)
    ctx = EventContext(_payload(), github)

    add_license_if_required(ctx, templates_dir=tmp_path)

    data = github.create_or_update_file.call_args[0][2]
    assert data.startswith("Copyright 20")
    assert data.rstrip().endswith("owner")
    assert github.create_pr.call_args[1]["body"] == "License for repo"


def test_missing_template_fails_without_mutation(github: MagicMock, tmp_path: Path) -> None:
    """Templates are loaded before the branch is created."""
    ctx = EventContext(_payload(), github)

    with pytest.raises(TemplateError):
        add_license_if_required(ctx, templates_dir=tmp_path)
    assert _mutations(github) == []


def test_provider_failure_propagates(github: MagicMock) -> None:
    github.create_or_update_file.side_effect = GitPlatformError("403: Forbidden", status_code=403)
    ctx = EventContext(_payload(), github)

    with pytest.raises(GitPlatformError):
        add_license_if_required(ctx)
    github.create_pr.assert_not_called()


def test_pr_lookup_failure_propagates(github: MagicMock) -> None:
    github.list_pulls.side_effect = GitPlatformError("500: Server Error", status_code=500)
    ctx = EventContext(_payload(), github)

    with pytest.raises(GitPlatformError):
        add_license_if_required(ctx)
    assert _mutations(github) == []


def test_missing_compliance_file_opens_one_pr(github: MagicMock) -> None:
    ctx = EventContext(_payload(license={"key": "mit"}), github)

    pr = add_compliance_file_if_required(ctx)

    assert pr is not None and pr.title == COMPLIANCE_PR_TITLE
    assert _mutations(github) == ["create_ref", "create_or_update_file", "create_pr"]
    args = github.create_or_update_file.call_args[0]
    assert args[1] == COMPLIANCE_FILE
    assert args[4] == COMPLIANCE_BRANCH
    data = yaml.safe_load(args[2])
    assert [item["name"] for item in data["spec"]] == ["PIA", "STRA"]
    assert "[TODAY]" not in args[2]


def test_open_compliance_pr_creates_nothing(github: MagicMock) -> None:
    github.list_pulls.return_value = [
        PR(number=4, title=COMPLIANCE_PR_TITLE, head_branch=COMPLIANCE_BRANCH, base_branch="main", state="open")
    ]
    ctx = EventContext(_payload(), github)

    assert add_compliance_file_if_required(ctx) is None
    assert _mutations(github) == []


def test_existing_compliance_file_creates_nothing(github: MagicMock) -> None:
    text = "name: compliance\nspec:\n  - name: PIA\n    status: completed\n"
    github.get_content.side_effect = None
    github.get_content.return_value = FileContent(
        path=COMPLIANCE_FILE, content=base64.b64encode(text.encode()).decode(), encoding="base64"
    )
    ctx = EventContext(_payload(), github)

    assert add_compliance_file_if_required(ctx) is None
    assert _mutations(github) == []


def test_malformed_compliance_template_fails_without_mutation(github: MagicMock, tmp_path: Path) -> None:
    _write_templates(tmp_path, compliance="spec: [PIA, STRA\n")
    ctx = EventContext(_payload(), github)

    with pytest.raises(TemplateError):
        add_compliance_file_if_required(ctx, templates_dir=tmp_path)
    assert _mutations(github) == []


def test_compliance_template_must_be_mapping(github: MagicMock, tmp_path: Path) -> None:
    _write_templates(tmp_path, compliance="- just\n- a list\n")
    ctx = EventContext(_payload(), github)

    with pytest.raises(TemplateError, match="mapping"):
        add_compliance_file_if_required(ctx, templates_dir=tmp_path)
    assert _mutations(github) == []
