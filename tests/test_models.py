"""Tests for payload parsing into models."""

import base64

from mountie.context import EventContext
from mountie.models import FileContent, Repository


def test_repository_from_webhook_payload() -> None:
    repo = Repository.from_payload(
        {
            "name": "api",
            "full_name": "bcgov/api",
            "default_branch": "master",
            "license": {"key": "apache-2.0", "name": "Apache License 2.0", "spdx_id": "Apache-2.0"},
            "archived": True,
        }
    )
    assert repo.owner == "bcgov"
    assert repo.default_branch == "master"
    assert repo.license is not None and repo.license.key == "apache-2.0"
    assert repo.archived is True


def test_repository_full_name_from_owner() -> None:
    repo = Repository.from_payload({"name": "api", "owner": {"login": "bcgov"}, "license": None})
    assert repo.full_name == "bcgov/api"
    assert repo.license is None
    assert repo.default_branch is None


def test_file_content_decoding() -> None:
    encoded = base64.b64encode("name: compliance\n".encode()).decode()
    assert FileContent(path="a", content=encoded, encoding="base64").decoded() == "name: compliance\n"
    assert FileContent(path="a", content="plain").decoded() == "plain"
    assert FileContent(path="a").decoded() == ""


def test_event_context_exposes_repository() -> None:
    ctx = EventContext({"repository": {"name": "api", "full_name": "bcgov/api", "default_branch": "main"}}, None)
    assert ctx.repo == "bcgov/api"
    assert ctx.default_branch == "main"
    assert "bcgov/api" in repr(ctx)
