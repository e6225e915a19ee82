"""Wrappers over the platform adapter used by the compliance checks.

Each wrapper logs provider failures. Existence checks turn a failure into
``False``; fetches and mutations re-raise it as ``GitPlatformError``.
"""

import json
import logging
from typing import List

import yaml
from pydantic import ValidationError

from mountie.adapters.base import GitPlatformError
from mountie.constants import COMPLIANCE_FILE
from mountie.context import EventContext
from mountie.models import PR, ComplianceFile, FileContent, PullState

LOG = logging.getLogger("mountie.services.github_utils")


def extract_message(err: BaseException) -> str | None:
    """Best-effort provider message from an error.

    Uses ``err.message`` when present, else parses ``{"message": ...}``
    from the error text. Returns None when nothing usable is found.
    """
    message = getattr(err, "message", None)
    if isinstance(message, str) and message:
        return message
    try:
        data = json.loads(str(err))
    except (TypeError, ValueError):
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None


def check_if_ref_exists(context: EventContext, ref: str | None = None) -> bool:
    """Return True if branch ``ref`` (default branch by default) exists.

    The only way to check is to fetch it; any failure, not found or
    network, counts as missing.
    """
    ref = ref or context.default_branch
    if not ref:
        LOG.info("No default branch in %s", context.repo)
        return False
    try:
        context.github.get_ref(context.repo, f"heads/{ref}")
        return True
    except GitPlatformError as e:
        LOG.info("No ref %s exists in %s (%s)", ref, context.repo, e)
        return False


def fetch_file_content(context: EventContext, path: str, ref: str | None = None) -> FileContent:
    """Fetch a file from the tip of ``ref`` (default branch by default).

    Raises:
        GitPlatformError: the call failed or path is not a file.
    """
    ref = ref or context.default_branch
    try:
        data = context.github.get_content(context.repo, path, ref)
    except GitPlatformError as e:
        message = f"Unable to fetch {path}"
        LOG.error("%s, error = %s", message, e)
        raise GitPlatformError(message, status_code=e.status_code) from e
    if data.type != "file":
        message = f"Unable to fetch {path}"
        LOG.error("%s, error = wrong content type %s", message, data.type)
        raise GitPlatformError(message)
    return data


def check_if_file_exists(context: EventContext, path: str, ref: str | None = None) -> bool:
    """Return True if path exists as a file on ref."""
    try:
        fetch_file_content(context, path, ref)
        return True
    except GitPlatformError:
        return False


def fetch_contents_for_file(
    context: EventContext,
    path: str,
    ref: str | None = None,
) -> FileContent | None:
    """Fetch a file as of the newest commit on ref that touched it.

    Returns None when no commit touched the file or the path is not a file.
    """
    ref = ref or context.default_branch
    try:
        commits = context.github.list_commits(context.repo, path, ref)
        # Newest first; the API order is not relied upon
        commits = sorted(commits, key=lambda c: c.committed_at, reverse=True)
        if not commits:
            LOG.info("Unable to find last commit for %s in %s", path, context.repo)
            return None
        data = context.github.get_content(context.repo, path, commits[0].sha)
    except GitPlatformError as e:
        message = f"Unable to fetch {path}"
        LOG.error("%s, error = %s", message, e)
        raise GitPlatformError(message, status_code=e.status_code) from e
    if data.type != "file":
        LOG.info("Unusable content type %s retrieved for %s", data.type, path)
        return None
    return data


def fetch_compliance_file(context: EventContext) -> ComplianceFile:
    """Fetch and parse the repository's COMPLIANCE.yaml.

    Raises:
        GitPlatformError: the file could not be fetched.
        ValueError: the file is not a valid compliance document.
    """
    data = fetch_file_content(context, COMPLIANCE_FILE)
    try:
        raw = yaml.safe_load(data.decoded()) or {}
        return ComplianceFile.model_validate(raw)
    except (yaml.YAMLError, ValidationError) as e:
        message = "Unable to parse compliance file"
        LOG.error("%s in %s, error = %s", message, context.repo, e)
        raise ValueError(message) from e


def fetch_pull_requests(context: EventContext, state: PullState = "all") -> List[PR]:
    try:
        return context.github.list_pulls(context.repo, state)
    except GitPlatformError as e:
        LOG.error("Unable to lookup PRs in repo %s, error = %s", context.repo, e)
        raise


def has_pull_request_with_title(
    context: EventContext,
    title: str,
    state: PullState = "all",
) -> bool:
    """Return True if a pull request in ``state`` has exactly this title."""
    return any(pr.title == title for pr in fetch_pull_requests(context, state))


def update_file(
    context: EventContext,
    commit_message: str,
    branch: str,
    path: str,
    data: str,
    sha: str | None = None,
) -> None:
    """Create path on branch, or update it when the current blob sha is given."""
    try:
        context.github.create_or_update_file(
            context.repo,
            path,
            data,
            commit_message,
            branch,
            sha=sha,
        )
    except GitPlatformError as e:
        LOG.error("Unable to update %s in %s, error = %s", path, context.repo, e)
        raise


def add_file_via_pull_request(
    context: EventContext,
    commit_message: str,
    pr_title: str,
    pr_body: str,
    branch: str,
    path: str,
    data: str,
    sha: str | None = None,
) -> PR:
    """Propose a file through a pull request against the default branch.

    Forks ``branch`` from the default branch head, commits the file to it
    and opens a pull request that maintainers can modify.
    """
    base = context.default_branch
    try:
        if not base:
            raise GitPlatformError(f"{context.repo} has no default branch")
        head = context.github.get_ref(context.repo, f"heads/{base}")
        context.github.create_ref(context.repo, f"refs/heads/{branch}", head.sha)
        update_file(context, commit_message, branch, path, data, sha=sha)
        pr = context.github.create_pr(
            context.repo,
            title=pr_title,
            body=pr_body,
            head=branch,
            base=base,
            maintainer_can_modify=True,
        )
    except GitPlatformError as e:
        LOG.error("Unable to add %s file to %s, error = %s", path, context.repo, e)
        raise
    LOG.info("Opened PR #%s (%s) in %s", pr.number, pr_title, context.repo)
    return pr
