"""Compliance checks run for every scheduled repository.

Each check skips (info log only) when there is nothing to do: the
artifact is present, the default branch is missing, or a pull request
proposing it is already open. Otherwise it renders the templates and
proposes the file through a pull request. Templates are rendered before
the first write so a bad template leaves the repository untouched.
"""

import logging
from pathlib import Path

from mountie.adapters.base import GitPlatformError
from mountie.constants import (
    COMPLIANCE_BRANCH,
    COMPLIANCE_COMMIT_MESSAGE,
    COMPLIANCE_FILE,
    COMPLIANCE_PR_TITLE,
    COMPLIANCE_TEMPLATE,
    LICENSE_BRANCH,
    LICENSE_COMMIT_MESSAGE,
    LICENSE_FILE,
    LICENSE_PR_TITLE,
    LICENSE_TEMPLATE,
    WHY_COMPLY_TEXT,
    WHY_LICENSE_TEXT,
)
from mountie.context import EventContext
from mountie.models import PR
from mountie.services.github_utils import (
    add_file_via_pull_request,
    check_if_file_exists,
    check_if_ref_exists,
    extract_message,
    fetch_compliance_file,
    has_pull_request_with_title,
)
from mountie.services.templates import (
    TemplateError,
    default_values,
    load_template,
    parse_yaml_document,
    render_template,
)

LOG = logging.getLogger("mountie.services.repository")


def has_license(context: EventContext) -> bool:
    """True when the provider detected a license for the repository."""
    return context.repository.license is not None


def add_license_if_required(
    context: EventContext,
    templates_dir: Path | str | None = None,
) -> PR | None:
    """Open a pull request adding a LICENSE when the repository has none.

    Returns the pull request, or None when nothing needed doing.

    Raises:
        GitPlatformError: a provider call failed.
        TemplateError: a template is missing, unreadable or malformed.
    """
    name = context.repository.name
    if has_license(context):
        LOG.info("%s already has a license", name)
        return None

    try:
        if not check_if_ref_exists(context):
            LOG.info("This repo has no default branch %s", name)
            return None
        if has_pull_request_with_title(context, LICENSE_PR_TITLE, state="open"):
            LOG.info("Licensing PR exists in %s", name)
            return None
        if check_if_file_exists(context, LICENSE_FILE):
            LOG.info("License file exists in %s", name)
            return None

        values = default_values(owner=context.repository.owner, repo=name)
        pr_body = render_template(load_template(WHY_LICENSE_TEXT, templates_dir), values)
        license_data = render_template(load_template(LICENSE_TEMPLATE, templates_dir), values)

        return add_file_via_pull_request(
            context,
            LICENSE_COMMIT_MESSAGE,
            LICENSE_PR_TITLE,
            pr_body,
            LICENSE_BRANCH,
            LICENSE_FILE,
            license_data,
        )
    except (GitPlatformError, TemplateError) as e:
        message = extract_message(e)
        if message:
            LOG.error("Unable to add license to %s: %s", name, message)
        else:
            LOG.error("Unable to add license to %s", name)
        raise


def add_compliance_file_if_required(
    context: EventContext,
    templates_dir: Path | str | None = None,
) -> PR | None:
    """Open a pull request adding COMPLIANCE.yaml when it is missing.

    The rendered template must be a YAML mapping.
    """
    name = context.repository.name
    try:
        if not check_if_ref_exists(context):
            LOG.info("This repo has no default branch %s", name)
            return None
        if has_pull_request_with_title(context, COMPLIANCE_PR_TITLE, state="open"):
            LOG.info("Compliance PR exists in %s", name)
            return None
        if check_if_file_exists(context, COMPLIANCE_FILE):
            LOG.info("Compliance file exists in %s", name)
            _log_compliance_status(context)
            return None

        values = default_values(owner=context.repository.owner, repo=name)
        pr_body = render_template(load_template(WHY_COMPLY_TEXT, templates_dir), values)
        data = render_template(load_template(COMPLIANCE_TEMPLATE, templates_dir), values)
        parse_yaml_document(data, COMPLIANCE_TEMPLATE)

        return add_file_via_pull_request(
            context,
            COMPLIANCE_COMMIT_MESSAGE,
            COMPLIANCE_PR_TITLE,
            pr_body,
            COMPLIANCE_BRANCH,
            COMPLIANCE_FILE,
            data,
        )
    except (GitPlatformError, TemplateError) as e:
        message = extract_message(e)
        if message:
            LOG.error("Error adding compliance to %s: %s", name, message)
        else:
            LOG.error("Error adding compliance to %s", name)
        raise


def _log_compliance_status(context: EventContext) -> None:
    try:
        compliance = fetch_compliance_file(context)
    except (GitPlatformError, ValueError) as e:
        LOG.warning("Compliance file in %s is unreadable: %s", context.repository.name, e)
        return
    for item in compliance.spec:
        LOG.info("%s: %s is %s", context.repository.name, item.name, item.status or "unknown")
