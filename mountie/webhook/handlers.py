"""Handle GitHub webhook events and scheduled repository events.

schedule.repository runs the compliance checks for one repository;
repository deleted/created stops or resumes scheduling it.
"""

import logging
from typing import Any, Dict

from mountie.adapters.base import GitPlatformAdapter, GitPlatformError
from mountie.adapters.github import GitHubAdapter
from mountie.context import EventContext
from mountie.services.repository import add_compliance_file_if_required, add_license_if_required
from mountie.services.templates import TemplateError

SCHEDULE_EVENT = "schedule.repository"


def _make_adapter(config: Any) -> GitPlatformAdapter | None:
    token = getattr(config, "github_token_resolved", None)
    if not token:
        return None
    return GitHubAdapter(
        token=token,
        api_url=getattr(config.github, "api_url", "https://api.github.com"),
    )


def compliance_enabled_for(config: Any, repo_name: str) -> bool:
    """Compliance flow is feature flagged; a non-empty beta_group narrows it."""
    compliance = getattr(config, "compliance", None)
    if not compliance or not getattr(compliance, "enabled", False):
        return False
    beta_group = getattr(compliance, "beta_group", None) or []
    return not beta_group or repo_name in beta_group


def repository_scheduled(context: EventContext, config: Any, log: logging.Logger) -> None:
    """Run each compliance check; a failure is logged and does not stop the next check."""
    repository = context.repository
    log.info("Processing %s", repository.name)
    if repository.archived:
        log.info("Skipping archived repo %s", repository.name)
        return
    templates_dir = getattr(getattr(config, "compliance", None), "templates_dir", None)

    try:
        add_license_if_required(context, templates_dir=templates_dir)
    except (GitPlatformError, TemplateError) as e:
        log.error("Unable to add license to %s: %s", repository.name, e)
    except Exception as e:
        log.exception("License check failed for %s: %s", repository.name, e)

    if not compliance_enabled_for(config, repository.name):
        log.debug("The repo %s is not part of the compliance beta group", repository.name)
        return
    try:
        add_compliance_file_if_required(context, templates_dir=templates_dir)
    except (GitPlatformError, TemplateError) as e:
        log.error("Unable to add compliance file to %s: %s", repository.name, e)
    except Exception as e:
        log.exception("Compliance check failed for %s: %s", repository.name, e)


def _handle_repository(
    payload: Dict[str, Any],
    scheduler: Any,
    log: logging.Logger,
) -> None:
    action = payload.get("action")
    full_name = (payload.get("repository") or {}).get("full_name")
    if not full_name or scheduler is None:
        return
    if action == "deleted":
        scheduler.stop(full_name)
        log.info("Repository %s deleted, no longer scheduled", full_name)
    elif action in ("created", "unarchived"):
        scheduler.resume(full_name)
        log.info("Repository %s %s, scheduled", full_name, action)


def handle_github_event(
    config: Any,
    event: str,
    payload: Dict[str, Any],
    adapter: GitPlatformAdapter | None = None,
    scheduler: Any = None,
    log: logging.Logger | None = None,
) -> None:
    """Handle a GitHub webhook event or a scheduled repository event.

    Supported events:
    - schedule.repository: add a missing license (and compliance file when enabled).
    - repository (action=deleted): stop scheduling the repository.
    - repository (action=created, unarchived): resume scheduling it.
    """
    logger = log or logging.getLogger("mountie.webhook.handlers")

    if event == "repository":
        _handle_repository(payload, scheduler, logger)
        return

    if event != SCHEDULE_EVENT:
        logger.debug("Ignoring event %s", event)
        return
    if not payload.get("repository"):
        logger.warning("%s payload missing 'repository'", SCHEDULE_EVENT)
        return

    adapter = adapter or _make_adapter(config)
    if adapter is None:
        logger.warning("No GitHub token; cannot process %s", SCHEDULE_EVENT)
        return
    repository_scheduled(EventContext(payload, adapter), config, logger)
