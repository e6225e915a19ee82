"""Scheduler: every interval, emit schedule.repository for each repository."""

import logging
import threading
import time
from typing import Any, List

from mountie.adapters.base import GitPlatformAdapter, GitPlatformError
from mountie.webhook.handlers import SCHEDULE_EVENT, handle_github_event

LOG = logging.getLogger("mountie.scheduler")


class RepositoryScheduler:
    """Dispatches a scheduled event per repository; deleted repositories are stopped."""

    def __init__(self, config: Any, adapter: GitPlatformAdapter) -> None:
        self._config = config
        self._adapter = adapter
        self._stopped: set[str] = set()
        self._lock = threading.Lock()

    def stop(self, full_name: str) -> None:
        with self._lock:
            self._stopped.add(full_name)

    def resume(self, full_name: str) -> None:
        with self._lock:
            self._stopped.discard(full_name)

    def is_stopped(self, full_name: str) -> bool:
        with self._lock:
            return full_name in self._stopped

    def repositories(self) -> List[str]:
        """Configured repositories, else the organization's, else the token owner's."""
        configured = list(getattr(self._config.bot, "repositories", None) or [])
        if configured:
            return configured
        organization = getattr(self._config.bot, "organization", None)
        return [r.full_name for r in self._adapter.list_repositories(organization)]

    def run_one(self, full_name: str) -> None:
        """Fetch metadata for one repository and dispatch its scheduled event."""
        repository = self._adapter.get_repository(full_name)
        payload = {"action": "repository", "repository": repository.model_dump()}
        handle_github_event(
            self._config,
            SCHEDULE_EVENT,
            payload,
            adapter=self._adapter,
            scheduler=self,
            log=LOG,
        )

    def tick(self) -> int:
        """One pass over all repositories. Returns how many were processed."""
        try:
            names = self.repositories()
        except GitPlatformError as e:
            LOG.error("Unable to list repositories: %s", e)
            return 0
        processed = 0
        for full_name in names:
            if self.is_stopped(full_name):
                continue
            try:
                self.run_one(full_name)
                processed += 1
            except Exception as e:
                LOG.exception("Scheduler: %s failed: %s", full_name, e)
        return processed

    def run_forever(self) -> None:
        interval = getattr(self._config.scheduler, "interval_seconds", 3600)
        while True:
            try:
                count = self.tick()
                LOG.info("Scheduler pass done: %s repositories", count)
            except Exception as e:
                LOG.exception("Scheduler tick error: %s", e)
            time.sleep(interval)


def start_scheduler_thread(scheduler: RepositoryScheduler) -> threading.Thread:
    """Run the scheduler loop in a daemon thread."""
    thread = threading.Thread(target=scheduler.run_forever, name="mountie-scheduler", daemon=True)
    thread.start()
    return thread
