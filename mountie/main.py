"""Repo Mountie entry point.

Two modes: daemon (scheduler thread + webhook server) and run-once (one
scheduler pass, or one repository, then exit).
Usage: mountie daemon | mountie run-once [--repo owner/name].
"""

import argparse
import logging
import sys
from pathlib import Path

from mountie.adapters.github import GitHubAdapter
from mountie.config import AppConfig, load_config
from mountie.logging import MountieLogging
from mountie.scheduler import RepositoryScheduler, start_scheduler_thread
from mountie.webhook.server import run_webhook_server

SUBCOMMANDS = ("daemon", "run-once")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (daemon | run-once)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = "daemon"
    rest = list(argv)
    if argv and argv[0] in SUBCOMMANDS:
        sub = argv[0]
        rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="mountie",
        description="Repo Mountie - propose missing license and compliance files",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="run-once: process only this repository (owner/name)",
    )
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def _make_scheduler(config: AppConfig) -> RepositoryScheduler:
    token = config.github_token_resolved
    if not token:
        raise SystemExit("GitHub token is not configured (GITHUB_TOKEN or GITHUB_TOKEN_FILE)")
    adapter = GitHubAdapter(token=token, api_url=config.github.api_url)
    return RepositoryScheduler(config, adapter)


def run_daemon(config: AppConfig) -> None:
    """Start the scheduler thread, then serve webhooks until interrupted."""
    log = logging.getLogger("mountie.daemon")
    scheduler = _make_scheduler(config)
    log.info(
        "Mountie daemon started | organization=%s | repositories=%s | interval=%ss",
        config.bot.organization,
        len(config.bot.repositories),
        config.scheduler.interval_seconds,
    )
    if config.scheduler.enabled:
        start_scheduler_thread(scheduler)
    else:
        log.warning("Scheduler disabled in config; only webhook events are handled.")
    if config.webhook.enabled:
        run_webhook_server(config, scheduler=scheduler)
    elif config.scheduler.enabled:
        scheduler.run_forever()
    else:
        log.warning("Webhook and scheduler disabled; nothing to do.")


def run_once(config: AppConfig, repo: str | None = None) -> int:
    """One pass over every repository (or just repo). Returns exit code."""
    scheduler = _make_scheduler(config)
    if repo:
        scheduler.run_one(repo)
        return 0
    scheduler.tick()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to daemon or run-once."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("mountie").warning("config.yaml not found, using config.example.yaml")

    config = load_config(config_path)

    if args.check:
        target = config.bot.organization or ", ".join(config.bot.repositories) or "token owner"
        print("Config OK:", target)
        return 0

    MountieLogging(config.logging).setup()

    try:
        if args.subcommand == "run-once":
            return run_once(config, repo=args.repo)
        run_daemon(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("mountie").exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
