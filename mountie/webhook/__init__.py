"""Webhook server and event handlers."""

from mountie.webhook.handlers import handle_github_event
from mountie.webhook.server import run_webhook_server

__all__ = ["handle_github_event", "run_webhook_server"]
