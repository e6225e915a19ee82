"""Tests for YAML + env configuration loading."""

from pathlib import Path

import pytest

from mountie.config import AppConfig, load_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")

    assert isinstance(config, AppConfig)
    assert config.github.api_url == "https://api.github.com"
    assert config.github.webhook_path == "/webhook/github"
    assert config.scheduler.interval_seconds == 3600
    assert config.compliance.enabled is False
    assert config.bot.repositories == []


def test_yaml_values_and_env_substitution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MY_TOKEN", "ghp_from_env")
    path = tmp_path / "config.yaml"
    path.write_text(
        """
bot:
  organization: bcgov
  repositories: [bcgov/a, bcgov/b]
github:
  token: ${MY_TOKEN}
scheduler:
  interval_seconds: 600
compliance:
  enabled: true
  beta_group: [a]
logging:
  level: DEBUG
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.bot.organization == "bcgov"
    assert config.bot.repositories == ["bcgov/a", "bcgov/b"]
    assert config.github_token_resolved == "ghp_from_env"
    assert config.scheduler.interval_seconds == 600
    assert config.compliance.beta_group == ["a"]
    assert config.logging.level == "DEBUG"


def test_unresolved_token_falls_back_to_secret_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    secret = tmp_path / "token"
    secret.write_text("ghp_from_file\n", encoding="utf-8")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("UNSET_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN_FILE", str(secret))
    path = tmp_path / "config.yaml"
    path.write_text("github:\n  token: ${UNSET_TOKEN}\n", encoding="utf-8")

    config = load_config(path)

    assert config.github_token_resolved == "ghp_from_file"


def test_webhook_secret_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_SECRET", "hook")
    path = tmp_path / "config.yaml"
    path.write_text("bot:\n  webhook_secret: your-webhook-secret-here\n", encoding="utf-8")

    assert load_config(path).webhook_secret_resolved == "hook"


def test_bot_organization_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOT_ORGANIZATION", "from-env")
    path = tmp_path / "config.yaml"
    path.write_text("bot:\n  organization: from-yaml\n", encoding="utf-8")

    assert load_config(path).bot.organization == "from-env"


def test_interval_below_minimum_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("scheduler:\n  interval_seconds: 5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_example_config_loads() -> None:
    example = Path(__file__).resolve().parent.parent / "config.example.yaml"
    config = load_config(example)
    assert config.bot.organization == "my-org"
    assert config.webhook.port == 3000
