"""Templates for proposed files and pull request bodies.

Templates are plain files under ``mountie/templates`` (or a configured
directory). Placeholders are written ``[KEY]`` and replaced verbatim.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

LOG = logging.getLogger("mountie.services.templates")

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class TemplateError(Exception):
    """Template is missing, unreadable or does not render to a usable document."""


def load_template(name: str, templates_dir: Path | str | None = None) -> str:
    """Read template ``name`` from templates_dir (packaged templates by default).

    Raises:
        TemplateError: file missing, not readable or not UTF-8.
    """
    base = Path(templates_dir) if templates_dir else TEMPLATES_DIR
    path = base / name
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        message = f"Unable to load template {name}"
        LOG.error("%s, error = %s", message, e)
        raise TemplateError(message) from e


def default_values(owner: str = "", repo: str = "", now: datetime | None = None) -> Dict[str, str]:
    """Placeholder values every template may use."""
    now = now or datetime.now(UTC)
    return {
        "TODAY": now.isoformat(),
        "YEAR": str(now.year),
        "OWNER": owner,
        "REPO": repo,
    }


def render_template(text: str, values: Mapping[str, Any]) -> str:
    """Replace each ``[KEY]`` in text with ``values[KEY]``; unknown keys stay as-is."""
    for key, value in values.items():
        text = text.replace(f"[{key}]", str(value))
    return text


def parse_yaml_document(text: str, name: str) -> Dict[str, Any]:
    """Check that a rendered template is a YAML mapping and return it."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateError(f"Template {name} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise TemplateError(f"Template {name} must render to a YAML mapping")
    return data
