"""Event template catalog: human text for ``(domain, action)`` log events."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}
_JSON_FILENAME = "event_templates.json"


def _load_event_templates(path: Path) -> dict[tuple[str, str], str]:
    templates: dict[tuple[str, str], str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        templates[("app", "load_error")] = "Event templates file missing"
        return templates
    except (OSError, ValueError) as e:
        templates[("app", "load_error")] = f"Failed to load event templates: {e}"[:200]
        return templates
    if not isinstance(raw, Mapping):
        return templates
    for domain, actions in raw.items():
        if not (isinstance(domain, str) and isinstance(actions, Mapping)):
            continue
        for action, template in actions.items():
            if isinstance(action, str) and isinstance(template, str):
                templates[(domain, action)] = template
    return templates


def reload_event_templates(path: Path | None = None) -> None:
    """(Re)load the catalog in place from ``path`` or the bundled JSON."""
    path = path or Path(__file__).with_name(_JSON_FILENAME)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(_load_event_templates(path))


def render(domain: str, action: str, context: Mapping[str, object]) -> str | None:
    """Format the template for ``(domain, action)``; None when uncatalogued.

    A template whose placeholders are not all present in ``context`` is
    returned unformatted.
    """
    template = EVENT_TEMPLATES.get((domain, action))
    if template is None:
        return None
    try:
        return template.format(**context)
    except (KeyError, IndexError, ValueError):
        return template


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates", "render"]
