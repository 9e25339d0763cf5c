"""Structured event logger used across the client.

Human-readable text for each ``(domain, action)`` event comes from
``event_templates.json`` next to this module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..logging_config import debug_enabled

TEMPLATES_FILE = Path(__file__).with_name("event_templates.json")

# Mutated in place by reload_event_templates
EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def load_event_templates(path: Path = TEMPLATES_FILE) -> dict[tuple[str, str], str]:
    """Read ``{domain: {action: template}}`` into a flat ``(domain, action)`` map.

    Non-string entries are ignored. A missing or broken file yields a single
    ``("app", "load_error")`` entry describing the problem.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file {path.name} missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    if not isinstance(raw, dict):
        return {("app", "load_error"): "Event templates must be a JSON object"}
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(actions, dict)
        for action, template in actions.items()
        if isinstance(template, str)
    }


def reload_event_templates(path: Path | None = None) -> None:
    templates = load_event_templates(path or TEMPLATES_FILE)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(templates)


reload_event_templates()


class ClientLogger:
    """Renders ``(domain, action)`` events into log lines.

    Human text comes from the event template catalog, formatted with the
    event's keyword fields. ``nick`` and ``channel`` are reserved fields that
    form the aligned ``[nick#channel]`` prefix. In DEBUG mode the remaining
    fields are appended as ``key=value`` context.
    """

    def __init__(self, name: str = "relaychat") -> None:
        self._event_name_width = 28
        self.logger = logging.getLogger(name)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            template = EVENT_TEMPLATES.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        nick_o = kw.pop("nick", None)
        channel_o = kw.pop("channel", None)
        nick = nick_o if isinstance(nick_o, str) else None
        channel = channel_o if isinstance(channel_o, str) else None
        prefix = self._build_prefix(nick, channel)
        if debug_enabled():
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text or event_name}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _build_prefix(nick: str | None, channel: str | None) -> str:
        label = nick or "system"
        core = f"{label}#{channel.lstrip('#')}" if channel else label
        padded = core.ljust(24)[:24]
        return f"[{padded}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str | None,
        kwargs: dict[str, object],
    ) -> str:
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix}"
        if human_text:
            base = f"{base} {human_text}"
        if context:
            base = f"{base} ({context})"
        return base


logger = ClientLogger()
