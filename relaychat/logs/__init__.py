"""Project logging package.

Contains the structured event logger and its template catalog. Avoid
importing stdlib logging through this package name externally.
"""

from .logger import (  # noqa: F401
    EVENT_TEMPLATES,
    ClientLogger,
    logger,
    reload_event_templates,
)

__all__ = ["ClientLogger", "logger", "EVENT_TEMPLATES", "reload_event_templates"]
