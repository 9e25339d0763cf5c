"""relaychat: an asyncio IRC client core with an event-based interface."""

__version__ = "0.1.0"
