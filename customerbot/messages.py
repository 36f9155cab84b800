"""Simple message lookup for user-facing responses.

Keeps every string a customer can see in one place, so internal error
details never leak into an API payload or the CLI.
"""

from __future__ import annotations

_MESSAGES: dict[str, str] = {
    "error.query_failed": "Failed to handle query.",
    "error.followup_failed": "Failed to handle follow-up.",
    "error.agent_not_ready": "Service is starting up. Please try again in a moment.",
    "facts.label.query": "Support Info",
    "facts.label.followup": "Support Context",
    "facts.none": "No matching support information found.",
    "cli.request_failed": "Sorry, I could not process that request. Please try again.",
}


def msg(key: str) -> str:
    """Return a message by key, or the key itself if not found."""
    return _MESSAGES.get(key, key)
