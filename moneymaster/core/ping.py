"""Ping utility used by the API health-check."""


def get_ping_message() -> str:
    """Return the static health-check reply."""
    return "pong"
