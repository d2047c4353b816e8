"""
Shared httpx plumbing for the catalog, deck and auth clients.
"""

import httpx

from edhforge.config import settings

USER_AGENT = "EDHForge/1.0"


def build_client(base_url: str, token: str | None = None) -> httpx.AsyncClient:
    """Create an AsyncClient with the configured timeout and headers."""
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=settings.http_timeout_seconds,
    )


def response_message(response: httpx.Response) -> str:
    """
    Best-effort error message from a failed response.

    Prefers the body's "message" field (backend) or "details" field
    (Scryfall), falling back to the status line.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "details", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

    reason = response.reason_phrase or "Error"
    return f"HTTP {response.status_code} {reason}"
