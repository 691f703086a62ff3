"""Readable failure messages for Storeroom API errors in load test output.

Every domain error carries ``{"error": {field: [messages]}}``. Request bodies
rejected before reaching the domain (a missing ``expected_version`` for
instance) come back from FastAPI as ``{"detail": [...]}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

_LABELS = {
    400: "invalid",
    403: "denied",
    404: "not found",
    409: "conflict",
    422: "malformed request",
    503: "store unavailable",
}


def _field_messages(error: dict) -> list[str]:
    parts = []
    for field, messages in error.items():
        if not isinstance(messages, list):
            messages = [messages]
        label = "" if field.startswith("_") else f"{field}: "
        parts.extend(f"{label}{msg}" for msg in messages)
    return parts


def is_version_conflict(response: Response) -> bool:
    """True when a 409 was caused by a stale ``expected_version``."""
    if response.status_code != 409:
        return False
    try:
        error = response.json().get("error")
    except ValueError:
        return False
    return isinstance(error, dict) and "version" in error


def extract_error_detail(response: Response) -> str:
    """Compact ``<label>: <messages>`` string for Locust failures and log lines."""
    label = _LABELS.get(response.status_code, str(response.status_code))
    try:
        body = response.json()
    except ValueError:
        text = (getattr(response, "text", "") or "")[:300]
        return f"{label}: {text or '(empty response body)'}"

    if isinstance(body, dict) and isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []) if p != "body")
            parts.append(f"{loc}: {err.get('msg', err)}" if loc else str(err.get("msg", err)))
        return f"{label}: {' | '.join(parts)}"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return f"{label}: {' | '.join(_field_messages(error))}"
    if error is not None:
        return f"{label}: {error}"
    return f"{label}: {str(body)[:300]}"
