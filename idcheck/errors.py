from __future__ import annotations

import json
from typing import Any, Optional


class IdCheckError(Exception):
    """
    Base exception for all client failures.
    """

    pass


class ConfigurationError(IdCheckError):
    """
    Raised when the client is missing a token or has invalid settings.
    """

    pass


class TransportError(IdCheckError):
    """
    Raised when the request never produced an HTTP response (network, timeout).
    """

    pass


class UploadTooLarge(IdCheckError):
    """
    Raised before sending when upload content exceeds the client-side cap.
    """

    pass


class DecodeError(IdCheckError):
    """
    Raised when a success response body cannot be decoded into a model.
    """

    pass


class ApiError(IdCheckError):
    """Non-success HTTP response from the API.

    The raw body text is always kept. When the body is the API's JSON error
    envelope, ``error_type`` and ``message`` are filled in from it.

    Security notes:
    - The body is server-controlled text; do not render it as markup.

    """

    def __init__(self, status: int, body: str, *, method: str = "", path: str = ""):
        self.status = int(status)
        self.body = body
        self.method = method
        self.path = path
        self.error_type: Optional[str] = None
        self.message: Optional[str] = None
        self.fields: Optional[Any] = None
        _fill_from_envelope(self, body)

        where = f"{method} {path} " if method or path else ""
        super().__init__(f"{where}returned status {self.status}: {body}")


def _fill_from_envelope(err: ApiError, body: str) -> None:
    """Best-effort parse of ``{"error": {"type", "message", "fields"}}``."""

    try:
        payload = json.loads(body) if body else None
    except ValueError:
        return
    if not isinstance(payload, dict):
        return

    inner = payload.get("error")
    if isinstance(inner, dict):
        err.error_type = inner.get("type")
        err.message = inner.get("message")
        err.fields = inner.get("fields")
    elif isinstance(inner, str):
        err.message = inner
