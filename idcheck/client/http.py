"""Low-level HTTP transport for the identity-verification API.

Security notes:
- Treat server responses as untrusted input.
- Never log the API token or raw file bytes.
"""
from __future__ import annotations

import json
import logging
import mimetypes
import ssl
import time
import uuid
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Tuple, Union
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from idcheck import __version__
from idcheck.errors import TransportError, UploadTooLarge

log = logging.getLogger("idcheck.client")

USER_AGENT = f"idcheck-python/{__version__}"

# (field_name, filename, content, content_type or None)
FilePart = Tuple[str, str, Union[BinaryIO, bytes], Optional[str]]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """HTTP response wrapper.

    Security notes:
    - Treat `body_bytes` as untrusted.

    """

    status: int
    headers: Mapping[str, str]
    body_bytes: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body_bytes.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode body as JSON."""

        return json.loads(self.body_bytes.decode("utf-8", errors="strict"))

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""

        lname = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lname:
                return v
        return None


class HttpClient:
    """Minimal stdlib-only HTTP client with token auth.

    Supports multipart uploads without external dependencies.

    Security notes:
    - Enforces a max upload size to avoid accidental huge memory usage.
    - Does NOT disable TLS verification.

    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 30.0,
        max_upload_bytes: int = 25 * 1024 * 1024,
        user_agent: str = USER_AGENT,
    ):
        self.base_url = base_url
        self._token = token
        self.timeout = float(timeout)
        self.max_upload_bytes = int(max_upload_bytes)
        self.user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._base_url = value.rstrip("/")

    def url_for(self, path: str, params: Optional[Mapping[str, str]] = None) -> str:
        url = f"{self._base_url}/{path.lstrip('/')}"
        if params:
            url += "?" + urlencode({k: v for k, v in params.items() if v is not None})
        return url

    def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """HTTP GET."""

        req = Request(url=self.url_for(path, params), method="GET")
        self._add_headers(req)
        return self._send(req, path, timeout)

    def post_multipart(
        self,
        path: str,
        *,
        fields: Mapping[str, str],
        files: Optional[List[FilePart]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """HTTP POST multipart/form-data.

        Args:
          fields: form fields (string values)
          files: (field_name, filename, bytes-or-stream, content type) parts

        Security notes:
        - This builds the full multipart body in memory. For safety, a size cap is enforced.
        """

        encoded: List[Tuple[str, str, bytes, str]] = []
        for field_name, filename, content, content_type in files or []:
            data = _read_bounded(content, self.max_upload_bytes)
            ct = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
            encoded.append((field_name, filename, data, ct))

        body, boundary = _encode_multipart(fields=dict(fields), files=encoded)
        req = Request(url=self.url_for(path), data=body, method="POST")
        req.add_header("Content-Type", f"multipart/form-data; boundary={boundary}")
        req.add_header("Content-Length", str(len(body)))
        self._add_headers(req)
        return self._send(req, path, timeout)

    def _add_headers(self, req: Request) -> None:
        req.add_header("Authorization", f"Token token={self._token}")
        req.add_header("Accept", "application/json")
        req.add_header("User-Agent", self.user_agent)

    def _send(self, req: Request, path: str, timeout: Optional[float]) -> HttpResponse:
        start = time.monotonic()
        resp: Optional[HttpResponse] = None
        try:
            resp = _do_request(req, timeout=self.timeout if timeout is None else float(timeout))
            return resp
        finally:
            log.debug(
                "api_request",
                extra={
                    "method": req.get_method(),
                    "path": path,
                    "status_code": getattr(resp, "status", None),
                    "duration_ms": int((time.monotonic() - start) * 1000),
                },
            )


def _read_bounded(content: Union[BinaryIO, bytes], max_bytes: int) -> bytes:
    """Read upload content up to a maximum."""

    if isinstance(content, (bytes, bytearray)):
        data = bytes(content)
    else:
        # One extra byte tells "exactly at the cap" from "over the cap".
        data = content.read(max_bytes + 1)
        if isinstance(data, str):
            raise TypeError("upload stream must be opened in binary mode")
    if len(data) > max_bytes:
        raise UploadTooLarge(f"file too large for client upload cap: > {max_bytes} bytes")
    return data


def _encode_multipart(
    *, fields: Dict[str, str], files: List[Tuple[str, str, bytes, str]]
) -> Tuple[bytes, str]:
    """Encode multipart/form-data.

    Security notes:
    - Caller should enforce size limits.
    """

    boundary = "----idcheck-" + uuid.uuid4().hex
    crlf = "\r\n"
    parts: List[bytes] = []

    for name, value in fields.items():
        parts.append(f"--{boundary}{crlf}".encode("utf-8"))
        parts.append(f'Content-Disposition: form-data; name="{name}"{crlf}{crlf}'.encode("utf-8"))
        parts.append(str(value).encode("utf-8"))
        parts.append(crlf.encode("utf-8"))

    for field_name, filename, data, content_type in files:
        safe_name = filename.replace('"', "").replace("\r", "").replace("\n", "")
        parts.append(f"--{boundary}{crlf}".encode("utf-8"))
        parts.append(
            f'Content-Disposition: form-data; name="{field_name}"; filename="{safe_name}"{crlf}'.encode(
                "utf-8"
            )
        )
        parts.append(f"Content-Type: {content_type}{crlf}{crlf}".encode("utf-8"))
        parts.append(data)
        parts.append(crlf.encode("utf-8"))

    parts.append(f"--{boundary}--{crlf}".encode("utf-8"))
    body = b"".join(parts)
    return body, boundary


def _do_request(req: Request, *, timeout: float) -> HttpResponse:
    """Execute a request.

    Error statuses come back as responses; only transport failures raise.

    Security notes:
    - Uses default SSL context (verification ON).
    """

    try:
        ctx = ssl.create_default_context()
        with urlopen(req, timeout=timeout, context=ctx) as resp:
            body = resp.read()
            headers = {k: v for k, v in resp.headers.items()}
            return HttpResponse(status=int(resp.status), headers=headers, body_bytes=body)
    except HTTPError as e:
        try:
            body = e.read() if hasattr(e, "read") else b""
        except OSError as read_err:
            raise TransportError(f"network error reading error body: {read_err}") from read_err
        headers = dict(getattr(e, "headers", {}) or {})
        return HttpResponse(
            status=int(getattr(e, "code", 0) or 0), headers=headers, body_bytes=body
        )
    except OSError as e:
        # URLError, timeouts and connection resets all land here.
        raise TransportError(f"network error: {e}") from e
