from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel

from idcheck.client.http import USER_AGENT, HttpClient, HttpResponse
from idcheck.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_TIMEOUT_SEC,
    ClientConfig,
)
from idcheck.errors import ApiError, DecodeError, IdCheckError
from idcheck.models import Document, DocumentDownload, DocumentRequest, Documents

log = logging.getLogger("idcheck.client")

M = TypeVar("M", bound=BaseModel)


class DocumentsClient:
    """Client for the documents endpoints.

    Every call is one synchronous round trip. Non-2xx responses raise
    `ApiError`; there are no retries. ``timeout`` on each call overrides the
    client default and bounds the whole in-flight request.

    Usage:
        client = DocumentsClient("api_token")
        doc = client.get_document("ce62d838-...")
        for doc in client.list_documents(applicant_id):
            print(doc.file_name)

    """

    def __init__(
        self,
        token: str,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        user_agent: str = USER_AGENT,
    ):
        # Validates token/timeout/cap the same way as env-built configs.
        ClientConfig(
            token=token,
            endpoint=endpoint,
            timeout_sec=timeout,
            max_upload_bytes=max_upload_bytes,
        )
        self._http = HttpClient(
            endpoint,
            token,
            timeout=timeout,
            max_upload_bytes=max_upload_bytes,
            user_agent=user_agent,
        )

    @classmethod
    def from_config(cls, cfg: ClientConfig) -> "DocumentsClient":
        return cls(
            cfg.token,
            endpoint=cfg.endpoint,
            timeout=cfg.timeout_sec,
            max_upload_bytes=cfg.max_upload_bytes,
        )

    @classmethod
    def from_env(cls, **overrides) -> "DocumentsClient":
        """Build a client from IDCHECK_* environment variables."""

        return cls.from_config(ClientConfig.from_env(**overrides))

    @property
    def endpoint(self) -> str:
        return self._http.base_url

    @endpoint.setter
    def endpoint(self, value: str) -> None:
        self._http.base_url = value

    def upload_document(
        self, request: DocumentRequest, *, timeout: Optional[float] = None
    ) -> Document:
        """POST /documents as multipart/form-data and return the created document."""

        resp = self._http.post_multipart(
            "/documents",
            fields=request.form_fields(),
            files=[("file", request.file_name, request.file, None)],
            timeout=timeout,
        )
        return _decode(_check(resp, "POST", "/documents"), Document)

    def get_document(self, document_id: str, *, timeout: Optional[float] = None) -> Document:
        """GET /documents/{id}."""

        path = f"/documents/{_segment(document_id)}"
        resp = self._http.get(path, timeout=timeout)
        return _decode(_check(resp, "GET", path), Document)

    def list_documents(
        self, applicant_id: str, *, timeout: Optional[float] = None
    ) -> "DocumentIterator":
        """Return a lazy iterator over an applicant's documents.

        Nothing is fetched until the iterator is first advanced. ``timeout``
        applies to that fetch unless `DocumentIterator.next` overrides it.
        """

        return DocumentIterator(self, applicant_id, timeout=timeout)

    def download_document(
        self, document_id: str, *, timeout: Optional[float] = None
    ) -> DocumentDownload:
        """GET /documents/{id}/download; the raw bytes come back base64-encoded."""

        path = f"/documents/{_segment(document_id)}/download"
        resp = self._http.get(path, timeout=timeout)
        _check(resp, "GET", path)
        return DocumentDownload.from_bytes(resp.body_bytes, content_type=resp.header("Content-Type"))

    def _fetch_documents(self, applicant_id: str, *, timeout: Optional[float] = None) -> List[Document]:
        resp = self._http.get("/documents", params={"applicant_id": applicant_id}, timeout=timeout)
        envelope = _decode(_check(resp, "GET", "/documents"), Documents)
        return list(envelope.documents)


class DocumentIterator:
    """Lazy iterator over a single page of documents.

    Two ways to consume it:

        it = client.list_documents(applicant_id)
        while it.next():
            use(it.document())
        if it.err() is not None:
            ...

    or as a Python iterable, which raises the stored error once the
    documents are exhausted.
    """

    def __init__(
        self, client: DocumentsClient, applicant_id: str, *, timeout: Optional[float] = None
    ):
        self._client = client
        self._applicant_id = applicant_id
        self._timeout = timeout
        self._page: Optional[List[Document]] = None
        self._pos = -1
        self._err: Optional[IdCheckError] = None

    def next(self, *, timeout: Optional[float] = None) -> bool:
        """Advance to the next document, fetching the page on first use.

        Returns False when the sequence is exhausted or the fetch failed.
        """

        if self._err is not None:
            return False
        if self._page is None:
            try:
                self._page = self._client._fetch_documents(
                    self._applicant_id,
                    timeout=self._timeout if timeout is None else timeout,
                )
            except IdCheckError as e:
                log.debug("list_documents failed: %s", e)
                self._err = e
                self._page = []
                return False
        if self._pos + 1 >= len(self._page):
            self._pos = len(self._page)
            return False
        self._pos += 1
        return True

    def document(self) -> Document:
        """The document at the current position."""

        if self._page is None or not 0 <= self._pos < len(self._page):
            raise IndexError("iterator is not positioned on a document; call next() first")
        return self._page[self._pos]

    def err(self) -> Optional[IdCheckError]:
        """The error that ended iteration, if any."""

        return self._err

    def __iter__(self) -> Iterator[Document]:
        while self.next():
            yield self.document()
        if self._err is not None:
            raise self._err


def _segment(value: str) -> str:
    return quote(value, safe="")


def _check(resp: HttpResponse, method: str, path: str) -> HttpResponse:
    if not resp.ok:
        raise ApiError(resp.status, resp.text(), method=method, path=path)
    return resp


def _decode(resp: HttpResponse, model: Type[M]) -> M:
    try:
        return model.model_validate(resp.json())
    except ValueError as e:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors.
        raise DecodeError(f"cannot decode {model.__name__}: {e}") from e
