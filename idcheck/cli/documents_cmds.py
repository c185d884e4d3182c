from __future__ import annotations

import argparse
import json
import os
import sys

from idcheck.client import DocumentsClient
from idcheck.errors import ApiError, IdCheckError
from idcheck.models import DocumentRequest, DocumentSide, DocumentType


def _print_json(obj: object) -> None:
    """Print JSON to stdout."""
    print(json.dumps(obj, indent=2, sort_keys=True, default=str))


def _client(args: argparse.Namespace) -> DocumentsClient:
    return DocumentsClient.from_env(token=args.token, endpoint=args.endpoint, timeout_sec=args.timeout)


def _report(err: Exception) -> int:
    """Print an error to stderr and return the CLI exit code."""
    if isinstance(err, ApiError):
        print(err.body or str(err), file=sys.stderr)
    else:
        print(f"error: {err}", file=sys.stderr)
    return 2


def cmd_documents_upload(args: argparse.Namespace) -> int:
    """Upload a local file to POST /documents."""
    try:
        c = _client(args)
        with open(args.file, "rb") as f:
            doc = c.upload_document(
                DocumentRequest(
                    applicant_id=args.applicant_id,
                    file=f,
                    file_name=os.path.basename(args.file),
                    type=DocumentType(args.type),
                    side=DocumentSide(args.side) if args.side else None,
                    issuing_country=args.issuing_country,
                )
            )
    except (IdCheckError, OSError) as e:
        return _report(e)
    _print_json(doc.model_dump(mode="json", exclude_none=True))
    return 0


def cmd_documents_get(args: argparse.Namespace) -> int:
    """Call GET /documents/{id}."""
    try:
        doc = _client(args).get_document(args.document_id)
    except IdCheckError as e:
        return _report(e)
    _print_json(doc.model_dump(mode="json", exclude_none=True))
    return 0


def cmd_documents_list(args: argparse.Namespace) -> int:
    """List an applicant's documents."""
    try:
        it = _client(args).list_documents(args.applicant_id)
    except IdCheckError as e:
        return _report(e)
    out = []
    while it.next():
        out.append(it.document().model_dump(mode="json", exclude_none=True))
    if it.err() is not None:
        return _report(it.err())
    _print_json({"documents": out})
    return 0


def cmd_documents_download(args: argparse.Namespace) -> int:
    """Download a document.

    Without --out, prints the base64 payload as JSON.

    Security notes:
    - Downloaded bytes are untrusted; they are written as-is, never executed.

    """
    try:
        dl = _client(args).download_document(args.document_id)
    except IdCheckError as e:
        return _report(e)

    if not args.out:
        _print_json({"data": dl.data, "content_type": dl.content_type})
        return 0

    content = dl.content()
    try:
        with open(args.out, "wb") as f:
            f.write(content)
    except OSError as e:
        return _report(e)
    _print_json({"saved_to": os.path.abspath(args.out), "size_bytes": len(content)})
    return 0


def register_documents_commands(sub: argparse._SubParsersAction) -> None:
    """Register the `documents` command group."""

    docs = sub.add_parser("documents", help="Upload, fetch, list and download documents")
    docs.add_argument("--endpoint", default=None, help="Base API URL (IDCHECK_ENDPOINT)")
    docs.add_argument("--token", default=None, help="API token (IDCHECK_API_TOKEN)")
    docs.add_argument(
        "--timeout", type=float, default=None, help="Per-request timeout in seconds"
    )
    dsub = docs.add_subparsers(dest="documents_cmd", required=True)

    up = dsub.add_parser("upload", help="Upload a local file for an applicant")
    up.add_argument("file", help="Path to local file")
    up.add_argument("--applicant-id", required=True, help="Owning applicant id")
    up.add_argument(
        "--type",
        required=True,
        choices=[t.value for t in DocumentType],
        help="Document type",
    )
    up.add_argument("--side", default=None, choices=[s.value for s in DocumentSide])
    up.add_argument("--issuing-country", default=None, help="ISO 3166-1 alpha-3 code")
    up.set_defaults(func=cmd_documents_upload)

    g = dsub.add_parser("get", help="Fetch one document")
    g.add_argument("document_id")
    g.set_defaults(func=cmd_documents_get)

    ls = dsub.add_parser("list", help="List an applicant's documents")
    ls.add_argument("applicant_id")
    ls.set_defaults(func=cmd_documents_list)

    dl = dsub.add_parser("download", help="Download document content")
    dl.add_argument("document_id")
    dl.add_argument("--out", default=None, help="Write decoded bytes to this path")
    dl.set_defaults(func=cmd_documents_download)
