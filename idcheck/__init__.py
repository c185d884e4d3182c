"""
idcheck: client for an identity-verification documents API.

Usage:
    from idcheck import DocumentsClient, DocumentRequest, DocumentType, DocumentSide

    client = DocumentsClient.from_env()
    with open("passport.png", "rb") as f:
        doc = client.upload_document(
            DocumentRequest(
                applicant_id="541d040b-...",
                file=f,
                file_name="passport.png",
                type=DocumentType.PASSPORT,
                side=DocumentSide.FRONT,
            )
        )
    print(doc.id, doc.file_size)
"""

__version__ = "0.1.0"

from idcheck.client import DocumentIterator, DocumentsClient  # noqa: E402
from idcheck.config import ClientConfig  # noqa: E402
from idcheck.errors import (  # noqa: E402
    ApiError,
    ConfigurationError,
    DecodeError,
    IdCheckError,
    TransportError,
    UploadTooLarge,
)
from idcheck.models import (  # noqa: E402
    Document,
    DocumentDownload,
    DocumentRequest,
    Documents,
    DocumentSide,
    DocumentType,
)

__all__ = [
    "DocumentsClient",
    "DocumentIterator",
    "ClientConfig",
    "IdCheckError",
    "ApiError",
    "ConfigurationError",
    "DecodeError",
    "TransportError",
    "UploadTooLarge",
    "Document",
    "Documents",
    "DocumentRequest",
    "DocumentDownload",
    "DocumentType",
    "DocumentSide",
]
