"""HTTP client for the identity-verification documents API.

Security notes:
- Treat server responses as untrusted input.
- Avoid printing or logging raw file bytes or the API token.
"""

from .documents import DocumentIterator, DocumentsClient
from .http import HttpClient, HttpResponse

__all__ = [
    "DocumentsClient",
    "DocumentIterator",
    "HttpClient",
    "HttpResponse",
]
