from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentType(str, Enum):
    """Kind of identity document. Values are the wire strings."""

    PASSPORT = "passport"
    NATIONAL_IDENTITY_CARD = "national_identity_card"
    DRIVING_LICENCE = "driving_licence"
    UK_BIOMETRIC_RESIDENCE_PERMIT = "uk_biometric_residence_permit"
    TAX_ID = "tax_id"
    VOTER_ID = "voter_id"
    UNKNOWN = "unknown"


class DocumentSide(str, Enum):
    FRONT = "front"
    BACK = "back"


class Document(BaseModel):
    """A document as returned by the API.

    Instances are frozen; the client never mutates server data.
    Unknown keys in the payload are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    created_at: Optional[datetime] = None
    href: Optional[str] = None
    download_href: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    type: Optional[DocumentType] = None
    # Closed set with no fallback member: an unrecognised side is a decode error.
    side: Optional[DocumentSide] = None
    issuing_country: Optional[str] = None
    applicant_id: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: object) -> object:
        # Types added server-side after this release decode as UNKNOWN.
        if isinstance(value, str):
            try:
                return DocumentType(value)
            except ValueError:
                return DocumentType.UNKNOWN
        return value


class Documents(BaseModel):
    """List envelope: ``{"documents": [...]}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    documents: List[Document] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DocumentRequest:
    """Input for an upload.

    ``file`` may be a binary stream (read once, bounded) or raw bytes.
    """

    applicant_id: str
    file: Union[BinaryIO, bytes]
    type: DocumentType
    side: Optional[DocumentSide] = None
    file_name: str = "document"
    issuing_country: Optional[str] = None

    def form_fields(self) -> dict:
        """Multipart form fields (everything except the file part).

        Raises ValueError if ``type`` or ``side`` is not a member of its enum.
        """

        fields = {
            "applicant_id": self.applicant_id,
            "type": DocumentType(self.type).value,
        }
        if self.side is not None:
            fields["side"] = DocumentSide(self.side).value
        if self.issuing_country:
            fields["issuing_country"] = self.issuing_country
        return fields


@dataclass(frozen=True, slots=True)
class DocumentDownload:
    """Downloaded document content, base64-encoded in ``data``."""

    data: str
    content_type: Optional[str] = None

    @classmethod
    def from_bytes(cls, raw: bytes, content_type: Optional[str] = None) -> "DocumentDownload":
        return cls(data=base64.b64encode(raw).decode("ascii"), content_type=content_type)

    def content(self) -> bytes:
        """Decode ``data`` back to the original bytes."""

        return base64.b64decode(self.data.encode("ascii"))
