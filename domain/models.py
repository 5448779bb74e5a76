"""
Pure domain models for the asset upload pipeline.

These models contain NO transport dependencies. They represent the
registration, upload and status concepts that flow through ports and services.
Wire field names are kept as pydantic aliases so models validate straight
from server JSON and serialise back with ``by_alias=True``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shared_utils.constants import Defaults, UploadMechanism


# ---------------------------------------------------------------------------
# Upload targets
# ---------------------------------------------------------------------------


def _string_headers(value: Any) -> Dict[str, str]:
    """Keep only string-valued headers from a server-supplied header object."""
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(v, str)}


class ByteRange(BaseModel):
    """Inclusive byte range ``[first_byte, last_byte]`` of one multipart part."""

    model_config = ConfigDict(populate_by_name=True)

    first_byte: int = Field(alias="firstByte", ge=0)
    last_byte: int = Field(alias="lastByte", ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "ByteRange":
        if self.last_byte < self.first_byte:
            raise ValueError(
                f"lastByte ({self.last_byte}) must be >= firstByte ({self.first_byte})"
            )
        return self

    @property
    def length(self) -> int:
        return self.last_byte - self.first_byte + 1


class UploadTarget(BaseModel):
    """One destination bytes must be PUT to."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    headers: Dict[str, str] = {}
    byte_range: Optional[ByteRange] = Field(default=None, alias="byteRange")

    @field_validator("headers", mode="before")
    @classmethod
    def _filter_headers(cls, v: Any) -> Dict[str, str]:
        return _string_headers(v)


class PartUploadRequest(UploadTarget):
    """A multipart part: an upload target whose byte range is mandatory."""

    byte_range: ByteRange = Field(alias="byteRange")


# ---------------------------------------------------------------------------
# Registration (tagged union of upload mechanisms)
# ---------------------------------------------------------------------------


class DirectHttpUpload(BaseModel):
    """Single-shot upload: PUT the whole file to one URL."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["direct_http"] = "direct_http"
    upload_url: str = Field(alias="uploadUrl")
    headers: Dict[str, str] = {}

    @field_validator("headers", mode="before")
    @classmethod
    def _filter_headers(cls, v: Any) -> Dict[str, str]:
        return _string_headers(v)

    @property
    def target(self) -> UploadTarget:
        return UploadTarget(url=self.upload_url, headers=self.headers)


class MultipartUpload(BaseModel):
    """Multipart upload: byte ranges PUT to presigned URLs, then finalized."""

    kind: Literal["multipart"] = "multipart"
    metadata_token: str
    media_artifact_id: str
    parts: List[PartUploadRequest]


RegisteredUpload = Union[DirectHttpUpload, MultipartUpload]


class Registration(BaseModel):
    """Decoded ``registerUpload`` response value."""

    value: Dict[str, Any]
    asset: Optional[str] = None
    mechanism: RegisteredUpload = Field(discriminator="kind")


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class ServiceRelationship(BaseModel):
    identifier: str = UploadMechanism.OWNER_IDENTIFIER
    relationship_type: str = Field(
        default=UploadMechanism.OWNER_RELATIONSHIP, serialization_alias="relationshipType"
    )


class RegisterUploadRequest(BaseModel):
    """Body of ``POST /assets?action=registerUpload``."""

    owner: str
    recipes: List[str]
    service_relationships: List[ServiceRelationship] = Field(
        default_factory=lambda: [ServiceRelationship()],
        serialization_alias="serviceRelationships",
    )
    supported_upload_mechanism: Optional[List[str]] = Field(
        default=None, serialization_alias="supportedUploadMechanism"
    )
    file_size: Optional[int] = Field(default=None, serialization_alias="fileSize")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "registerUploadRequest": self.model_dump(by_alias=True, exclude_none=True)
        }


class PartResult(BaseModel):
    """Outcome of one PUT; the ETag is required for multipart parts only."""

    etag: Optional[str] = None
    http_status_code: int = Defaults.PART_STATUS_CODE

    def to_payload(self) -> Dict[str, Any]:
        return {"headers": {"ETag": self.etag}, "httpStatusCode": self.http_status_code}


class CompleteMultipartUploadRequest(BaseModel):
    """Body of ``POST /assets?action=completeMultiPartUpload``."""

    media_artifact: str
    metadata: str
    part_upload_responses: List[PartResult]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "completeMultipartUploadRequest": {
                "mediaArtifact": self.media_artifact,
                "metadata": self.metadata,
                "partUploadResponses": [p.to_payload() for p in self.part_upload_responses],
            }
        }


# ---------------------------------------------------------------------------
# Asset status
# ---------------------------------------------------------------------------


class RecipeStatus(BaseModel):
    model_config = ConfigDict(extra="allow")

    recipe: Any = None
    status: Any = None


class AssetStatus(BaseModel):
    """Subset of ``GET /assets/{id}`` used to decide readiness."""

    model_config = ConfigDict(extra="allow")

    id: Any = None
    status: Any = None
    recipes: Optional[List[RecipeStatus]] = None

    @property
    def is_ready(self) -> bool:
        if self.recipes is None:
            return False
        return all(r.status == UploadMechanism.READY_STATUS for r in self.recipes)


def asset_id_from_urn(handle: str) -> str:
    """``urn:li:digitalmediaAsset:C5405AQE`` -> ``C5405AQE``; no colon -> verbatim."""
    _, sep, tail = handle.rpartition(":")
    return tail if sep else handle


# ---------------------------------------------------------------------------
# Transport / file values
# ---------------------------------------------------------------------------


class RestResponse(BaseModel):
    """Normalized successful response. Authorization headers are never included."""

    status: int
    headers: Dict[str, str] = {}
    body: Any = None


class FileParam(BaseModel):
    """A local file ready for upload, possibly a temp copy of a remote source."""

    path: Path
    file_name: str
    is_temporary: bool = False

    def cleanup(self) -> None:
        """Remove the file if it is a temporary download."""
        if self.is_temporary:
            self.path.unlink(missing_ok=True)
