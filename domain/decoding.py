"""
Decoding of Assets API responses into domain models.

Each decoder validates the whole expected shape in one step and turns the
first pydantic error into a single ``SchemaError`` naming the field path.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from domain.models import (
    AssetStatus,
    DirectHttpUpload,
    PartUploadRequest,
    Registration,
    MultipartUpload,
)
from shared_utils.constants import UploadMechanism
from shared_utils.error_handler import SchemaError


def _field_path(prefix: Iterable[str], loc: Iterable[Any]) -> str:
    return ".".join([*prefix, *(str(p) for p in loc)])


def _schema_error(exc: PydanticValidationError, *prefix: str) -> SchemaError:
    first = exc.errors()[0]
    field = _field_path(prefix, first.get("loc", ()))
    if first.get("type") == "missing":
        message = "missing field"
    else:
        message = f"invalid field ({first.get('msg')})"
    return SchemaError(field or ".".join(prefix), message)


class _MultipartMechanism(BaseModel):
    metadata: str
    parts: List[PartUploadRequest] = Field(alias="partUploadRequests")


def decode_registration(value: Any) -> Registration:
    """Decode the ``value`` object of a ``registerUpload`` response.

    The mechanism block is a single-key object keyed by a fully-qualified
    type name; the direct HTTP key is checked first, then multipart.

    Raises:
        SchemaError: On the first missing or mistyped field
    """
    if not isinstance(value, dict):
        raise SchemaError("value", "missing response field")

    mechanism_block = value.get("uploadMechanism")
    if not isinstance(mechanism_block, dict):
        raise SchemaError("uploadMechanism", "missing field")

    asset = value.get("asset") if isinstance(value.get("asset"), str) else None

    if UploadMechanism.HTTP_REQUEST_KEY in mechanism_block:
        try:
            mechanism = DirectHttpUpload.model_validate(
                mechanism_block[UploadMechanism.HTTP_REQUEST_KEY]
            )
        except PydanticValidationError as exc:
            raise _schema_error(
                exc, "uploadMechanism", UploadMechanism.HTTP_REQUEST_KEY
            ) from exc
        return Registration(value=value, asset=asset, mechanism=mechanism)

    if UploadMechanism.MULTIPART_KEY not in mechanism_block:
        raise SchemaError("uploadMechanism", "missing upload mechanism")

    try:
        multipart = _MultipartMechanism.model_validate(
            mechanism_block[UploadMechanism.MULTIPART_KEY]
        )
    except PydanticValidationError as exc:
        raise _schema_error(exc, "uploadMechanism", UploadMechanism.MULTIPART_KEY) from exc

    media_artifact = value.get("mediaArtifact")
    if not isinstance(media_artifact, str):
        raise SchemaError("mediaArtifact", "missing field")

    mechanism = MultipartUpload(
        metadata_token=multipart.metadata,
        media_artifact_id=media_artifact,
        parts=multipart.parts,
    )
    return Registration(value=value, asset=asset, mechanism=mechanism)


def decode_asset_status(body: Any) -> AssetStatus:
    """Decode a ``GET /assets/{id}`` body.

    A body that is not an object, or whose recipes cannot be read, yields a
    status that is simply not ready yet.
    """
    if not isinstance(body, dict):
        return AssetStatus()
    try:
        return AssetStatus.model_validate(body)
    except PydanticValidationError:
        return AssetStatus(id=body.get("id"))
