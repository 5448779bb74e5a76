"""
Asset upload service — orchestrates the Assets API upload protocol.

Flow:  register → upload (direct or multipart) → [complete] → [wait] → done.

Depends only on ports (protocol interfaces) — never on concrete adapters.
The server's registration response decides the mechanism; the size-based
multipart hint is only a request.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from domain.decoding import decode_registration
from domain.models import (
    CompleteMultipartUploadRequest,
    DirectHttpUpload,
    FileParam,
    MultipartUpload,
    RegisterUploadRequest,
    Registration,
)
from ports.rest_client import RestClientPort
from services.availability_poller import AvailabilityPoller
from services.byte_range_uploader import ByteRangeUploader
from shared_utils.constants import (
    AssetEndpoints,
    AssetRecipes,
    Defaults,
    LogScope,
    UploadMechanism,
)
from shared_utils.error_handler import AppException, FileError, SchemaError
from shared_utils.logging_utils import get_scoped_logger, log_execution
from shared_utils.validation import InputValidator

logger = get_scoped_logger(LogScope.ASSET_UPLOAD)


@contextmanager
def _step(name: str) -> Iterator[None]:
    """Tag any application error raised inside with the protocol step."""
    try:
        yield
    except AppException as exc:
        exc.context.setdefault("step", name)
        raise


class AssetUploadService:
    """Uploads images and videos through the Assets API.

    Every upload is one linear, blocking flow; nothing is retried and no
    compensating call is made when a later step fails.
    """

    def __init__(
        self,
        rest_client: RestClientPort,
        uploader: Optional[ByteRangeUploader] = None,
        poller: Optional[AvailabilityPoller] = None,
        multipart_threshold: int = Defaults.MULTIPART_THRESHOLD_BYTES,
    ) -> None:
        self._client = rest_client
        self._uploader = uploader or ByteRangeUploader(rest_client)
        self._poller = poller or AvailabilityPoller(rest_client)
        self._multipart_threshold = multipart_threshold

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @log_execution(scope=LogScope.ASSET_UPLOAD)
    def upload_image(
        self,
        owner: str,
        file: FileParam,
        recipe: str = AssetRecipes.IMAGE,
    ) -> Dict[str, Any]:
        """Register and upload an image in a single PUT.

        Returns:
            The registration ``value`` object.
        """
        owner = InputValidator.validate_urn(owner, "owner")
        request = RegisterUploadRequest(
            owner=owner,
            recipes=[recipe],
            supported_upload_mechanism=[UploadMechanism.SYNCHRONOUS],
        )

        with _step("register"):
            registration = self._register(request)

        mechanism = registration.mechanism
        if not isinstance(mechanism, DirectHttpUpload):
            raise SchemaError(
                f"uploadMechanism.{UploadMechanism.HTTP_REQUEST_KEY}",
                "missing field",
                context={"step": "register"},
            )

        with _step("upload"):
            self._uploader.upload(file.path, [mechanism.target], include_auth=True)

        logger.info("image_uploaded", asset=registration.asset, file_name=file.file_name)
        return registration.value

    @log_execution(scope=LogScope.ASSET_UPLOAD)
    def upload_video(
        self,
        owner: str,
        file: FileParam,
        recipe: str = AssetRecipes.VIDEO,
        wait: bool = False,
        wait_timeout: float = Defaults.POLL_TIMEOUT_SECONDS,
    ) -> Dict[str, Any]:
        """Register and upload a video, single-shot or multipart.

        Steps:
            1. Stat the file; above the threshold ask for MULTIPART_UPLOAD.
            2. Register the upload.
            3. Direct mechanism: PUT the whole file.
               Multipart mechanism: PUT each byte range, then finalize.
            4. Optionally wait for the asset's recipes to become available.

        Returns:
            Direct: the registration ``value``.
            Multipart: ``{"register": value, "complete": finalize_body}``.
        """
        owner = InputValidator.validate_urn(owner, "owner")
        file_size = self._file_size(file)
        multipart = file_size > self._multipart_threshold

        request = RegisterUploadRequest(
            owner=owner,
            recipes=[recipe],
            supported_upload_mechanism=[UploadMechanism.MULTIPART] if multipart else None,
            file_size=file_size if multipart else None,
        )

        logger.info(
            "video_upload_started",
            file_name=file.file_name,
            size_bytes=file_size,
            multipart_requested=multipart,
        )

        with _step("register"):
            registration = self._register(request)

        mechanism = registration.mechanism
        if isinstance(mechanism, DirectHttpUpload):
            with _step("upload"):
                self._uploader.upload(file.path, [mechanism.target], include_auth=True)
            self._maybe_wait(registration, wait, wait_timeout)
            return registration.value

        complete_body = self._upload_multipart(file, mechanism)
        self._maybe_wait(registration, wait, wait_timeout)
        return {"register": registration.value, "complete": complete_body}

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _register(self, request: RegisterUploadRequest) -> Registration:
        response = self._client.call(
            "POST",
            AssetEndpoints.ASSETS,
            query={"action": AssetEndpoints.REGISTER_ACTION},
            body=request.to_payload(),
        )
        body = response.body
        value = body.get("value") if isinstance(body, dict) else None
        registration = decode_registration(value)
        logger.info(
            "upload_registered",
            asset=registration.asset,
            mechanism=registration.mechanism.kind,
        )
        return registration

    def _upload_multipart(self, file: FileParam, mechanism: MultipartUpload) -> Any:
        with _step("upload_parts"):
            part_results = self._uploader.upload(file.path, mechanism.parts, include_auth=False)

        complete = CompleteMultipartUploadRequest(
            media_artifact=mechanism.media_artifact_id,
            metadata=mechanism.metadata_token,
            part_upload_responses=part_results,
        )
        with _step("complete"):
            response = self._client.call(
                "POST",
                AssetEndpoints.ASSETS,
                query={"action": AssetEndpoints.COMPLETE_ACTION},
                body=complete.to_payload(),
            )

        logger.info(
            "multipart_completed",
            media_artifact=mechanism.media_artifact_id,
            part_count=len(part_results),
        )
        return response.body

    def _maybe_wait(self, registration: Registration, wait: bool, timeout: float) -> None:
        if not wait:
            return
        if registration.asset is None:
            logger.warning("asset_wait_skipped", reason="registration returned no asset")
            return
        with _step("wait"):
            self._poller.wait(registration.asset, timeout=timeout)

    @staticmethod
    def _file_size(file: FileParam) -> int:
        try:
            return file.path.stat().st_size
        except OSError as exc:
            raise FileError(str(file.path), f"cannot stat file ({exc.strerror})") from exc
