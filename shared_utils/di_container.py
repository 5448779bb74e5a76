"""
Dependency injection container for managing client dependencies.
Centralizes adapter/service creation and lifecycle management.
"""

from typing import Optional
import logging

from shared_utils.config_loader import Settings, get_settings
from shared_utils.constants import LogScope


logger = logging.getLogger(__name__)


class DIContainer:
    """Singleton dependency injection container."""

    _instance: Optional['DIContainer'] = None
    _settings: Optional[Settings] = None

    _rest_client: Optional[object] = None
    _object_store: Optional[object] = None
    _file_source: Optional[object] = None
    _uploader: Optional[object] = None
    _poller: Optional[object] = None
    _asset_upload_service: Optional[object] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def reset(self):
        """Reset container (useful for testing)."""
        if self._rest_client is not None:
            self._rest_client.close()
        if self._file_source is not None:
            self._file_source.close()
        self._settings = None
        self._rest_client = None
        self._object_store = None
        self._file_source = None
        self._uploader = None
        self._poller = None
        self._asset_upload_service = None

    def use_settings(self, settings: Settings) -> None:
        """Install explicit settings (CLI flags) instead of the environment."""
        self.reset()
        self._settings = settings

    def get_settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def get_rest_client(self):
        """Get or create RestliClient (lazy singleton)."""
        if self._rest_client is None:
            from adapters.restli_client import RestliClient

            settings = self.get_settings()
            self._rest_client = RestliClient(
                base_url=settings.base_url,
                access_token=settings.access_token,
                linkedin_version=settings.version,
                restli_protocol_version=settings.restli_protocol_version,
                timeout=settings.timeout,
                tunnel_mode=settings.tunnel_mode,
            )
            logger.info(
                "Initialized RestliClient",
                extra={"scope": LogScope.CONFIG, "base_url": settings.base_url},
            )
        return self._rest_client

    def get_object_store(self):
        """Get or create S3ObjectStoreAdapter (lazy singleton)."""
        if self._object_store is None:
            from adapters.s3_object_store import S3ObjectStoreAdapter

            settings = self.get_settings()
            self._object_store = S3ObjectStoreAdapter(
                region=settings.aws_region,
                endpoint_url=settings.aws_endpoint_url,
            )
            logger.info("Initialized S3ObjectStoreAdapter")
        return self._object_store

    def get_file_source(self):
        """Get or create FileSourceAdapter (lazy singleton)."""
        if self._file_source is None:
            from adapters.file_source import FileSourceAdapter

            self._file_source = FileSourceAdapter(object_store=self.get_object_store())
            logger.info("Initialized FileSourceAdapter")
        return self._file_source

    def get_uploader(self):
        """Get or create ByteRangeUploader (lazy singleton)."""
        if self._uploader is None:
            from services.byte_range_uploader import ByteRangeUploader

            self._uploader = ByteRangeUploader(self.get_rest_client())
        return self._uploader

    def get_poller(self):
        """Get or create AvailabilityPoller (lazy singleton)."""
        if self._poller is None:
            from services.availability_poller import AvailabilityPoller

            self._poller = AvailabilityPoller(self.get_rest_client())
        return self._poller

    def get_asset_upload_service(self):
        """Get or create AssetUploadService (lazy singleton)."""
        if self._asset_upload_service is None:
            from services.asset_upload_service import AssetUploadService

            self._asset_upload_service = AssetUploadService(
                rest_client=self.get_rest_client(),
                uploader=self.get_uploader(),
                poller=self.get_poller(),
            )
            logger.info("Initialized AssetUploadService")
        return self._asset_upload_service


# Global singleton instance
_container = DIContainer()


def get_di_container() -> DIContainer:
    """Get global DI container instance."""
    return _container
