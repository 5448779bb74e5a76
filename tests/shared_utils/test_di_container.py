"""
Comprehensive tests for shared_utils.di_container.

Tests singleton behaviour, lazy initialisation, reset(), use_settings()
and all adapter/service accessors. No network or AWS calls are made.
"""

from unittest.mock import MagicMock, patch

import pytest

from adapters.file_source import FileSourceAdapter
from adapters.restli_client import RestliClient
from adapters.s3_object_store import S3ObjectStoreAdapter
from services.asset_upload_service import AssetUploadService
from services.availability_poller import AvailabilityPoller
from services.byte_range_uploader import ByteRangeUploader
from shared_utils.config_loader import Settings
from shared_utils.constants import TunnelMode
from shared_utils.di_container import DIContainer, get_di_container


# ---------------------------------------------------------------------------
# Ensure each test gets a fresh singleton
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset the DIContainer singleton before and after each test."""
    DIContainer._instance = None
    yield
    DIContainer._instance = None


@pytest.fixture()
def container(base_settings_kwargs) -> DIContainer:
    c = DIContainer()
    c.use_settings(Settings(**base_settings_kwargs, tunnel_mode="never", timeout=5))
    yield c
    c.reset()


# ---------------------------------------------------------------------------
# Singleton behaviour
# ---------------------------------------------------------------------------


class TestSingleton:
    def test_same_instance(self) -> None:
        assert DIContainer() is DIContainer()

    def test_get_di_container_returns_container(self) -> None:
        c1 = get_di_container()
        c2 = get_di_container()
        assert c1 is c2
        assert isinstance(c1, DIContainer)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    def test_use_settings(self, container: DIContainer) -> None:
        assert container.get_settings().access_token == "test-token"

    def test_falls_back_to_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = MagicMock()
        with patch("shared_utils.di_container.get_settings", return_value=fake) as loader:
            c = DIContainer()
            c.reset()
            assert c.get_settings() is fake
            assert c.get_settings() is fake
        loader.assert_called_once()


# ---------------------------------------------------------------------------
# Lazy accessors
# ---------------------------------------------------------------------------


class TestAccessors:
    def test_rest_client_built_from_settings(self, container: DIContainer) -> None:
        client = container.get_rest_client()
        assert isinstance(client, RestliClient)
        assert client.access_token == "test-token"
        assert client.linkedin_version == "202501"
        assert client.tunnel_mode == TunnelMode.NEVER
        assert container.get_rest_client() is client

    def test_object_store(self, container: DIContainer) -> None:
        store = container.get_object_store()
        assert isinstance(store, S3ObjectStoreAdapter)
        assert container.get_object_store() is store

    def test_file_source(self, container: DIContainer) -> None:
        assert isinstance(container.get_file_source(), FileSourceAdapter)

    def test_uploader_and_poller_share_client(self, container: DIContainer) -> None:
        uploader = container.get_uploader()
        poller = container.get_poller()
        assert isinstance(uploader, ByteRangeUploader)
        assert isinstance(poller, AvailabilityPoller)
        assert uploader._client is container.get_rest_client()
        assert poller._client is container.get_rest_client()

    def test_asset_upload_service_wiring(self, container: DIContainer) -> None:
        service = container.get_asset_upload_service()
        assert isinstance(service, AssetUploadService)
        assert service._uploader is container.get_uploader()
        assert service._poller is container.get_poller()
        assert container.get_asset_upload_service() is service


# ---------------------------------------------------------------------------
# reset()
# ---------------------------------------------------------------------------


class TestReset:
    def test_reset_clears_everything(self, container: DIContainer) -> None:
        container.get_asset_upload_service()
        container.reset()
        assert container._settings is None
        assert container._rest_client is None
        assert container._uploader is None
        assert container._poller is None
        assert container._asset_upload_service is None

    def test_reset_closes_rest_client(self, container: DIContainer) -> None:
        fake_client = MagicMock()
        container._rest_client = fake_client
        container.reset()
        fake_client.close.assert_called_once()

    def test_reset_closes_file_source(self, container: DIContainer) -> None:
        fake_source = MagicMock()
        container._file_source = fake_source
        container.reset()
        fake_source.close.assert_called_once()
        assert container._file_source is None

    def test_use_settings_replaces_clients(self, container: DIContainer, base_settings_kwargs) -> None:
        first = container.get_rest_client()
        container.use_settings(Settings(**{**base_settings_kwargs, "access_token": "other"}))
        second = container.get_rest_client()
        assert first is not second
        assert second.access_token == "other"
