"""
Constants management.
Centralized configuration for all magic values, protocol names, and defaults.
"""

from enum import Enum
from typing import Final


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class TunnelMode(str, Enum):
    """Query tunneling mode for long GET/DELETE requests."""
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


# Default values
class Defaults:
    """Defaults for the REST client and upload pipeline."""
    APP_NAME: Final[str] = "linkedin-ads-cli"
    APP_VERSION: Final[str] = "0.1.0"
    USER_AGENT: Final[str] = f"{APP_NAME}/{APP_VERSION}"
    BASE_URL: Final[str] = "https://api.linkedin.com/rest"
    LINKEDIN_VERSION: Final[str] = "202501"
    RESTLI_PROTOCOL_VERSION: Final[str] = "2.0.0"
    TUNNEL_URL_THRESHOLD: Final[int] = 3800  # proxies reject longer URLs
    MULTIPART_THRESHOLD_BYTES: Final[int] = 200 * 1024 * 1024
    POLL_INTERVAL_SECONDS: Final[float] = 3.0
    POLL_TIMEOUT_SECONDS: Final[float] = 300.0
    PRESIGN_EXPIRES_SECONDS: Final[int] = 3600
    PART_STATUS_CODE: Final[int] = 200


# Logging scopes
class LogScope:
    """Standardized logging scope names."""
    CONFIG = "config_loader"
    CLI = "cli"
    VALIDATION = "validation"
    ERROR_HANDLER = "error_handler"
    REST_CLIENT = "rest_client"
    ADAPTER = "adapter"
    UPLOADER = "uploader"
    ASSET_UPLOAD = "asset_upload"
    POLLER = "poller"
    PAGINATION = "pagination"


# Rest.li header names
class RestliHeaders:
    """Header names used by the Rest.li protocol."""
    AUTHORIZATION: Final[str] = "Authorization"
    LINKEDIN_VERSION: Final[str] = "Linkedin-Version"
    X_LINKEDIN_VERSION: Final[str] = "X-LinkedIn-Version"
    PROTOCOL_VERSION: Final[str] = "X-Restli-Protocol-Version"
    METHOD_OVERRIDE: Final[str] = "X-HTTP-Method-Override"
    RESTLI_ID: Final[str] = "X-RestLi-Id"
    ETAG: Final[str] = "ETag"
    ACCEPT: Final[str] = "Accept"
    CONTENT_TYPE: Final[str] = "Content-Type"


# Assets API endpoints and actions
class AssetEndpoints:
    """Assets API paths and action names."""
    ASSETS = "/assets"
    ASSET_BY_ID = "/assets/{asset_id}"
    REGISTER_ACTION = "registerUpload"
    COMPLETE_ACTION = "completeMultiPartUpload"
    STATUS_FIELDS = "recipes,id,status"


class AssetRecipes:
    """Default digital media recipes."""
    IMAGE: Final[str] = "urn:li:digitalmediaRecipe:companyUpdate-article-image"
    VIDEO: Final[str] = "urn:li:digitalmediaRecipe:ads-video_v2"


class UploadMechanism:
    """Upload mechanism names and the fully-qualified keys the server returns."""
    SYNCHRONOUS: Final[str] = "SYNCHRONOUS_UPLOAD"
    MULTIPART: Final[str] = "MULTIPART_UPLOAD"
    HTTP_REQUEST_KEY: Final[str] = "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest"
    MULTIPART_KEY: Final[str] = "com.linkedin.digitalmedia.uploading.MultipartUpload"
    OWNER_IDENTIFIER: Final[str] = "urn:li:userGeneratedContent"
    OWNER_RELATIONSHIP: Final[str] = "OWNER"
    READY_STATUS: Final[str] = "AVAILABLE"


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes for consistency."""
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_INPUT = "INVALID_INPUT"
    TRANSPORT_FAILED = "TRANSPORT_FAILED"
    HTTP_ERROR = "HTTP_ERROR"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    FILE_ERROR = "FILE_ERROR"
    ASSET_TIMEOUT = "ASSET_TIMEOUT"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
