from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache
from typing import Optional
import logging

from shared_utils.constants import Defaults, Environment, TunnelMode

logger = logging.getLogger(__name__)


class ObjectStoreSettings(BaseSettings):
    """Object storage settings, loadable without an access token.

    Used on its own by `s3 presign`, which never talks to the Rest.li API.
    """
    aws_region: Optional[str] = None  # LINKEDIN_AWS_REGION
    aws_endpoint_url: str = ""  # LINKEDIN_AWS_ENDPOINT_URL

    model_config = SettingsConfigDict(
        env_prefix="LINKEDIN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(ObjectStoreSettings):
    """Client configuration with environment variable precedence.

    Precedence: 1) Environment Variables (LINKEDIN_*) > 2) .env file > 3) Class defaults

    The access token is the only required value; every other field has a
    working default for the production API.
    """
    # Credentials
    access_token: str  # LINKEDIN_ACCESS_TOKEN

    # Rest.li API
    version: str = Defaults.LINKEDIN_VERSION  # LINKEDIN_VERSION (YYYYMM)
    base_url: str = Defaults.BASE_URL
    restli_protocol_version: str = Defaults.RESTLI_PROTOCOL_VERSION
    timeout: Optional[float] = None  # per-request timeout in seconds
    tunnel_mode: TunnelMode = TunnelMode.AUTO

    # Environment
    environment: str = Environment.PRODUCTION.value

    @field_validator('access_token')
    @classmethod
    def validate_access_token(cls, v: str) -> str:
        """Reject blank tokens."""
        if not v or not v.strip():
            raise ValueError("access_token cannot be empty")
        return v.strip()

    @field_validator('tunnel_mode', mode='before')
    @classmethod
    def validate_tunnel_mode(cls, v):
        """Accept tunnel mode case-insensitively."""
        if isinstance(v, str):
            valid_modes = {m.value for m in TunnelMode}
            if v.lower() not in valid_modes:
                raise ValueError(f"tunnel_mode must be one of {valid_modes}, got {v}")
            return v.lower()
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Timeout must be positive when set."""
        if v is not None and v <= 0:
            raise ValueError(f"timeout must be > 0, got {v}")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is recognized."""
        valid_envs = {e.value for e in Environment}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}, got {v}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Load and cache client settings from the environment.

    Returns:
        Validated Settings instance

    Raises:
        pydantic.ValidationError: If required settings are missing or invalid
    """
    settings = Settings()

    # Log loaded configuration (token never logged)
    logger.debug(
        "configuration_loaded base_url=%s version=%s tunnel_mode=%s",
        settings.base_url,
        settings.version,
        settings.tunnel_mode.value,
    )

    return settings
