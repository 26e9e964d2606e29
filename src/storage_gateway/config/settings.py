# src/storage_gateway/config/settings.py
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

# Fixed resource names. These are not configurable at call time.
IMAGE_CONTAINER_NAME = "product-images"
CONTRACT_SHARE_NAME = "contracts"
ORDER_QUEUE_NAME = "order-queue"
CUSTOMER_TABLE_NAME = "customerprofiles"
CUSTOMER_PARTITION_KEY = "customers"

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
MOCK_ENDPOINT_URL = "http://localhost:5000"

# Connection-string fields consulted per capability, highest priority first.
# The file share is a mounted directory and needs no credential.
CONNECTION_PRECEDENCE = {
    "object_store": ("storage_connection_string", "runtime_storage_connection_string"),
    "queue": ("storage_connection_string", "queue_connection_string", "runtime_storage_connection_string"),
    "table": ("storage_connection_string", "table_connection_string", "runtime_storage_connection_string"),
}

_CONNECTION_SEGMENTS = {
    "endpointurl": "endpoint_url",
    "region": "region",
    "accesskeyid": "access_key_id",
    "secretaccesskey": "secret_access_key",
}


class ConnectionInfo(BaseModel):
    """Parsed storage connection string.

    Format: ``EndpointUrl=http://localhost:5000;Region=us-east-1;AccessKeyId=...;SecretAccessKey=...``
    Every segment is optional; unknown segments are rejected.
    """

    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    @classmethod
    def parse(cls, connection_string: str) -> "ConnectionInfo":
        values: Dict[str, str] = {}
        for segment in connection_string.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            if not sep:
                raise ValueError(f"Malformed connection string segment: {segment!r}")
            field_name = _CONNECTION_SEGMENTS.get(key.strip().lower())
            if field_name is None:
                raise ValueError(f"Unknown connection string key: {key.strip()!r}")
            values[field_name] = value.strip()
        return cls(**values)

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``boto3.client``; unset values are omitted."""
        kwargs = {
            "endpoint_url": self.endpoint_url,
            "region_name": self.region,
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }
        return {k: v for k, v in kwargs.items() if v}


class Settings(BaseSettings):
    """
    Single source of truth for all gateway settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    The storage connection credential is resolved per capability. Each
    recognised variable has its own field; `CONNECTION_PRECEDENCE` decides
    which one a capability uses.

    Usage:
        from storage_gateway.config.settings import get_settings
        settings = get_settings()
        info = settings.connection_for("queue")
    """

    app_name: str = Field(
        default="storage-gateway",
        description="Application name"
    )

    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod",
        validation_alias=AliasChoices("DEPLOYMENT_MODE"),
    )

    # Connection strings, one field per recognised variable. The precedence
    # between them is applied per capability in `connection_for`.
    storage_connection_string: Optional[str] = Field(
        default=None,
        description="Primary connection string, used by every capability",
    )

    queue_connection_string: Optional[str] = Field(
        default=None,
        description="Order queue fallback",
    )

    table_connection_string: Optional[str] = Field(
        default=None,
        description="Customer table fallback",
    )

    runtime_storage_connection_string: Optional[str] = Field(
        default=None,
        description="Last-resort connection string set by the hosting runtime",
    )

    # AWS Core Settings, used when no connection string is set
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_DEFAULT_REGION"),
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ACCESS_KEY_ID"),
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_SECRET_ACCESS_KEY"),
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ENDPOINT_URL"),
    )

    # Client timeouts (seconds), passed to botocore
    client_connect_timeout: float = Field(default=10.0)
    client_read_timeout: float = Field(default=60.0)

    # Storage Configuration
    storage_dir: str = Field(
        default="storage",
        description="Root directory for local-dev backends"
    )

    file_share_root: Optional[str] = Field(
        default=None,
        description="Mounted share root (EFS) used by aws modes; defaults to storage_dir"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        description="Base URL used to build object locators instead of the S3 endpoint"
    )

    # HTTP
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("deployment_mode", mode="before")
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Normalize deployment mode values for backwards compatibility."""
        if v:
            mode_mapping = {
                "local": "local-dev",
                "local-mock": "local-dev",
                "cloud": "aws-prod",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator(
        "storage_connection_string",
        "queue_connection_string",
        "table_connection_string",
        "runtime_storage_connection_string",
    )
    @classmethod
    def check_connection_string(cls, v):
        if v:
            ConnectionInfo.parse(v)
        return v or None

    @model_validator(mode="after")
    def set_mock_defaults(self) -> Self:
        """Point aws-mock at the local moto server with mock credentials."""
        if self.deployment_mode == "aws-mock":
            if self.aws_endpoint_url is None:
                self.aws_endpoint_url = MOCK_ENDPOINT_URL
            if self.aws_access_key_id is None:
                self.aws_access_key_id = "mock"
            if self.aws_secret_access_key is None:
                self.aws_secret_access_key = "mock"
        return self

    @property
    def share_root(self) -> str:
        return self.file_share_root or self.storage_dir

    def connection_for(self, capability: str) -> ConnectionInfo:
        """Resolve the connection credential for one capability.

        ``capability`` is one of ``object_store``, ``queue``, ``table``. The
        first variable set in that capability's precedence list wins; the
        discrete ``AWS_*`` settings apply when none is set.
        """
        if capability not in CONNECTION_PRECEDENCE:
            raise ValueError(f"Unknown capability: {capability}")

        connection_string = next(
            (getattr(self, field) for field in CONNECTION_PRECEDENCE[capability] if getattr(self, field)),
            None,
        )
        if connection_string:
            info = ConnectionInfo.parse(connection_string)
            if info.region is None:
                info = info.model_copy(update={"region": self.aws_region})
            return info
        return ConnectionInfo(
            endpoint_url=self.aws_endpoint_url,
            region=self.aws_region,
            access_key_id=self.aws_access_key_id,
            secret_access_key=self.aws_secret_access_key,
        )

    def get_environment_dict(self) -> dict:
        """Resolved configuration with secrets masked, for display."""
        def mask(value: Optional[str]) -> str:
            return "***" if value else ""

        return {
            "DEPLOYMENT_MODE": self.deployment_mode,
            "AWS_DEFAULT_REGION": self.aws_region,
            "AWS_ENDPOINT_URL": self.aws_endpoint_url or "",
            "AWS_ACCESS_KEY_ID": mask(self.aws_access_key_id),
            "AWS_SECRET_ACCESS_KEY": mask(self.aws_secret_access_key),
            "STORAGE_CONNECTION_STRING": mask(self.storage_connection_string),
            "QUEUE_CONNECTION_STRING": mask(self.queue_connection_string),
            "TABLE_CONNECTION_STRING": mask(self.table_connection_string),
            "RUNTIME_STORAGE_CONNECTION_STRING": mask(self.runtime_storage_connection_string),
            "STORAGE_DIR": self.storage_dir,
            "FILE_SHARE_ROOT": self.share_root,
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
