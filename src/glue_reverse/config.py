"""Configuration models for Glue catalog connections and extraction runs."""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

# Glue GetDatabases accepts at most 100 results per page
MAX_PAGE_SIZE = 100


class SslType(str, Enum):
    """TLS mode for the connection to the Glue endpoint."""

    NONE = "none"
    SERVER = "Server validation"
    SERVER_AND_CLIENT = "Server and client validation"


_SSL_ALIASES = {
    "": SslType.NONE,
    "none": SslType.NONE,
    "false": SslType.NONE,
    "disabled": SslType.NONE,
    "server validation": SslType.SERVER,
    "server": SslType.SERVER,
    "server_validation": SslType.SERVER,
    "server and client validation": SslType.SERVER_AND_CLIENT,
    "server_and_client": SslType.SERVER_AND_CLIENT,
    "server_and_client_validation": SslType.SERVER_AND_CLIENT,
    "mutual": SslType.SERVER_AND_CLIENT,
}


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration values.

    Args:
        data: Data structure (dict, list, or str) to expand

    Returns:
        Data structure with environment variables expanded
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    if isinstance(data, str):
        return os.path.expandvars(data)
    return data


class ConnectionParams(BaseModel):
    """Credentials, region and TLS settings for the Glue Data Catalog.

    Field names accept both snake_case and the camelCase keys used by the
    original connection dialog (``accessKeyId``, ``sslType``, ...).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_key_id: Optional[str] = Field(None, alias="accessKeyId")
    secret_access_key: Optional[str] = Field(None, alias="secretAccessKey")
    region: str
    session_token: Optional[str] = Field(None, alias="sessionToken")

    ssl_type: SslType = Field(SslType.NONE, alias="sslType")
    cert_authority_path: Optional[str] = Field(None, alias="certAuthorityPath")
    client_cert: Optional[str] = Field(None, alias="clientCert")
    client_private_key: Optional[str] = Field(None, alias="clientPrivateKey")
    client_key_password: Optional[str] = Field(None, alias="clientKeyPassword")

    # Transport settings; the catalog browser itself never retries
    endpoint_url: Optional[str] = Field(None, alias="endpointUrl")
    connect_timeout: Optional[float] = Field(None, alias="connectTimeout", gt=0)
    read_timeout: Optional[float] = Field(None, alias="readTimeout", gt=0)
    max_attempts: Optional[int] = Field(None, alias="maxAttempts", ge=1)

    @field_validator("ssl_type", mode="before")
    @classmethod
    def normalize_ssl_type(cls, value: Any) -> Any:
        """Accept the dialog labels as well as short snake_case spellings."""
        if value is None:
            return SslType.NONE
        if isinstance(value, SslType):
            return value
        if isinstance(value, str):
            normalized = _SSL_ALIASES.get(value.strip().lower())
            if normalized is not None:
                return normalized
        return value

    @field_validator("region")
    @classmethod
    def validate_region(cls, value: str) -> str:
        """Reject blank regions early; boto3 would fail later with a vaguer error."""
        value = value.strip()
        if not value:
            raise ValueError("region must not be empty")
        return value

    def for_logging(self) -> Dict[str, Any]:
        """Return connection info suitable for logging (secrets masked by the logger)."""
        return self.model_dump(mode="json", exclude_none=True)


class Selection(BaseModel):
    """Databases and tables chosen for schema extraction."""

    model_config = ConfigDict(populate_by_name=True)

    container_names: List[str] = Field(default_factory=list, alias="dataBaseNames")
    selected_entities: Dict[str, List[str]] = Field(
        default_factory=dict, alias="collections"
    )

    def entities_for(self, container_name: str) -> List[str]:
        """Return selected table names for a database (empty when none selected)."""
        return list(self.selected_entities.get(container_name) or [])


class LoggingConfig(BaseModel):
    """Logging configuration."""

    redaction: bool = False
    level: str = "INFO"


class RuntimeSettings(BaseModel):
    """Concurrency and paging settings for catalog requests."""

    max_workers: int = Field(default=8, ge=1)
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class RunConfig(BaseModel):
    """Complete configuration for a CLI run."""

    connection: ConnectionParams
    selection: Selection = Field(default_factory=Selection)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RunConfig":
        """Load run configuration from YAML file.

        Environment variable references (``$VAR`` / ``${VAR}``) in values are
        expanded before validation.

        Args:
            path: Path to YAML file

        Returns:
            RunConfig instance

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Config file not found: {path}", details={"path": str(path)}
            )

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse config YAML: {path}", details={"yaml_error": str(e)}
            ) from e

        if not data:
            raise ConfigurationError(f"Config file is empty: {path}")

        return cls.from_dict(expand_env_vars(data))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunConfig":
        """Validate a configuration mapping.

        Raises:
            ConfigurationError: If validation fails
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid configuration", details={"errors": e.errors(include_url=False)}
            ) from e


def parse_connection_params(
    params: Union[ConnectionParams, Dict[str, Any]],
) -> ConnectionParams:
    """Coerce a mapping into ConnectionParams.

    Raises:
        ConfigurationError: If the mapping is not valid connection info
    """
    if isinstance(params, ConnectionParams):
        return params
    try:
        return ConnectionParams.model_validate(params)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid connection parameters",
            details={"errors": e.errors(include_url=False)},
        ) from e


def parse_selection(selection: Union[Selection, Dict[str, Any]]) -> Selection:
    """Coerce a mapping into a Selection.

    Raises:
        ConfigurationError: If the mapping is not a valid selection
    """
    if isinstance(selection, Selection):
        return selection
    try:
        return Selection.model_validate(selection)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid selection", details={"errors": e.errors(include_url=False)}
        ) from e
