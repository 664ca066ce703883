"""Glue client session lifecycle and TLS material loading."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import boto3
from botocore.config import Config

from .config import ConnectionParams, SslType, parse_connection_params
from .logging import get_logger

logger = get_logger(__name__)


def read_certificate_file(path: Optional[str]) -> str:
    """Read certificate or key material from disk.

    An empty path or any failure to open or decode the file yields an empty
    string. The service call made with the resulting client reports the
    authentication failure, not this function.

    Args:
        path: Filesystem path, may be empty

    Returns:
        File contents or ``""``
    """
    if not path:
        return ""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Could not read certificate file {path}: {e}")
        return ""


@dataclass(frozen=True)
class TlsMaterial:
    """Certificate material loaded for a connection."""

    ssl: bool = False
    ca: str = ""
    cert: str = ""
    key: str = ""
    passphrase: Optional[str] = None


def load_tls_material(params: ConnectionParams) -> TlsMaterial:
    """Load the certificate material required by the connection's TLS mode."""
    if params.ssl_type == SslType.SERVER:
        return TlsMaterial(ssl=True, ca=read_certificate_file(params.cert_authority_path))
    if params.ssl_type == SslType.SERVER_AND_CLIENT:
        return TlsMaterial(
            ssl=True,
            ca=read_certificate_file(params.cert_authority_path),
            key=read_certificate_file(params.client_private_key),
            cert=read_certificate_file(params.client_cert),
            passphrase=params.client_key_password,
        )
    return TlsMaterial()


def build_client_kwargs(params: ConnectionParams) -> Dict[str, Any]:
    """Build keyword arguments for ``Session.client("glue", ...)``.

    Args:
        params: Connection parameters

    Returns:
        Dictionary with ``region_name``, ``config`` and optional ``verify`` /
        ``endpoint_url`` entries
    """
    tls = load_tls_material(params)
    config_kwargs: Dict[str, Any] = {}
    if params.connect_timeout is not None:
        config_kwargs["connect_timeout"] = params.connect_timeout
    if params.read_timeout is not None:
        config_kwargs["read_timeout"] = params.read_timeout
    if params.max_attempts is not None:
        config_kwargs["retries"] = {"max_attempts": params.max_attempts}

    client_kwargs: Dict[str, Any] = {"region_name": params.region}
    if params.endpoint_url:
        client_kwargs["endpoint_url"] = params.endpoint_url

    if tls.ssl:
        # botocore takes paths, so only point at files that actually yielded material
        if tls.ca:
            client_kwargs["verify"] = params.cert_authority_path
        if tls.cert and tls.key:
            config_kwargs["client_cert"] = (params.client_cert, params.client_private_key)
        if tls.passphrase:
            logger.warning(
                "Encrypted client keys are not supported by botocore; "
                "clientKeyPassword is ignored"
            )

    client_kwargs["config"] = Config(**config_kwargs)
    return client_kwargs


class GlueSession:
    """Owns a single Glue client; lazily created, reused and explicitly closable.

    Parameters passed to ``connect`` after a client exists are ignored until
    ``close`` is called.
    """

    def __init__(self) -> None:
        self._client = None

    @property
    def client(self) -> Optional[Any]:
        """The live client, or None when not connected."""
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self, params: Union[ConnectionParams, Dict[str, Any]]) -> Any:
        """Return the Glue client, creating it on first use.

        Args:
            params: Connection parameters (model or mapping)

        Returns:
            boto3 Glue client
        """
        if self._client is not None:
            return self._client

        params = parse_connection_params(params)
        self._client = self._create_client(params)
        logger.info(
            f"Connected to AWS Glue Data Catalog in {params.region}",
            extra={"event_type": "connect"},
        )
        return self._client

    def close(self) -> None:
        """Discard the client; no-op when not connected."""
        if self._client is not None:
            self._client = None
            logger.info("Closed AWS Glue session", extra={"event_type": "disconnect"})

    @staticmethod
    def _create_client(params: ConnectionParams) -> Any:
        session = boto3.session.Session(
            aws_access_key_id=params.access_key_id,
            aws_secret_access_key=params.secret_access_key,
            aws_session_token=params.session_token,
            region_name=params.region,
        )
        return session.client("glue", **build_client_kwargs(params))
