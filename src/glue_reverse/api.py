"""Public entry points for reverse engineering a Glue Data Catalog.

State (the Glue client and the database continuation token) lives on a
``GlueReverseEngineer`` instance instead of module globals. The module-level
functions delegate to a default instance for callers that only ever talk to
one catalog per process.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .assembler import SchemaAssembler
from .browser import CatalogBrowser
from .config import (
    ConnectionParams,
    RuntimeSettings,
    Selection,
    parse_connection_params,
    parse_selection,
)
from .exceptions import ConfigurationError, GlueReverseError, wrap_catalog_error
from .logging import get_logger, log_connection_info
from .models import ContainerEntities, LoadMoreMarker, OutputDocument
from .session import GlueSession

logger = get_logger(__name__)

ParamsLike = Union[ConnectionParams, Dict[str, Any]]
SelectionLike = Union[Selection, Dict[str, Any]]


@dataclass(frozen=True)
class ConnectionTestResult:
    """Outcome of a liveness probe against the catalog."""

    ok: bool
    error: Optional[Dict[str, Any]] = None


class GlueReverseEngineer:
    """Reverse engineers databases and tables of one Glue Data Catalog.

    Successive ``list_containers_with_entities`` calls continue where the
    previous page ended ("load more") until the listing is exhausted or
    ``disconnect`` is called. Those calls must not be issued concurrently.
    """

    def __init__(
        self,
        settings: Optional[RuntimeSettings] = None,
        session: Optional[GlueSession] = None,
    ) -> None:
        self.settings = settings or RuntimeSettings()
        self.session = session or GlueSession()
        self._browser: Optional[CatalogBrowser] = None

    def connect(self, params: ParamsLike) -> Any:
        """Return the Glue client, creating it on first use."""
        client = self.session.connect(params)
        if self._browser is None or self._browser.client is not client:
            self._browser = CatalogBrowser(client, page_size=self.settings.page_size)
        return client

    def disconnect(self) -> None:
        """Close the session and forget the database cursor."""
        self.session.close()
        self._browser = None

    def browser(self, params: ParamsLike) -> CatalogBrowser:
        """Return the browser bound to the current session, connecting if needed."""
        self.connect(params)
        return self._browser

    def test_connection(self, params: ParamsLike) -> ConnectionTestResult:
        """Probe the catalog by listing one page of databases.

        Never raises; failures are logged and reported in the result. The
        probe uses its own cursor so a pending "load more" is not advanced.
        """
        try:
            params = parse_connection_params(params)
            log_connection_info(logger, "Test connection", params.for_logging())
            client = self.connect(params)
            CatalogBrowser(client, page_size=self.settings.page_size).list_containers()
        except ConfigurationError as e:
            logger.error(f"Connection failed: {e.message}", extra={"event_type": "test_connection"})
            return ConnectionTestResult(ok=False, error=e.to_dict())
        except Exception as e:
            wrapped = wrap_catalog_error(e)
            logger.error(
                f"Connection failed: {wrapped.message}",
                exc_info=True,
                extra={"event_type": "test_connection"},
            )
            return ConnectionTestResult(ok=False, error=wrapped.to_dict())

        logger.info("Connection successful", extra={"event_type": "test_connection"})
        return ConnectionTestResult(ok=True)

    def list_containers_with_entities(
        self, params: ParamsLike
    ) -> List[Union[ContainerEntities, LoadMoreMarker]]:
        """List the next page of databases with all their table names.

        Raises:
            ConfigurationError: If connection parameters are invalid
            CatalogRequestError: If any catalog call fails
        """
        params = parse_connection_params(params)
        log_connection_info(
            logger, "Retrieving databases and tables information", params.for_logging()
        )
        try:
            assembler = SchemaAssembler(
                self.browser(params), max_workers=self.settings.max_workers
            )
            return assembler.list_containers_with_entities()
        except Exception as e:
            raise self._failure(e, "Retrieving databases and tables information") from e

    def extract_schemas(
        self, params: ParamsLike, selection: SelectionLike
    ) -> List[OutputDocument]:
        """Reverse engineer the selected tables.

        Raises:
            ConfigurationError: If connection parameters or selection are invalid
            CatalogRequestError: If any catalog call fails; no documents are returned
        """
        params = parse_connection_params(params)
        selection = parse_selection(selection)
        logger.info(
            "Retrieving schema",
            extra={
                "event_type": "step",
                "extra_data": {
                    "databases": selection.container_names,
                    "tables": selection.selected_entities,
                },
            },
        )
        try:
            assembler = SchemaAssembler(
                self.browser(params), max_workers=self.settings.max_workers
            )
            documents = assembler.assemble(selection)
        except Exception as e:
            raise self._failure(e, "Retrieving schema") from e

        logger.info(
            f"Retrieved {len(documents)} table schemas",
            extra={"event_type": "step"},
        )
        return documents

    @staticmethod
    def _failure(error: Exception, step: str) -> GlueReverseError:
        wrapped = wrap_catalog_error(error)
        logger.error(
            f"{step} failed: {wrapped.message}",
            exc_info=(type(error), error, error.__traceback__),
            extra={"event_type": "error"},
        )
        return wrapped


_default_engine = GlueReverseEngineer()


def get_default_engine() -> GlueReverseEngineer:
    return _default_engine


def connect(params: ParamsLike) -> Any:
    return _default_engine.connect(params)


def disconnect() -> None:
    _default_engine.disconnect()


def test_connection(params: ParamsLike) -> ConnectionTestResult:
    return _default_engine.test_connection(params)


def list_containers_with_entities(
    params: ParamsLike,
) -> List[Union[ContainerEntities, LoadMoreMarker]]:
    return _default_engine.list_containers_with_entities(params)


def extract_schemas(params: ParamsLike, selection: SelectionLike) -> List[OutputDocument]:
    return _default_engine.extract_schemas(params, selection)
