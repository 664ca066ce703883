"""Assemble reverse-engineered documents from catalog listings.

Fetches for different databases and tables are independent read-only
calls, so they run on a thread pool. The first failure fails the whole
batch; no partial document list is returned.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Union

from .browser import CatalogBrowser
from .config import Selection
from .hive_types import get_json_schema, sanitize_type, set_property
from .logging import get_logger, log_progress
from .models import (
    ColumnSpec,
    ContainerEntities,
    LoadMoreMarker,
    OutputDocument,
)

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = 8


def get_columns_schema(columns: List[ColumnSpec]) -> Dict[str, Any]:
    """Build the schema block for a table from its ordered columns."""
    schema: Dict[str, Any] = {"type": "object", "properties": {}}
    for column in columns:
        set_property(column.name, get_json_schema(sanitize_type(column.type)), schema)
    return schema


class SchemaAssembler:
    """Turns selected databases and tables into OutputDocuments."""

    def __init__(self, browser: CatalogBrowser, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        """Initialize assembler.

        Args:
            browser: Browser bound to a connected Glue client
            max_workers: Maximum concurrent catalog requests
        """
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.browser = browser
        self.max_workers = max_workers

    def list_containers_with_entities(self) -> List[Union[ContainerEntities, LoadMoreMarker]]:
        """List the next page of databases together with all their table names.

        A trailing LoadMoreMarker is appended when the database listing has
        further pages. When any table listing fails the database cursor is
        moved back, so repeating the call returns the same page.
        """
        previous_token = self.browser.continuation_token
        page = self.browser.list_containers()
        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [
                    pool.submit(self._container_entities, container.name)
                    for container in page.containers
                ]
                result: List[Union[ContainerEntities, LoadMoreMarker]] = [
                    self._result_or_cancel(pool, future) for future in futures
                ]
        except Exception:
            self.browser.rewind(previous_token)
            raise

        if not page.fully_uploaded:
            result.append(LoadMoreMarker())
        return result

    def _container_entities(self, container_name: str) -> ContainerEntities:
        log_progress(logger, "Listing tables", container_name)
        return ContainerEntities(
            container_name=container_name,
            entity_names=self.browser.list_entities(container_name),
        )

    def assemble(self, selection: Selection) -> List[OutputDocument]:
        """Build one OutputDocument per selected table.

        Documents are grouped by database in selection order.

        Args:
            selection: Databases and per-database table names

        Returns:
            List of OutputDocuments
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            description_futures = {
                name: pool.submit(self.browser.get_container_description, name)
                for name in selection.container_names
            }
            entity_futures = [
                (name, entity_name, pool.submit(self._fetch_entity, name, entity_name))
                for name in selection.container_names
                for entity_name in selection.entities_for(name)
            ]

            documents: List[OutputDocument] = []
            for container_name, entity_name, future in entity_futures:
                mapped = self._result_or_cancel(pool, future)
                description = self._result_or_cancel(pool, description_futures[container_name])
                documents.append(
                    OutputDocument(
                        container_name=container_name,
                        entity_name=mapped.metadata.name or entity_name,
                        container_description=description,
                        entity_level=mapped.metadata,
                        json_schema=get_columns_schema(mapped.all_columns),
                    )
                )
            # Surface description failures even for databases without selected tables
            for future in description_futures.values():
                self._result_or_cancel(pool, future)

        return documents

    @staticmethod
    def _result_or_cancel(pool: ThreadPoolExecutor, future: Future) -> Any:
        """Return the future's result; on failure drop every fetch not yet started."""
        try:
            return future.result()
        except Exception:
            pool.shutdown(wait=False, cancel_futures=True)
            raise

    def _fetch_entity(self, container_name: str, entity_name: str):
        log_progress(logger, "Getting table data", container_name, entity_name)
        return self.browser.get_mapped_entity(container_name, entity_name)
