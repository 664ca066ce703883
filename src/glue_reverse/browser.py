"""Paginated browsing of Glue databases and tables.

Database listing is capped to one page per call and resumable through a
continuation token, so callers can offer "load more" instead of draining a
large catalog. Table listing drains every page of a single database before
returning. Errors raised by the client propagate unchanged; nothing here
retries.
"""

from typing import Any, Dict, List, Optional

from .config import MAX_PAGE_SIZE
from .logging import get_logger
from .mapper import map_table_data
from .models import Container, ContainerPage, EntityRef, MappedEntity

logger = get_logger(__name__)


class CatalogBrowser:
    """Lists catalog objects through a Glue client.

    The database continuation token is owned by this instance and written
    only by ``list_containers``. Successive "load more" calls must be
    serialized by the caller; concurrent ``list_containers`` calls on the
    same browser are not supported.
    """

    def __init__(self, client: Any, page_size: int = MAX_PAGE_SIZE) -> None:
        """Initialize browser.

        Args:
            client: boto3 Glue client (or a compatible fake)
            page_size: Maximum databases requested per page
        """
        self.client = client
        self.page_size = page_size
        self._continuation_token: Optional[str] = None

    @property
    def continuation_token(self) -> Optional[str]:
        """Cursor of the next database page; None once the listing reached its end."""
        return self._continuation_token

    def reset(self) -> None:
        """Forget the database cursor so the next listing starts over."""
        self._continuation_token = None

    def rewind(self, token: Optional[str]) -> None:
        """Move the database cursor back to a token returned earlier by ``continuation_token``."""
        self._continuation_token = token

    def list_containers(self) -> ContainerPage:
        """Fetch the next page of databases.

        Returns:
            ContainerPage with the databases and whether no further page exists
        """
        request: Dict[str, Any] = {"MaxResults": self.page_size}
        if self._continuation_token:
            request["NextToken"] = self._continuation_token

        response = self.client.get_databases(**request)
        next_token = response.get("NextToken") or None
        self._continuation_token = next_token

        containers = [
            Container(name=db["Name"], description=db.get("Description"))
            for db in response.get("DatabaseList", [])
        ]
        logger.debug(
            f"Listed {len(containers)} databases",
            extra={"event_type": "list_databases", "extra_data": {"has_more": bool(next_token)}},
        )
        return ContainerPage(containers=containers, fully_uploaded=next_token is None)

    def list_entities(self, container_name: str) -> List[str]:
        """Return the names of all tables in a database, following every page.

        Args:
            container_name: Database name

        Returns:
            Table names in server order
        """
        names: List[str] = []
        next_token: Optional[str] = None
        while True:
            request: Dict[str, Any] = {"DatabaseName": container_name}
            if next_token:
                request["NextToken"] = next_token

            response = self.client.get_tables(**request)
            names.extend(table["Name"] for table in response.get("TableList", []))

            next_token = response.get("NextToken")
            if not next_token:
                return names

    def list_entity_refs(self, container_name: str) -> List[EntityRef]:
        """Return EntityRefs for all tables in a database."""
        return [
            EntityRef(container_name=container_name, entity_name=name)
            for name in self.list_entities(container_name)
        ]

    def get_container_description(self, name: str) -> Optional[str]:
        """Return the description text of a database (None when unset)."""
        response = self.client.get_database(Name=name)
        return response.get("Database", {}).get("Description")

    def get_entity(self, container_name: str, entity_name: str) -> Dict[str, Any]:
        """Return the raw GetTable response for a table."""
        return self.client.get_table(DatabaseName=container_name, Name=entity_name)

    def get_mapped_entity(self, container_name: str, entity_name: str) -> MappedEntity:
        """Fetch a table and normalize it."""
        return map_table_data(self.get_entity(container_name, entity_name))
