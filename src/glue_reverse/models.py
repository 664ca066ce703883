"""Document model produced from Glue catalog metadata.

Serialized keys follow the camelCase document model consumed by the data
modeling tool (``dbName``, ``collectionName``, ``entityLevel`` ...), so the
``to_dict`` output can be handed over unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

LOAD_MORE_LABEL = "Load more"
STORED_AS_TABLE = "input/output format"


@dataclass(frozen=True)
class Container:
    """A Glue database as returned by GetDatabases."""

    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ContainerPage:
    """One page of databases plus whether the listing reached its end."""

    containers: List[Container]
    fully_uploaded: bool


@dataclass(frozen=True)
class EntityRef:
    """Identifier of a table inside a database."""

    container_name: str
    entity_name: str


@dataclass(frozen=True)
class ColumnSpec:
    """Column name and raw Glue type string."""

    name: str
    type: str


@dataclass(frozen=True)
class SortKey:
    name: str
    direction: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.direction}


@dataclass
class EntityMetadata:
    """Normalized table-level metadata derived from one GetTable response."""

    name: str
    description: Optional[str] = None
    external_table: bool = False
    table_properties: List[Dict[str, Any]] = field(default_factory=list)
    partition_keys: List[str] = field(default_factory=list)
    clustering_keys: List[str] = field(default_factory=list)
    sorted_by: List[SortKey] = field(default_factory=list)
    compressed: Optional[bool] = None
    location: Optional[str] = None
    num_buckets: Optional[int] = None
    stored_as_sub_directories: Optional[bool] = None
    input_format: Optional[str] = None
    output_format: Optional[str] = None
    serde_library: Optional[str] = None
    serde_paths: List[str] = field(default_factory=list)
    serde_parameters: List[Dict[str, Any]] = field(default_factory=list)
    classification: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return the entity-level block; ``numBuckets`` is omitted when unset."""
        data: Dict[str, Any] = {
            "description": self.description,
            "externalTable": self.external_table,
            "tableProperties": list(self.table_properties),
            "compositePartitionKey": list(self.partition_keys),
            "compositeClusteringKey": list(self.clustering_keys),
            "sortedByKey": [key.to_dict() for key in self.sorted_by],
            "compressed": self.compressed,
            "location": self.location,
            "StoredAsSubDirectories": self.stored_as_sub_directories,
            "inputFormatClassname": self.input_format,
            "outputFormatClassname": self.output_format,
            "serDeLibrary": self.serde_library,
            "parameterPaths": list(self.serde_paths),
            "serDeParameters": list(self.serde_parameters),
            "classification": self.classification,
        }
        if self.num_buckets is not None:
            data["numBuckets"] = self.num_buckets
        return data


@dataclass
class MappedEntity:
    """Mapper output: metadata plus the columns needed for the schema block."""

    metadata: EntityMetadata
    columns: List[ColumnSpec] = field(default_factory=list)
    partition_columns: List[ColumnSpec] = field(default_factory=list)

    @property
    def all_columns(self) -> List[ColumnSpec]:
        """Regular columns first, partition keys appended."""
        return [*self.columns, *self.partition_columns]


@dataclass
class OutputDocument:
    """One reverse-engineered table."""

    container_name: str
    entity_name: str
    container_description: Optional[str]
    entity_level: EntityMetadata
    json_schema: Dict[str, Any]
    documents: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dbName": self.container_name,
            "collectionName": self.entity_name,
            "bucketInfo": {"description": self.container_description},
            "entityLevel": {
                **self.entity_level.to_dict(),
                "storedAsTable": STORED_AS_TABLE,
            },
            "documents": list(self.documents),
            "validation": {"jsonSchema": self.json_schema},
        }


@dataclass(frozen=True)
class ContainerEntities:
    """A database with the names of all its tables."""

    container_name: str
    entity_names: List[str]

    @property
    def is_empty(self) -> bool:
        return len(self.entity_names) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dbName": self.container_name,
            "dbCollections": list(self.entity_names),
            "isEmpty": self.is_empty,
        }


@dataclass(frozen=True)
class LoadMoreMarker:
    """Trailing entry signalling that more databases can be listed."""

    label: str = LOAD_MORE_LABEL

    def to_dict(self) -> Dict[str, Any]:
        return {"dbName": self.label, "loadMore": True}
