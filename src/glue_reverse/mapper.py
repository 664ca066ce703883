"""Normalize raw Glue GetTable responses into entity metadata.

Every function here is pure and tolerant of missing optional fields:
absent parameters become an empty mapping, absent column lists become empty
lists and a bucket count below one is dropped instead of reported as zero.
"""

from typing import Any, Dict, List, Optional

from .models import ColumnSpec, EntityMetadata, MappedEntity, SortKey

CLASSIFICATIONS = {
    "avro": "Avro",
    "csv": "CSV",
    "json": "JSON",
    "xml": "XML",
    "parquet": "Parquet",
    "orc": "ORC",
}

CLASSIFICATION_KEY = "classification"
SERDE_PATHS_KEY = "paths"
EXTERNAL_TABLE = "EXTERNAL_TABLE"
ASCENDING = "ascending"
DESCENDING = "descending"


def get_classification(parameters: Optional[Dict[str, Any]]) -> str:
    """Map the ``classification`` table parameter to a known storage format.

    Returns:
        One of Avro, CSV, JSON, XML, Parquet, ORC; ``""`` when absent or unknown
    """
    value = (parameters or {}).get(CLASSIFICATION_KEY)
    if not isinstance(value, str):
        return ""
    return CLASSIFICATIONS.get(value.strip().lower(), "")


def map_table_properties(parameters: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Turn table parameters into key/value pairs, without ``classification``.

    Empty-string values are kept.
    """
    return [
        {"tablePropKey": key, "tablePropValue": value}
        for key, value in (parameters or {}).items()
        if key != CLASSIFICATION_KEY
    ]


def map_sort_columns(sort_columns: Optional[List[Dict[str, Any]]]) -> List[SortKey]:
    """SortOrder 1 is ascending; anything else is descending."""
    return [
        SortKey(
            name=item.get("Column"),
            direction=ASCENDING if item.get("SortOrder") == 1 else DESCENDING,
        )
        for item in (sort_columns or [])
    ]


def get_num_buckets(num_buckets: Optional[int]) -> Optional[int]:
    """Return the bucket count, or None when missing, zero or negative."""
    if num_buckets is None or num_buckets < 1:
        return None
    return num_buckets


def map_serde_paths(serde_info: Optional[Dict[str, Any]]) -> List[str]:
    """Split the comma-delimited ``paths`` SerDe parameter."""
    paths = ((serde_info or {}).get("Parameters") or {}).get(SERDE_PATHS_KEY)
    if not paths:
        return []
    return paths.split(",")


def map_serde_parameters(parameters: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Turn SerDe parameters into key/value pairs, without ``paths``."""
    return [
        {"serDeKey": key, "serDeValue": value}
        for key, value in (parameters or {}).items()
        if key != SERDE_PATHS_KEY
    ]


def map_columns(columns: Optional[List[Dict[str, Any]]]) -> List[ColumnSpec]:
    return [
        ColumnSpec(name=column["Name"], type=column.get("Type") or "string")
        for column in (columns or [])
    ]


def map_table_data(table_data: Dict[str, Any]) -> MappedEntity:
    """Normalize a GetTable response.

    Args:
        table_data: Raw response, with the table under the ``Table`` key

    Returns:
        MappedEntity with entity metadata, regular columns and partition columns
    """
    table = table_data.get("Table") or {}
    parameters = table.get("Parameters") or {}
    storage = table.get("StorageDescriptor") or {}
    serde_info = storage.get("SerdeInfo") or {}
    partition_keys = table.get("PartitionKeys") or []

    metadata = EntityMetadata(
        name=table.get("Name"),
        description=table.get("Description"),
        external_table=table.get("TableType") == EXTERNAL_TABLE,
        table_properties=map_table_properties(parameters),
        partition_keys=[key["Name"] for key in partition_keys],
        clustering_keys=list(storage.get("BucketColumns") or []),
        sorted_by=map_sort_columns(storage.get("SortColumns")),
        compressed=storage.get("Compressed"),
        location=storage.get("Location"),
        num_buckets=get_num_buckets(storage.get("NumberOfBuckets")),
        stored_as_sub_directories=storage.get("StoredAsSubDirectories"),
        input_format=storage.get("InputFormat"),
        output_format=storage.get("OutputFormat"),
        serde_library=serde_info.get("SerializationLibrary"),
        serde_paths=map_serde_paths(serde_info),
        serde_parameters=map_serde_parameters(serde_info.get("Parameters")),
        classification=get_classification(parameters),
    )

    return MappedEntity(
        metadata=metadata,
        columns=map_columns(storage.get("Columns")),
        partition_columns=map_columns(partition_keys),
    )
