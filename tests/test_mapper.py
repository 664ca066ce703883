"""Unit tests for normalizing Glue GetTable responses."""

import pytest

from glue_reverse.mapper import (
    get_classification,
    get_num_buckets,
    map_serde_parameters,
    map_serde_paths,
    map_sort_columns,
    map_table_data,
    map_table_properties,
)

from fakes import make_table


class TestClassification:
    """Tests for classification lookup."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("avro", "Avro"),
            ("csv", "CSV"),
            ("json", "JSON"),
            ("xml", "XML"),
            ("parquet", "Parquet"),
            ("orc", "ORC"),
            ("PARQUET", "Parquet"),
            ("Orc", "ORC"),
        ],
    )
    def test_known_values_case_insensitive(self, raw, expected):
        assert get_classification({"classification": raw}) == expected

    @pytest.mark.parametrize("parameters", [None, {}, {"classification": "delta"}, {"classification": ""}])
    def test_unknown_or_absent_is_empty(self, parameters):
        assert get_classification(parameters) == ""

    @pytest.mark.parametrize("raw", ["avro", "csv", "json", "xml", "parquet", "orc", "iceberg"])
    def test_mapping_is_terminal(self, raw):
        """Re-mapping a mapped value returns it unchanged."""
        mapped = get_classification({"classification": raw})
        if mapped:
            assert get_classification({"classification": mapped}) == mapped


def test_table_properties_exclude_only_classification():
    properties = map_table_properties({"classification": "PARQUET", "owner": "x"})

    assert properties == [{"tablePropKey": "owner", "tablePropValue": "x"}]
    assert get_classification({"classification": "PARQUET", "owner": "x"}) == "Parquet"


def test_table_properties_keep_empty_values():
    properties = map_table_properties({"comment": "", "EXTERNAL": "TRUE"})

    assert {"tablePropKey": "comment", "tablePropValue": ""} in properties
    assert len(properties) == 2


@pytest.mark.parametrize("value", [None, 0, -1, -20])
def test_bucket_count_below_one_is_omitted(value):
    assert get_num_buckets(value) is None


def test_bucket_count_preserved():
    assert get_num_buckets(4) == 4


def test_sort_columns_direction():
    keys = map_sort_columns(
        [{"Column": "ts", "SortOrder": 1}, {"Column": "id", "SortOrder": 0}]
    )

    assert [key.to_dict() for key in keys] == [
        {"name": "ts", "type": "ascending"},
        {"name": "id", "type": "descending"},
    ]


def test_serde_paths_and_parameters():
    serde_info = {
        "SerializationLibrary": "org.openx.data.jsonserde.JsonSerDe",
        "Parameters": {"paths": "id,name,address", "ignore.malformed.json": "true"},
    }

    assert map_serde_paths(serde_info) == ["id", "name", "address"]
    assert map_serde_parameters(serde_info["Parameters"]) == [
        {"serDeKey": "ignore.malformed.json", "serDeValue": "true"}
    ]


def test_serde_paths_absent():
    assert map_serde_paths({}) == []
    assert map_serde_paths(None) == []
    assert map_serde_parameters(None) == []


class TestMapTableData:
    """Tests for full GetTable normalization."""

    def test_maps_all_fields(self):
        table = make_table(
            "orders",
            columns=[{"Name": "id", "Type": "bigint"}],
            partition_keys=[{"Name": "dt", "Type": "date"}],
            parameters={"classification": "orc", "owner": "data-eng"},
            num_buckets=4,
            BucketColumns=["id"],
            SortColumns=[{"Column": "id", "SortOrder": 1}],
        )
        table["Description"] = "All orders"

        mapped = map_table_data({"Table": table})
        metadata = mapped.metadata.to_dict()

        assert mapped.metadata.name == "orders"
        assert metadata["description"] == "All orders"
        assert metadata["externalTable"] is True
        assert metadata["tableProperties"] == [
            {"tablePropKey": "owner", "tablePropValue": "data-eng"}
        ]
        assert metadata["compositePartitionKey"] == ["dt"]
        assert metadata["compositeClusteringKey"] == ["id"]
        assert metadata["sortedByKey"] == [{"name": "id", "type": "ascending"}]
        assert metadata["numBuckets"] == 4
        assert metadata["location"] == "s3://warehouse/orders/"
        assert metadata["serDeLibrary"].endswith("ParquetHiveSerDe")
        assert metadata["serDeParameters"] == [
            {"serDeKey": "serialization.format", "serDeValue": "1"}
        ]
        assert metadata["classification"] == "ORC"
        assert [c.name for c in mapped.all_columns] == ["id", "dt"]

    def test_missing_optional_fields_use_defaults(self):
        """A bare table record maps without errors and with empty defaults."""
        mapped = map_table_data({"Table": {"Name": "bare", "StorageDescriptor": {}}})
        metadata = mapped.metadata.to_dict()

        assert metadata["tableProperties"] == []
        assert metadata["compositePartitionKey"] == []
        assert metadata["compositeClusteringKey"] == []
        assert metadata["sortedByKey"] == []
        assert metadata["parameterPaths"] == []
        assert metadata["serDeParameters"] == []
        assert metadata["classification"] == ""
        assert metadata["externalTable"] is False
        assert "numBuckets" not in metadata
        assert mapped.all_columns == []

    def test_missing_storage_descriptor(self):
        mapped = map_table_data({"Table": {"Name": "view", "TableType": "VIRTUAL_VIEW"}})

        assert mapped.metadata.name == "view"
        assert mapped.metadata.serde_library is None
        assert mapped.columns == []

    def test_zero_buckets_omitted(self):
        mapped = map_table_data({"Table": make_table("t", num_buckets=0)})

        assert "numBuckets" not in mapped.metadata.to_dict()

    def test_partition_keys_appended_after_columns(self):
        table = make_table(
            "events",
            columns=[{"Name": "a", "Type": "int"}, {"Name": "b", "Type": "string"}],
            partition_keys=[{"Name": "year", "Type": "int"}, {"Name": "month", "Type": "int"}],
        )

        mapped = map_table_data({"Table": table})

        assert [(c.name, c.type) for c in mapped.all_columns] == [
            ("a", "int"),
            ("b", "string"),
            ("year", "int"),
            ("month", "int"),
        ]
