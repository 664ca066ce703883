"""Pytest configuration and shared fixtures."""

import logging

import pytest

from fakes import FakeGlueClient, make_table


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and levels installed by setup_logging."""
    yield
    logger = logging.getLogger("glue_reverse")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def connection_params():
    """Connection parameters using the original camelCase keys."""
    return {
        "accessKeyId": "AKIAEXAMPLE",
        "secretAccessKey": "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY",
        "region": "eu-west-1",
    }


@pytest.fixture
def sales_client():
    """Catalog with database 'sales' holding the 'orders' table."""
    orders = make_table(
        "orders",
        columns=[
            {"Name": "id", "Type": "bigint"},
            {"Name": "amount", "Type": "decimal(10, 2)"},
        ],
        partition_keys=[{"Name": "region", "Type": "string"}],
        parameters={"classification": "parquet"},
        num_buckets=8,
        BucketColumns=["id"],
    )
    return FakeGlueClient(
        databases=[{"Name": "sales", "Description": "Sales data mart"}],
        tables={"sales": [orders]},
    )
