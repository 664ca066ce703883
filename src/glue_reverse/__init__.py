"""Glue reverse engineering - normalize AWS Glue Data Catalog metadata into schema documents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("glue-reverse")
except PackageNotFoundError:
    # Source checkout without an installed distribution
    __version__ = "0.0.0+unknown"
