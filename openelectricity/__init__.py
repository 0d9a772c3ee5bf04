import logging

from . import (
    canon,
    exceptions,
    types,
    config,
    utils,
    stats,
    network_time,
    datatable,
    ingest,
)
from .datatable import DataTable
from .ingest import from_timeseries

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "canon",
    "exceptions",
    "types",
    "config",
    "utils",
    "stats",
    "network_time",
    "datatable",
    "ingest",
    "DataTable",
    "from_timeseries",
]
