"""Tests for materialising API time series into a DataTable."""

import logging

import pandas as pd
import pytest

import openelectricity as oe
from openelectricity import exceptions
from openelectricity.config import TableConfig
from openelectricity.types import NetworkTimeSeries


def test_from_timeseries_single_dict(energy_series):
    table = oe.from_timeseries(energy_series)
    assert len(table) == 20  # 10 result blocks × 2 days
    assert table.groupings == ["network_region", "renewable"]
    assert table.metrics == {"energy": "MWh"}


def test_from_timeseries_accepts_models(energy_series):
    model = NetworkTimeSeries.model_validate(energy_series)
    assert oe.from_timeseries([model]) == oe.from_timeseries(energy_series)


def test_rows_are_sorted_with_stable_ties(energy_series):
    rows = oe.from_timeseries(energy_series).rows
    intervals = [r["interval"] for r in rows]
    assert intervals == sorted(intervals)
    first = rows[0]
    assert first["interval"] == pd.Timestamp("2025-01-15T00:00:00+10:00")
    assert first["network_region"] == "NSW1"
    assert first["renewable"] is False
    assert first["energy"] == 152436.55
    # second row on the same instant keeps insertion order
    assert (rows[1]["network_region"], rows[1]["renewable"]) == ("NSW1", True)


def test_row_field_order(energy_series):
    row = oe.from_timeseries(energy_series).rows[0]
    assert list(row) == ["interval", "network_region", "renewable", "energy"]


def test_multi_metric_merge(price_series, demand_series):
    table = oe.from_timeseries([price_series, demand_series])
    assert table.metrics == {"price": "$/MWh", "demand": "MW"}
    assert table.groupings == ["network_region"]
    # 2 regions × 3 intervals; price and demand share rows
    assert len(table) == 6
    for row in table:
        assert "price" in row and "demand" in row

    nsw = table.lookup("2025-02-01T10:05:00+10:00", network_region="NSW1")
    assert nsw is not None
    assert nsw["price"] is None
    assert nsw["demand"] == 7200.0


def test_missing_metric_value_is_explicit_none(price_series, demand_series):
    table = oe.from_timeseries([price_series, demand_series])
    qld_last = table.lookup(pd.Timestamp("2025-02-01T00:10:00Z"), network_region="QLD1")
    assert qld_last is not None
    assert qld_last["price"] == 300.25
    assert "demand" in qld_last and qld_last["demand"] is None


def test_no_cross_product_fill(price_series):
    price_series["results"][1]["data"] = price_series["results"][1]["data"][:1]
    table = oe.from_timeseries(price_series)
    assert len(table) == 4  # 3 NSW1 + 1 QLD1, no invented rows


def test_same_wall_time_in_different_offsets_stays_apart(price_series, demand_series):
    # demand sent with the same wall time in UTC+11 is one hour earlier
    demand_series["network_timezone_offset"] = "+11:00"
    table = oe.from_timeseries([price_series, demand_series])
    assert len(table) == 11


def test_same_instant_from_different_offsets_merges(price_series, demand_series):
    # 11:xx at UTC+11 is the same instant as 10:xx at UTC+10
    demand_series["network_timezone_offset"] = "+11:00"
    for result in demand_series["results"]:
        for point in result["data"]:
            point[0] = point[0].replace("T10:", "T11:")
    table = oe.from_timeseries([price_series, demand_series])
    assert len(table) == 6
    nsw = table.lookup("2025-02-01T10:10:00+10:00", network_region="NSW1")
    assert nsw["price"] == 120.0
    assert nsw["demand"] == 7350.0
    assert nsw["interval"] == pd.Timestamp("2025-02-01T00:10:00Z")


def test_large_integer_columns_do_not_merge(price_series):
    price_series["groupings"] = ["unit_id"]
    for i, result in enumerate(price_series["results"]):
        result["columns"] = {"unit_id": 2**53 + i}
    table = oe.from_timeseries(price_series)
    assert len(table) == 6
    assert sorted(table.unique("unit_id")) == [2**53, 2**53 + 1]


def test_duplicate_points_last_value_wins(price_series):
    data = price_series["results"][0]["data"]
    data.append([data[0][0], 99.0])
    table = oe.from_timeseries(price_series)
    row = table.lookup("2025-02-01T10:00:00+10:00", network_region="NSW1")
    assert row["price"] == 99.0
    assert len(table) == 6


def test_groupings_fall_back_to_result_columns(price_series):
    price_series["groupings"] = []
    assert oe.from_timeseries(price_series).groupings == ["network_region"]


def test_missing_offset_uses_network_then_config(price_series):
    price_series["network_timezone_offset"] = None
    price_series["network_code"] = "WEM"
    table = oe.from_timeseries(price_series)
    assert table.rows[0]["interval"] == pd.Timestamp("2025-02-01T02:00:00Z")

    price_series["network_code"] = "ZZZ"
    table = oe.from_timeseries(price_series, config=TableConfig(default_network="WEM"))
    assert table.rows[0]["interval"] == pd.Timestamp("2025-02-01T02:00:00Z")


def test_mismatched_groupings_warn(energy_series, price_series, caplog):
    with caplog.at_level(logging.WARNING, logger="openelectricity.ingest"):
        oe.from_timeseries([energy_series, price_series])
    assert any("groupings" in rec.getMessage() for rec in caplog.records)


def test_invalid_payload_raises_ingest_error():
    with pytest.raises(exceptions.IngestError):
        oe.from_timeseries({"unit": "MWh", "results": []})


def test_malformed_timestamp_propagates(price_series):
    price_series["results"][0]["data"][0][0] = "31/31/2025 99:99"
    with pytest.raises(exceptions.TimestampError):
        oe.from_timeseries(price_series)


def test_empty_input_gives_empty_table():
    table = oe.from_timeseries([])
    assert len(table) == 0
    assert table.groupings == [] and table.metrics == {}


def test_input_series_not_mutated(energy_series):
    import copy

    before = copy.deepcopy(energy_series)
    oe.from_timeseries(energy_series)
    assert energy_series == before
