import pytest

OFFSET = "+10:00"
DAYS = ("2025-01-15T00:00:00", "2025-01-16T00:00:00")

# (region, renewable) → energy MWh for each day
ENERGY = {
    ("NSW1", False): (152436.55, 133951.58),
    ("NSW1", True): (56561.254, 49907.071),
    ("QLD1", False): (143924.26, 147318.35),
    ("QLD1", True): (35555.221, 36847.945),
    ("SA1", False): (5248.0695, 4837.0315),
    ("SA1", True): (24352.991, 19040.688),
    ("TAS1", False): (2.1677, 0),
    ("TAS1", True): (16603.804, 14673.167),
    ("VIC1", False): (73474.457, 78333.169),
    ("VIC1", True): (63888.87, 43028.263),
}


def _energy_results():
    results = []
    for (region, renewable), values in ENERGY.items():
        results.append(
            {
                "name": f"{region}_{'renewable' if renewable else 'carbon'}",
                "date_start": DAYS[0],
                "date_end": DAYS[1],
                "columns": {"network_region": region, "renewable": renewable},
                "data": [[day, v] for day, v in zip(DAYS, values)],
            }
        )
    return results


@pytest.fixture
def energy_series():
    """Daily NEM energy by region and renewable flag (10 blocks × 2 days)."""
    return {
        "network_code": "NEM",
        "metric": "energy",
        "unit": "MWh",
        "interval": "1d",
        "start": DAYS[0],
        "end": DAYS[1],
        "groupings": ["network_region", "renewable"],
        "results": _energy_results(),
        "network_timezone_offset": OFFSET,
    }


FIVE_MIN = (
    "2025-02-01T10:00:00",
    "2025-02-01T10:05:00",
    "2025-02-01T10:10:00",
)


def _market_series(metric, unit, values_by_region):
    return {
        "network_code": "NEM",
        "metric": metric,
        "unit": unit,
        "interval": "5m",
        "groupings": ["network_region"],
        "results": [
            {
                "name": f"{metric}_{region}",
                "columns": {"network_region": region},
                "data": [[ts, v] for ts, v in zip(FIVE_MIN, values)],
            }
            for region, values in values_by_region.items()
        ],
        "network_timezone_offset": OFFSET,
    }


@pytest.fixture
def price_series():
    return _market_series(
        "price",
        "$/MWh",
        {"NSW1": [85.5, None, 120.0], "QLD1": [70.0, 72.5, 300.25]},
    )


@pytest.fixture
def demand_series():
    # QLD1 demand misses the last interval
    series = _market_series(
        "demand",
        "MW",
        {"NSW1": [7100.0, 7200.0, 7350.0], "QLD1": [5900.0, 6000.0, 0.0]},
    )
    series["results"][1]["data"] = series["results"][1]["data"][:2]
    return series
