from decimal import Decimal

import pyarrow as pa
import pytest

from dataidioms import datasets, explore
from dataidioms.compute import ColumnNotFoundError


@pytest.fixture
def cars():
    return datasets.fuel_economy()


@pytest.fixture
def coffee():
    return datasets.coffee_ratings()


def test_is_numeric():
    assert explore.is_numeric(pa.int32())
    assert explore.is_numeric(pa.float64())
    assert not explore.is_numeric(pa.string())
    assert not explore.is_numeric(pa.bool_())


def test_glimpse(cars):
    text = explore.glimpse(cars, width=50)
    lines = text.splitlines()
    assert lines[:2] == ["Rows: 16", "Columns: 9"]
    assert len(lines) == 11
    assert lines[2].startswith("$ manufacturer <string> audi, audi, chevrolet")
    assert all(len(line) <= 50 for line in lines)
    assert lines[2].endswith("...")


def test_glimpse_shows_missing(cars):
    line = explore.glimpse(cars.slice(7, 2), width=200).splitlines()[-2]
    assert line.startswith("$ hwy")
    assert line.endswith("null, 32")


def test_head(cars):
    assert explore.head(cars, 3).num_rows == 3
    assert explore.head(cars).num_rows == 5


@pytest.mark.parametrize(
    "stat, expected",
    [
        ("n", 10),
        ("min", 7.58),
        ("max", 8.75),
        ("median", pytest.approx(7.92)),
        ("n_distinct", 8),
    ],
)
def test_summary_stat(coffee, stat, expected):
    assert explore.summary_stat(coffee, "aroma", stat) == expected


def test_summary_stat_missing_values(coffee):
    assert explore.summary_stat(coffee, "flavor", "n") == 9
    assert explore.summary_stat(coffee, "flavor", "mean") == pytest.approx(73.16 / 9)
    assert explore.summary_stat(coffee, "flavor", "mean", skip_nulls=False) is None


def test_summary_stat_errors(coffee):
    with pytest.raises(ValueError):
        explore.summary_stat(coffee, "aroma", "mode")
    with pytest.raises(ColumnNotFoundError):
        explore.summary_stat(coffee, "acidity", "mean")


def test_describe(cars):
    described = explore.describe(cars, ["hwy"])
    assert described.schema == explore.DESCRIBE_SCHEMA
    row = described.to_pylist()[0]
    assert row["column"] == "hwy"
    assert row["count"] == 14
    assert row["missing"] == 2
    assert row["min"] == 15.0
    assert row["max"] == 37.0
    assert row["q1"] <= row["median"] <= row["q3"]


def test_describe_defaults_to_numeric_columns(coffee):
    described = explore.describe(coffee)
    assert described.column("column").to_pylist() == [
        "aroma",
        "flavor",
        "total_cup_points",
        "altitude_mean_meters",
    ]


def test_describe_quartiles():
    data = pa.table({"v": [1, 2, 3, 4, 5]})
    row = explore.describe(data).to_pylist()[0]
    assert (row["q1"], row["median"], row["q3"]) == (2.0, 3.0, 4.0)
    assert row["mean"] == 3.0
    assert row["std"] == pytest.approx(1.5811388)


def test_describe_non_numeric(cars):
    with pytest.raises(TypeError):
        explore.describe(cars, ["model"])


def test_missing_counts(coffee):
    counts = explore.missing_counts(coffee)
    result = dict(zip(counts.column("column").to_pylist(), counts.column("percent").to_pylist()))
    assert result["variety"] == 30.0
    assert result["flavor"] == 10.0
    assert result["altitude_mean_meters"] == 20.0
    assert result["species"] == 0.0


def test_missing_counts_empty():
    counts = explore.missing_counts(pa.table({"a": pa.array([], pa.int64())}))
    assert counts.to_pydict() == {"column": ["a"], "missing": [0], "percent": [0.0]}


def test_value_counts(cars):
    counts = explore.value_counts(cars, "drv")
    assert counts.to_pydict() == {"drv": ["f", "4", "r"], "count": [9, 4, 3]}


def test_value_counts_keep_missing(coffee):
    counts = explore.value_counts(coffee, "variety", dropna=False)
    assert counts.column("variety").to_pylist()[:3] == [None, "Bourbon", "Other"]
    assert counts.column("count").to_pylist()[:3] == [3, 2, 1]
    assert sum(counts.column("count").to_pylist()) == 10


def test_value_counts_drop_missing(coffee):
    counts = explore.value_counts(coffee, "variety")
    assert None not in counts.column("variety").to_pylist()
    assert sum(counts.column("count").to_pylist()) == 7


def test_proportions():
    shares = explore.proportions(datasets.listings(), "room_type")
    assert shares.column("room_type").to_pylist() == ["Entire home/apt", "Private room", "Shared room"]
    assert shares.column("proportion").to_pylist() == pytest.approx([7 / 12, 4 / 12, 1 / 12])


def test_crosstab(cars):
    table = explore.crosstab(cars, "year", "drv")
    assert table.to_pydict() == {"year": [1999, 2008], "f": [3, 6], "4": [3, 1], "r": [1, 2]}


def test_crosstab_fills_zero():
    data = pa.table(
        {
            "drv": ["f", "4", "f", "4", None],
            "class": ["compact", "suv", "compact", "pickup", "suv"],
        }
    )
    table = explore.crosstab(data, "class", "drv")
    assert table.to_pydict() == {"class": ["compact", "suv", "pickup"], "f": [2, 0, 0], "4": [0, 1, 1]}


def test_distinct_values(cars):
    assert explore.distinct_values(cars, "drv") == ["f", "4", "r"]
    with pytest.raises(ColumnNotFoundError):
        explore.distinct_values(cars, "brand")


@pytest.mark.parametrize(
    "values, expected",
    [
        ([None, "a"], [None, "a"]),
        (["a", None, "b", "b", None, "a"], ["a", None, "b"]),
        (["a", "b", None], ["a", "b", None]),
    ],
)
def test_value_counts_missing_ties_keep_first_appearance(values, expected):
    counts = explore.value_counts(pa.table({"v": values}), "v", dropna=False)
    assert counts.column("v").to_pylist() == expected


def test_decimal_columns():
    data = pa.table({"price": pa.array([Decimal("1.50"), Decimal("2.50"), None], pa.decimal128(5, 2))})
    assert explore.summary_stat(data, "price", "mean") == pytest.approx(2.0)
    assert explore.summary_stat(data, "price", "sum") == pytest.approx(4.0)
    row = explore.describe(data).to_pylist()[0]
    assert (row["count"], row["missing"], row["median"]) == (2, 1, 2.0)
