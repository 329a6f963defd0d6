import pyarrow as pa
import pyarrow.compute as pc
import pytest

from dataidioms import datasets
from dataidioms.compute import MeanAggregation, MedianAggregation
from dataidioms.dataframe import Dataframe, GroupedDataframe, col


@pytest.fixture
def cars():
    return Dataframe(datasets.fuel_economy())


@pytest.fixture
def listings():
    return Dataframe(datasets.listings())


class TestConstruction:
    def test_from_table(self):
        df = Dataframe(pa.table({"a": [1, 2]}))
        assert df.to_arrow().to_pydict() == {"a": [1, 2]}

    def test_from_record_batch(self):
        df = Dataframe(pa.record_batch({"a": [1, 2]}))
        assert df.to_arrow().num_rows == 2

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            Dataframe({"a": [1, 2]})

    def test_from_pydict(self):
        df = Dataframe.from_pydict({"model": ["a4", "civic"], "hwy": [29, None]})
        assert df.to_arrow().column("hwy").null_count == 1

    def test_from_pylist(self):
        df = Dataframe.from_pylist([{"model": "a4", "hwy": 29}, {"model": "civic"}])
        assert df.to_arrow().to_pydict() == {"model": ["a4", "civic"], "hwy": [29, None]}

    def test_open_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError):
            Dataframe.open(str(tmp_path / "data.json"))

    def test_open_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Dataframe.open(str(tmp_path / "missing.csv"))

    def test_csv_roundtrip(self, cars, tmp_path):
        path = str(tmp_path / "cars.csv")
        cars.to_csv(path)
        loaded = Dataframe.open(path).to_arrow()
        assert loaded.num_rows == 16
        assert loaded.column("hwy").to_pylist() == cars.to_arrow().column("hwy").to_pylist()
        assert loaded.column("drv").to_pylist() == cars.to_arrow().column("drv").to_pylist()

    def test_parquet_roundtrip(self, cars, tmp_path):
        path = str(tmp_path / "cars.parquet")
        cars.to_parquet(path)
        loaded = Dataframe.open(path).to_arrow()
        assert loaded.to_pydict() == cars.to_arrow().to_pydict()
        assert loaded.schema.field("year").type == pa.int64()

    def test_open_header_only_csv(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("model,hwy\n")
        df = Dataframe.open(str(path))
        table = df.to_arrow()
        assert table.num_rows == 0
        assert table.column_names == ["model", "hwy"]
        assert df.head(5).to_arrow().column_names == ["model", "hwy"]

    def test_open_empty_parquet(self, cars, tmp_path):
        path = str(tmp_path / "empty.parquet")
        Dataframe(datasets.fuel_economy().slice(0, 0)).to_parquet(path)
        df = Dataframe.open(path).filter(col("hwy") > 30)
        assert df.to_arrow().num_rows == 0
        summary = df.group_by("drv").summarize(n=("n", None)).to_arrow()
        assert summary.column_names == ["drv", "n"]
        assert summary.num_rows == 0


class TestManipulation:
    def test_filter_select(self, cars):
        df = cars.filter(col("manufacturer") == "honda").select("model", "year", "hwy")
        assert df.to_arrow().to_pydict() == {
            "model": ["civic", "civic"],
            "year": [1999, 2008],
            "hwy": [32, 34],
        }

    def test_operations_are_lazy(self, cars):
        df = cars.filter(col("missing_column") > 1)
        # Nothing is computed until the data is requested.
        assert "FilterNode" in df.explain()
        with pytest.raises(KeyError):
            df.to_arrow()

    def test_mutate(self, cars):
        df = (
            cars.filter(col("manufacturer") == "honda")
            .mutate(avg_mpg=(col("cty") + col("hwy")) / 2, source="epa")
            .select("avg_mpg", "source")
        )
        assert df.to_arrow().to_pydict() == {"avg_mpg": [28.0, 30.0], "source": ["epa", "epa"]}

    def test_mutate_replaces_column(self, cars):
        df = cars.mutate(hwy=col("hwy") * 2)
        table = df.to_arrow()
        assert table.column_names == datasets.fuel_economy().column_names
        assert table.column("hwy")[0].as_py() == 58

    def test_mutate_across(self, cars):
        table = cars.mutate_across(["cty", "hwy"], pc.negate, "{column}_neg").to_arrow()
        assert table.column_names[-2:] == ["cty_neg", "hwy_neg"]
        assert table.column("cty_neg")[0].as_py() == -18
        # Missing values stay missing.
        assert table.column("hwy_neg").null_count == 2

    def test_mutate_across_in_place(self, cars):
        table = cars.mutate_across(["cty"], pc.negate).to_arrow()
        assert table.column_names == datasets.fuel_economy().column_names
        assert table.column("cty")[0].as_py() == -18

    def test_apply(self, listings):
        table = listings.apply("room_type", str.upper, into="room").to_arrow()
        assert table.column("room")[0].as_py() == "ENTIRE HOME/APT"
        assert table.column("room_type")[0].as_py() == "Entire home/apt"

    def test_row_aggregate(self):
        df = Dataframe(datasets.sports_finance())
        table = df.row_aggregate(
            "total_revenue", "sum", ["revenue_men", "revenue_women"], skip_nulls=True
        ).to_arrow()
        assert table.column("total_revenue").to_pylist()[:4] == [1650, 5400, 430, 210]

    def test_row_aggregate_propagates_missing(self):
        df = Dataframe(datasets.sports_finance())
        table = df.row_aggregate("total_revenue", "sum", ["revenue_men", "revenue_women"]).to_arrow()
        assert table.column("total_revenue").to_pylist()[:4] == [1650, None, 430, None]

    def test_rename(self, cars):
        assert "highway" in cars.rename(hwy="highway").to_arrow().column_names
        assert "city" in cars.rename({"cty": "city"}).to_arrow().column_names

    def test_arrange_descending(self, cars):
        df = cars.arrange("hwy", descending=True).head(3)
        assert df.to_arrow().column("model").to_pylist() == ["corolla", "civic", "civic"]

    def test_arrange_missing_last(self, cars):
        models = cars.arrange("hwy").to_arrow().column("model").to_pylist()
        assert models[0] == "ram 1500 pickup 4wd"
        assert models[-2:] == ["explorer 4wd", "camry"]

    def test_arrange_multiple_keys(self, cars):
        df = cars.arrange("drv", "hwy", descending=[False, True]).select("drv", "hwy").head(2)
        assert df.to_arrow().to_pydict() == {"drv": ["4", "4"], "hwy": [28, 24]}

    def test_slice(self, cars):
        df = cars.slice(2, 3)
        assert df.to_arrow().column("model").to_pylist() == ["c1500 suburban 2wd", "corvette", "caravan 2wd"]

    def test_distinct(self, cars):
        assert cars.distinct("drv").to_arrow().to_pydict() == {"drv": ["f", "4", "r"]}
        assert cars.distinct("year", "cyl").to_arrow().num_rows == 6


class TestMissingValues:
    def test_drop_nulls(self, cars):
        assert cars.drop_nulls("hwy").to_arrow().num_rows == 14
        assert cars.drop_nulls().to_arrow().num_rows == 14

    def test_fill_nulls(self, cars):
        table = cars.fill_nulls(hwy=0).to_arrow()
        assert table.column("hwy").null_count == 0
        assert table.column("hwy")[7].as_py() == 0

    def test_impute_mean(self, listings):
        table = listings.impute("price").to_arrow()
        assert table.schema.field("price").type == pa.float64()
        assert table.column("price")[11].as_py() == pytest.approx(1135 / 11)

    def test_impute_median(self, listings):
        table = listings.impute("price", stat="median").to_arrow()
        assert table.schema.field("price").type == pa.int64()
        assert table.column("price")[11].as_py() == 95

    def test_impute_nothing_to_fill_with(self):
        df = Dataframe.from_pydict({"price": pa.array([None, None], pa.int64())})
        assert df.impute("price").to_arrow().column("price").null_count == 2


class TestGrouping:
    def test_group_by_summarize(self, cars):
        df = cars.group_by("drv").summarize(mean_hwy=("mean", "hwy"), cars=("n", None))
        result = df.to_arrow()
        assert result.column("drv").to_pylist() == ["f", "4", "r"]
        assert result.column("cars").to_pylist() == [9, 4, 3]
        mean_hwy = result.column("mean_hwy").to_pylist()
        assert mean_hwy[0] == pytest.approx(31.0)
        assert mean_hwy[1] == pytest.approx(67 / 3)
        assert mean_hwy[2] == pytest.approx(24.0)

    def test_group_by_aggregation_objects(self, cars):
        df = cars.group_by("year").summarize(median_cty=MedianAggregation("cty"))
        assert df.to_arrow().column("year").to_pylist() == [1999, 2008]

    def test_grouped_dataframe(self, cars):
        grouped = cars.group_by("drv", "year")
        assert isinstance(grouped, GroupedDataframe)
        assert grouped.count().to_arrow().num_rows == 6

    def test_summarize_whole_data(self, cars):
        result = cars.summarize(n=("n", None), mean_cty=MeanAggregation("cty")).to_arrow()
        assert result.num_rows == 1
        assert result.column("n")[0].as_py() == 16
        assert result.column("mean_cty")[0].as_py() == pytest.approx(309 / 16)

    def test_summarize_errors(self, cars):
        with pytest.raises(ValueError):
            cars.group_by("drv").summarize()
        with pytest.raises(ValueError):
            cars.group_by("drv").summarize(x=("mode", "hwy"))

    def test_count(self, cars):
        assert cars.count("drv", sort=True).to_arrow().to_pydict() == {"drv": ["f", "4", "r"], "n": [9, 4, 3]}
        assert cars.count().to_arrow().to_pydict() == {"n": [16]}

    def test_count_sorted(self, listings):
        counted = listings.count("neighbourhood", sort=True, name="listings").to_arrow()
        assert counted.to_pydict() == {
            "neighbourhood": ["Centre", "Riverside", "Old Town", "Harbour"],
            "listings": [4, 3, 3, 2],
        }


class TestCombining:
    def test_join(self, listings):
        zones = Dataframe.from_pydict({"area": ["Centre", "Harbour"], "zone": ["A", "C"]})
        joined = listings.join(zones, on="neighbourhood", right_on="area", how="left").to_arrow()
        assert joined.num_rows == 12
        assert joined.column("zone").to_pylist()[:4] == ["A", "A", "A", None]

    def test_pivot_longer_wider(self):
        df = Dataframe(datasets.sports_finance()).select(
            "year", "institution", "sport", "revenue_men", "revenue_women"
        )
        longer = df.pivot_longer(["revenue_men", "revenue_women"], names_to="gender", values_to="revenue")
        assert longer.to_arrow().num_rows == 18
        assert longer.to_arrow().column_names == ["year", "institution", "sport", "gender", "revenue"]

        wider = longer.pivot_wider(["year", "institution", "sport"], "gender", "revenue").to_arrow()
        assert wider.to_pydict() == df.to_arrow().to_pydict()


class TestOutput:
    def test_collect(self, cars):
        collected = cars.filter(col("year") == 2008).collect()
        assert collected.explain().startswith("TableDataSource(")
        assert collected.to_arrow().num_rows == 9

    def test_str(self, cars):
        text = str(cars.select("model", "hwy").head(2))
        assert text.splitlines() == [
            "model      | hwy",
            "---------- | ---",
            "a4         | 29",
            "a4 quattro | 28",
        ]

    def test_describe(self, cars):
        described = cars.describe()
        assert described.column("column").to_pylist() == ["year", "displ", "cyl", "cty", "hwy"]

    def test_glimpse(self, cars):
        assert cars.glimpse().startswith("Rows: 16\nColumns: 9")

    def test_explain(self, cars):
        plan = cars.filter(col("hwy") > 30).select("model").explain()
        assert plan.startswith("ProjectNode(select=['model']")
        assert "FilterNode(filter=pyarrow.compute.greater(ColumnRef(hwy),30)" in plan

    def test_to_pandas(self, cars):
        pytest.importorskip("pandas")
        frame = cars.to_pandas()
        assert list(frame.columns) == datasets.fuel_economy().column_names
        assert len(frame) == 16
