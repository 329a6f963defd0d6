import pyarrow as pa
import pytest

from dataidioms import datasets, io


@pytest.fixture
def listings():
    return datasets.listings()


def test_write_read_csv(listings, tmp_path):
    path = str(tmp_path / "listings.csv")
    io.write_csv(listings, path)
    loaded = io.read_table(path)
    assert loaded.num_rows == 12
    assert loaded.column_names == listings.column_names
    # Missing values are written as empty cells and read back as missing.
    assert loaded.column("reviews_per_month").null_count == 3
    assert loaded.column("price").to_pylist() == listings.column("price").to_pylist()


def test_write_csv_header(listings, tmp_path):
    path = tmp_path / "listings.csv"
    io.write_csv(listings.select(["listing_id", "price"]).slice(0, 2), str(path))
    assert path.read_text().splitlines() == ['"listing_id","price"', "1,120", "2,65"]


def test_write_read_parquet(listings, tmp_path):
    path = str(tmp_path / "listings.parquet")
    io.write_parquet(listings, path)
    loaded = io.read_table(path)
    assert loaded.schema.equals(listings.schema)
    assert loaded.to_pydict() == listings.to_pydict()


def test_write_record_batch(tmp_path):
    path = str(tmp_path / "batch.parquet")
    io.write_parquet(pa.record_batch({"a": [1, 2, 3]}), path)
    assert io.read_table(path).column("a").to_pylist() == [1, 2, 3]


def test_write_missing_directory(listings, tmp_path):
    with pytest.raises(FileNotFoundError):
        io.write_csv(listings, str(tmp_path / "missing" / "listings.csv"))
    with pytest.raises(FileNotFoundError):
        io.write_parquet(listings, str(tmp_path / "missing" / "listings.parquet"))


def test_read_errors(tmp_path):
    with pytest.raises(ValueError):
        io.read_table(str(tmp_path / "data.xlsx"))
    with pytest.raises(FileNotFoundError):
        io.read_table(str(tmp_path / "data.csv"))
