import pyarrow as pa
import pytest

from dataidioms.compute import ColumnNotFoundError, JoinNode, TableDataSource


@pytest.fixture
def listings():
    return TableDataSource(
        pa.table(
            {
                "listing_id": [1, 2, 3, 4],
                "neighbourhood": ["Nord", "Sud", "Ovest", "Nord"],
                "price": [80, 120, 60, 95],
            }
        )
    )


@pytest.fixture
def areas():
    return TableDataSource(
        pa.table(
            {
                "neighbourhood": ["Sud", "Nord", "Est"],
                "zone": ["B", "A", "C"],
            }
        )
    )


def test_inner_join(listings, areas):
    result = JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas).collect_table()
    assert result.to_pydict() == {
        "listing_id": [1, 2, 4],
        "neighbourhood": ["Nord", "Sud", "Nord"],
        "price": [80, 120, 95],
        "zone": ["A", "B", "A"],
    }


def test_left_join(listings, areas):
    result = JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="left").collect_table()
    assert result.column("listing_id").to_pylist() == [1, 2, 3, 4]
    assert result.column("zone").to_pylist() == ["A", "B", None, "A"]


def test_right_join(listings, areas):
    result = JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="right").collect_table()
    assert result.num_rows == 4
    # The unmatched right row comes last, after the rows ordered as the left table.
    assert result.column("listing_id").to_pylist() == [1, 2, 4, None]
    assert result.column("neighbourhood").to_pylist() == ["Nord", "Sud", "Nord", "Est"]
    assert result.column("zone").to_pylist() == ["A", "B", "A", "C"]


def test_outer_join(listings, areas):
    result = JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="outer").collect_table()
    assert result.column("listing_id").to_pylist() == [1, 2, 3, 4, None]
    assert result.column("neighbourhood").to_pylist() == ["Nord", "Sud", "Ovest", "Nord", "Est"]


def test_join_different_key_names(listings):
    areas = TableDataSource(pa.table({"area": ["Ovest"], "zone": ["D"]}))
    result = JoinNode(["neighbourhood"], ["area"], listings, areas).collect_table()
    assert result.column("listing_id").to_pylist() == [3]
    assert result.column("zone").to_pylist() == ["D"]


def test_join_suffixes_clashing_columns(listings):
    other = TableDataSource(pa.table({"listing_id": [2, 3], "price": [130, 65]}))
    result = JoinNode(["listing_id"], ["listing_id"], listings, other).collect_table()
    assert result.column("price").to_pylist() == [120, 60]
    assert result.column("price_right").to_pylist() == [130, 65]


def test_join_no_matches(listings):
    other = TableDataSource(pa.table({"neighbourhood": ["Centro"], "zone": ["Z"]}))
    result = JoinNode(["neighbourhood"], ["neighbourhood"], listings, other).collect_table()
    assert result.num_rows == 0
    assert "zone" in result.column_names


def test_join_invalid_arguments(listings, areas):
    with pytest.raises(ValueError):
        JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="cross")
    with pytest.raises(ValueError):
        JoinNode(["neighbourhood", "price"], ["neighbourhood"], listings, areas)


def test_join_unknown_key(listings, areas):
    with pytest.raises(ColumnNotFoundError):
        JoinNode(["district"], ["neighbourhood"], listings, areas).collect_table()


def test_join_str(listings, areas):
    node = JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="left")
    assert str(node).startswith("JoinNode(left, left_keys=['neighbourhood'], right_keys=['neighbourhood'], left=")
