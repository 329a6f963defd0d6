import logging

import pytest

from dataidioms import datasets, io
from dataidioms.commands.explore import main, parse_summary


def run_command(argv, capsys):
    main(argv)
    return capsys.readouterr().out


def test_first_rows_by_default(capsys):
    out = run_command(["--dataset", "listings", "--max-rows", "3"], capsys)
    lines = out.strip().splitlines()
    assert lines[0] == "First rows"
    assert lines[1].startswith("listing_id | neighbourhood")
    assert len(lines) == 3 + 3


def test_glimpse_describe_missing(capsys):
    out = run_command(["--dataset", "coffee_ratings", "--glimpse", "--describe", "--missing"], capsys)
    assert out.startswith("Rows: 10\nColumns: 7\n")
    assert "Summary statistics" in out
    assert "Missing values" in out
    assert "variety              | 3       | 30.00" in out


def test_count(capsys):
    out = run_command(["--dataset", "fuel_economy", "--count", "drv"], capsys)
    lines = out.strip().splitlines()
    assert lines[0] == "Counts of drv"
    assert lines[1] == "drv | count | proportion"
    assert lines[3] == "f   | 9     | 0.56"


def test_count_keep_missing(capsys):
    out = run_command(["--dataset", "coffee_ratings", "--count", "variety", "--keep-missing"], capsys)
    assert out.strip().splitlines()[3].startswith("null ")


def test_group_by_summarize(capsys):
    out = run_command(
        [
            "--dataset", "fuel_economy",
            "--group-by", "drv",
            "--summarize", "cars=n",
            "--summarize", "mean_hwy=mean:hwy",
        ],
        capsys,
    )
    lines = out.strip().splitlines()
    assert lines[0] == "Summary"
    assert lines[1] == "drv | cars | mean_hwy"
    assert lines[3:] == ["f   | 9    | 31.00", "4   | 4    | 22.33", "r   | 3    | 24.00"]


def test_summarize_to_file(tmp_path, capsys):
    path = str(tmp_path / "summary.parquet")
    out = run_command(
        ["--dataset", "listings", "--group-by", "room_type", "--summarize", "median_price=median:price",
         "--output", path],
        capsys,
    )
    assert f"Saved 3 rows to {path}" in out
    saved = io.read_table(path)
    assert saved.column_names == ["room_type", "median_price"]


def test_explore_csv_file(tmp_path, capsys):
    path = str(tmp_path / "cars.csv")
    io.write_csv(datasets.fuel_economy(), path)
    out = run_command([path, "--describe"], capsys)
    assert "hwy    | 14    | 2" in out


def test_histogram(tmp_path, capsys):
    path = tmp_path / "hwy.png"
    out = run_command(["--dataset", "fuel_economy", "--hist", "hwy", "--bins", "5", "--plot-output", str(path)], capsys)
    assert f"Saved histogram of hwy to {path}" in out
    assert path.stat().st_size > 0


def test_log_level(capsys, caplog):
    caplog.set_level(logging.INFO)
    run_command(["--dataset", "fuel_economy", "--log-level", "INFO"], capsys)
    assert "Loaded 16 rows and 9 columns" in caplog.text
    assert {r.name for r in caplog.records} >= {"dataidioms.commands.explore"}


@pytest.mark.parametrize(
    "argv, message",
    [
        (["--dataset", "fuel_economy", "--count", "brand"], "Column 'brand' not found"),
        (["--dataset", "fuel_economy", "--group-by", "drv"], "--group-by requires at least one --summarize"),
        (["--dataset", "fuel_economy", "--summarize", "x=mode:hwy"], "Unknown statistic 'mode'"),
        (["--dataset", "fuel_economy", "--hist", "model"], "can't be plotted as a number"),
        (["missing.csv"], "No such data file"),
        (["data.json"], "Unsupported file extension"),
    ],
)
def test_errors(argv, message, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2
    assert message in capsys.readouterr().err


def test_source_required(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--describe"])
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("mean_hwy=mean:hwy", ("mean_hwy", "mean", "hwy")),
        ("cars=n", ("cars", "n", None)),
        ("non_missing=n:hwy", ("non_missing", "n", "hwy")),
    ],
)
def test_parse_summary(spec, expected):
    assert parse_summary(spec) == expected


@pytest.mark.parametrize("spec", ["mean:hwy", "=mean:hwy", "x=mean", "x=mode:hwy"])
def test_parse_summary_invalid(spec):
    with pytest.raises(ValueError):
        parse_summary(spec)


def test_explore_header_only_file(tmp_path, capsys):
    path = tmp_path / "empty.csv"
    path.write_text("model,hwy\n")
    lines = run_command([str(path)], capsys).strip().splitlines()
    assert lines == ["First rows", "model | hwy", "----- | ---"]
