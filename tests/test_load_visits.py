import pandas as pd
import pytest

from park_routes.load_visits import filter_unit_type, load_park_locations, load_visits


def test_load_visits_cleans_and_separates_totals(visits_csv):
    load = load_visits(str(visits_csv))

    assert load.dropped == {"missing_visitors": 1, "invalid_year": 1, "negative_visitors": 1}
    assert len(load.totals) == 9
    assert "year_raw" not in load.records.columns
    assert load.records["year"].dtype == "int64"
    assert load.records["visitors"].min() >= 0
    assert set(load.records["year"]) == {2014, 2015, 2016}
    # 9 parks x 3 years + monument + coordinate-less park
    assert len(load.records) == 29


def test_load_visits_parses_thousands_separators(tmp_path):
    path = tmp_path / "v.csv"
    pd.DataFrame(
        {
            "Region": ["PW"],
            "State": ["CA"],
            "Unit.Name": ["Yosemite National Park"],
            "YearRaw": ["2016"],
            "Visitors": ["5,028,868"],
        }
    ).to_csv(path, index=False)

    load = load_visits(str(path))
    assert load.records.loc[0, "visitors"] == 5028868
    assert "unit_type" not in load.records.columns


def test_load_visits_missing_columns(tmp_path):
    path = tmp_path / "v.csv"
    pd.DataFrame({"Region": ["PW"], "Visitors": [1]}).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Unit.Name"):
        load_visits(str(path))


def test_load_visits_logs_drops(visits_csv, caplog):
    with caplog.at_level("WARNING"):
        load_visits(str(visits_csv))
    assert "missing_visitors" in caplog.text
    assert "invalid_year" in caplog.text


def test_filter_unit_type(visits_csv):
    records = load_visits(str(visits_csv)).records

    parks = filter_unit_type(records, "National Park")
    assert "Statue of Liberty National Monument" not in set(parks["park_name"])
    assert filter_unit_type(records, None) is records


def test_load_park_locations(tmp_path):
    path = tmp_path / "parks.csv"
    pd.DataFrame(
        {
            "Park Name": ["Acadia National Park", "Acadia National Park", "Arches National Park", "Lost"],
            "Latitude": [44.35, 0.0, 38.68, None],
            "Longitude": [-68.21, 0.0, -109.57, None],
        }
    ).to_csv(path, index=False)

    locs = load_park_locations(str(path))
    assert list(locs.columns) == ["park_name", "latitude", "longitude"]
    assert list(locs["park_name"]) == ["Acadia National Park", "Arches National Park"]
    # first duplicate wins
    assert locs.loc[0, "latitude"] == 44.35


def test_load_park_locations_other_delimiter(tmp_path):
    path = tmp_path / "parks.tsv"
    path.write_text("Park Name\tLatitude\tLongitude\nArches National Park\t38.68\t-109.57\n")

    locs = load_park_locations(str(path), sep="\t")
    assert locs.loc[0, "longitude"] == -109.57


def test_load_park_locations_out_of_bounds(tmp_path):
    path = tmp_path / "parks.csv"
    pd.DataFrame({"Park Name": ["Bad"], "Latitude": [95.0], "Longitude": [0.0]}).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Latitude"):
        load_park_locations(str(path))
