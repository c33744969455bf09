import pandas as pd
import pytest

# (park_name, state, region, lat, lon)
PARKS = [
    ("Yosemite National Park", "CA", "PW", 37.83, -119.50),
    ("Sequoia National Park", "CA", "PW", 36.43, -118.68),
    ("Joshua Tree National Park", "CA", "PW", 33.79, -115.90),
    ("Yellowstone National Park", "WY", "IM", 44.60, -110.50),
    ("Grand Teton National Park", "WY", "IM", 43.73, -110.80),
    ("Glacier National Park", "MT", "IM", 48.80, -114.00),
    ("Acadia National Park", "ME", "NE", 44.35, -68.21),
    ("Shenandoah National Park", "VA", "NE", 38.53, -78.35),
    ("Great Smoky Mountains National Park", "TN", "SE", 35.68, -83.53),
]



def visit_rows():
    rows = []
    for i, (name, state, region, _, _) in enumerate(PARKS):
        total = 0
        for year in (2014, 2015, 2016):
            visitors = (i + 1) * 1000 + year
            total += visitors
            rows.append([region, state, "NP", name, "National Park", str(year), str(visitors)])
        rows.append([region, state, "NP", name, "National Park", "Total", str(total)])

    # A monument that the unit-type filter removes
    rows.append(["NE", "NY", "STLI", "Statue of Liberty National Monument", "National Monument", "2016", "4000000"])
    # A park with visits but no coordinates
    rows.append(["PW", "CA", "NOWH", "Nowhere National Park", "National Park", "2016", "50"])
    # Rows that must be dropped
    rows.append(["PW", "CA", "YOSE", "Yosemite National Park", "National Park", "2013", ""])
    rows.append(["PW", "CA", "YOSE", "Yosemite National Park", "National Park", "unknown", "10"])
    rows.append(["PW", "CA", "YOSE", "Yosemite National Park", "National Park", "2012", "-5"])
    return rows


@pytest.fixture
def visits_csv(tmp_path):
    cols = ["Region", "State", "Unit.Code", "Unit.Name", "Unit.Type", "YearRaw", "Visitors"]
    path = tmp_path / "visits.csv"
    pd.DataFrame(visit_rows(), columns=cols).to_csv(path, index=False)
    return path


@pytest.fixture
def locations_csv(tmp_path):
    path = tmp_path / "parks.csv"
    df = pd.DataFrame(
        [(name, lat, lon) for name, _, _, lat, lon in PARKS],
        columns=["Park Name", "Latitude", "Longitude"],
    )
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def parks_frame():
    return pd.DataFrame(
        [(name, state, lat, lon) for name, state, _, lat, lon in PARKS],
        columns=["park_name", "state", "latitude", "longitude"],
    )
