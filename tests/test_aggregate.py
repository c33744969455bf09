import pandas as pd
import pytest

from park_routes.aggregate import (
    park_totals,
    top_parks,
    visitors_by_region,
    visitors_by_region_year,
    visitors_by_state,
    visitors_by_year,
)


@pytest.fixture
def records():
    return pd.DataFrame(
        {
            "region": ["PW", "PW", "PW", "IM", "IM", "NE"],
            "state": ["CA", "CA", "CA", "WY", "WY", "ME"],
            "park_name": ["Yosemite", "Yosemite", "Sequoia", "Yellowstone", "Yellowstone", "Acadia"],
            "year": [2015, 2016, 2016, 2015, 2016, 2016],
            "visitors": [100, 200, 50, 300, 10, 310],
        }
    )


def test_park_totals_sum_per_year_counts(records):
    totals = park_totals(records).set_index("park_name")

    assert totals.loc["Yosemite", "total_visitors"] == 300
    assert totals.loc["Yellowstone", "total_visitors"] == 310
    assert totals.loc["Yellowstone", "state"] == "WY"
    assert totals["total_visitors"].sum() == records["visitors"].sum()


def test_park_totals_independent_of_row_order(records):
    shuffled = records.sample(frac=1, random_state=3)
    pd.testing.assert_frame_equal(park_totals(records), park_totals(shuffled))


def test_park_totals_sorted_desc_with_name_tie_break(records):
    totals = park_totals(records)
    # Acadia and Yellowstone tie at 310
    assert list(totals["park_name"]) == ["Acadia", "Yellowstone", "Yosemite", "Sequoia"]


def test_visitors_by_year(records):
    by_year = visitors_by_year(records)
    assert list(by_year["year"]) == [2015, 2016]
    assert list(by_year["visitors"]) == [400, 570]


def test_visitors_by_region_and_state(records):
    assert visitors_by_region(records).iloc[0].to_dict() == {"region": "PW", "visitors": 350}
    by_state = visitors_by_state(records).set_index("state")["visitors"]
    assert by_state.to_dict() == {"CA": 350, "ME": 310, "WY": 310}


def test_visitors_by_region_year(records):
    df = visitors_by_region_year(records)
    assert len(df) == 5
    assert df[(df["region"] == "IM") & (df["year"] == 2016)]["visitors"].item() == 10


def test_top_parks(records):
    top = top_parks(park_totals(records), 2)
    assert list(top["park_name"]) == ["Acadia", "Yellowstone"]

    with pytest.raises(ValueError):
        top_parks(park_totals(records), 0)
