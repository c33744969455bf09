import logging

import pandas as pd

from park_routes.geo_join import join_locations, unmatched_parks


def _totals(names):
    return pd.DataFrame(
        {"park_name": names, "state": ["XX"] * len(names), "total_visitors": range(len(names), 0, -1)}
    )


def _locations(names):
    return pd.DataFrame(
        {"park_name": names, "latitude": [40.0] * len(names), "longitude": [-100.0] * len(names)}
    )


def test_join_drops_unmatched_parks():
    totals = _totals(["Acadia National Park", "Arches National Park", "Badlands National Park"])
    locations = _locations(["Acadia National Park", "Badlands National Park", "Zion National Park"])

    joined = join_locations(totals, locations)

    assert list(joined["park_name"]) == ["Acadia National Park", "Badlands National Park"]
    assert {"latitude", "longitude", "total_visitors"} <= set(joined.columns)
    assert len(joined) <= min(len(totals), len(locations))


def test_join_is_case_and_format_sensitive():
    totals = _totals(["Acadia National Park", "Arches"])
    locations = _locations(["acadia national park", "Arches National Park"])

    assert join_locations(totals, locations).empty
    assert unmatched_parks(totals, locations) == ["Acadia National Park", "Arches"]


def test_join_never_duplicates_rows_on_duplicate_lookup_keys():
    totals = _totals(["Acadia National Park"])
    locations = _locations(["Acadia National Park", "Acadia National Park"])

    assert len(join_locations(totals, locations)) == 1


def test_join_logs_the_dropped_parks(caplog):
    totals = _totals(["Acadia National Park", "Arches National Park"])
    locations = _locations(["Acadia National Park"])

    with caplog.at_level(logging.WARNING, logger="park_routes.geo_join"):
        join_locations(totals, locations)

    assert "1 of 2 parks" in caplog.text
    assert "Arches National Park" in caplog.text
