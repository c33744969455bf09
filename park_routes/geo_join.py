import logging

import pandas as pd

logger = logging.getLogger(__name__)


def unmatched_parks(totals: pd.DataFrame, locations: pd.DataFrame) -> list[str]:
    """Park names with no exact match in the coordinate lookup."""
    known = set(locations["park_name"])
    return sorted(p for p in totals["park_name"].unique() if p not in known)


def join_locations(totals: pd.DataFrame, locations: pd.DataFrame) -> pd.DataFrame:
    """Inner join park totals with coordinates on the exact park name.

    Names must match exactly (case and punctuation included). Parks without
    a match are dropped; they are logged here so the loss is visible.
    """
    lookup = locations[["park_name", "latitude", "longitude"]].drop_duplicates(
        subset="park_name", keep="first"
    )
    joined = totals.merge(lookup, on="park_name", how="inner", validate="many_to_one")

    missing = unmatched_parks(totals, lookup)
    if missing:
        logger.warning(
            "%d of %d parks have no coordinates and were dropped: %s",
            len(missing),
            totals["park_name"].nunique(),
            missing,
        )
    return joined.reset_index(drop=True)
