import pandas as pd


def _sum_by(records: pd.DataFrame, keys: list[str]) -> pd.DataFrame:
    return records.groupby(keys, as_index=False, sort=True)["visitors"].sum()


def _by_total_desc(df: pd.DataFrame, key: str, total_col: str = "visitors") -> pd.DataFrame:
    # Largest first, key name breaks ties so the order is stable
    return df.sort_values([total_col, key], ascending=[False, True]).reset_index(drop=True)


def visitors_by_year(records: pd.DataFrame) -> pd.DataFrame:
    return _sum_by(records, ["year"]).reset_index(drop=True)


def visitors_by_region(records: pd.DataFrame) -> pd.DataFrame:
    return _by_total_desc(_sum_by(records, ["region"]), "region")


def visitors_by_region_year(records: pd.DataFrame) -> pd.DataFrame:
    """Long frame of (region, year, visitors), used for the regional facets."""
    return _sum_by(records, ["region", "year"]).reset_index(drop=True)


def visitors_by_state(records: pd.DataFrame) -> pd.DataFrame:
    return _by_total_desc(_sum_by(records, ["state"]), "state")


def park_totals(records: pd.DataFrame) -> pd.DataFrame:
    """Sum visitors over all years for each park.

    The park's state is the first one seen in the records.
    """
    out = records.groupby("park_name", as_index=False, sort=True).agg(
        state=("state", "first"),
        total_visitors=("visitors", "sum"),
    )
    return _by_total_desc(out, "park_name", "total_visitors")


def top_parks(totals: pd.DataFrame, n: int) -> pd.DataFrame:
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    return _by_total_desc(totals, "park_name", "total_visitors").head(n).reset_index(drop=True)
