"""
Read the raw National Park visitation CSV and the park coordinate lookup.

The visitation file has one row per park-year plus a synthetic "Total" row
per park. Rows we cannot use are dropped, counted and logged rather than
raising, so a handful of bad lines never stops an analysis run.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from .config import (
    LOCATION_COLUMNS,
    LOCATIONS_SEP,
    OPTIONAL_VISIT_COLUMNS,
    TOTAL_SENTINEL,
    VISIT_COLUMNS,
    YEAR_MAX,
    YEAR_MIN,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitLoad:
    """Cleaned visit records, the separated Total rows and drop counts."""

    records: pd.DataFrame
    totals: pd.DataFrame
    dropped: Dict[str, int] = field(default_factory=dict)


def _require_columns(df: pd.DataFrame, required, path) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required column(s) {missing} in {path}")


def _to_number(series: pd.Series) -> pd.Series:
    # "1,234,567" -> 1234567; anything else unparseable -> NaN
    cleaned = series.astype(str).str.replace(",", "", regex=False).str.strip()
    return pd.to_numeric(cleaned.where(series.notna()), errors="coerce")


def load_visits(path: str) -> VisitLoad:
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    _require_columns(df, VISIT_COLUMNS, path)

    rename = dict(VISIT_COLUMNS)
    rename.update({k: v for k, v in OPTIONAL_VISIT_COLUMNS.items() if k in df.columns})
    df = df[list(rename)].rename(columns=rename)

    for col in ("region", "state", "park_name", "year_raw"):
        df[col] = df[col].str.strip()

    dropped: Dict[str, int] = {}

    df["visitors"] = _to_number(df["visitors"])
    missing_visitors = df["visitors"].isna()
    dropped["missing_visitors"] = int(missing_visitors.sum())
    df = df[~missing_visitors]

    is_total = df["year_raw"] == TOTAL_SENTINEL
    totals = df[is_total].drop(columns=["year_raw"]).copy()
    totals["visitors"] = totals["visitors"].astype("int64")
    df = df[~is_total].copy()

    df["year"] = pd.to_numeric(df["year_raw"], errors="coerce")
    bad_year = df["year"].isna() | ~df["year"].between(YEAR_MIN, YEAR_MAX)
    bad_year |= df["year"].fillna(0) % 1 != 0
    dropped["invalid_year"] = int(bad_year.sum())
    df = df[~bad_year]

    negative = df["visitors"] < 0
    dropped["negative_visitors"] = int(negative.sum())
    df = df[~negative]

    records = df.drop(columns=["year_raw"]).copy()
    records["year"] = records["year"].astype("int64")
    records["visitors"] = records["visitors"].astype("int64")
    records = records.reset_index(drop=True)

    for reason, count in dropped.items():
        if count:
            logger.warning("Dropped %d visit rows from %s: %s", count, path, reason)
    logger.info(
        "Loaded %d visit records (%d parks) and %d Total rows from %s",
        len(records),
        records["park_name"].nunique(),
        len(totals),
        path,
    )
    return VisitLoad(records=records, totals=totals.reset_index(drop=True), dropped=dropped)


def filter_unit_type(records: pd.DataFrame, unit_type: str | None) -> pd.DataFrame:
    """Keep one NPS unit type (e.g. "National Park") when the column is present."""
    if not unit_type or "unit_type" not in records.columns:
        return records
    out = records[records["unit_type"] == unit_type].reset_index(drop=True)
    logger.info("Kept %d/%d records of unit type %r", len(out), len(records), unit_type)
    return out


def load_park_locations(path: str, sep: str = LOCATIONS_SEP) -> pd.DataFrame:
    df = pd.read_csv(path, sep=sep)
    df.columns = [c.strip() for c in df.columns]
    _require_columns(df, LOCATION_COLUMNS, path)

    df = df[list(LOCATION_COLUMNS)].rename(columns=LOCATION_COLUMNS)
    df["park_name"] = df["park_name"].astype(str).str.strip()
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    no_coords = df["latitude"].isna() | df["longitude"].isna()
    if no_coords.any():
        logger.warning("Dropped %d location rows without coordinates", int(no_coords.sum()))
        df = df[~no_coords]

    if ((df["latitude"] < -90) | (df["latitude"] > 90)).any():
        raise ValueError("Latitude values out of bounds [-90, 90].")
    if ((df["longitude"] < -180) | (df["longitude"] > 180)).any():
        raise ValueError("Longitude values out of bounds [-180, 180].")

    dupes = df["park_name"].duplicated(keep="first")
    if dupes.any():
        logger.warning(
            "Dropped %d duplicate location rows: %s",
            int(dupes.sum()),
            sorted(df.loc[dupes, "park_name"].unique()),
        )
        df = df[~dupes]

    return df.reset_index(drop=True)
