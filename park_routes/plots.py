"""Descriptive plots of park visitation."""

import math

import matplotlib.pyplot as plt
import pandas as pd
import plotly.express as px


def plot_visitors_by_year(by_year: pd.DataFrame, title: str = "National Park visitors per year"):
    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(by_year["year"], by_year["visitors"] / 1e6, color="#2A9D8F", linewidth=2)
    ax.set_xlabel("Year")
    ax.set_ylabel("Visitors (millions)")
    ax.set_title(title)
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def plot_region_facets(by_region_year: pd.DataFrame, ncols: int = 3):
    """One small line chart per NPS region, sharing both axes."""
    regions = sorted(by_region_year["region"].unique())
    nrows = max(math.ceil(len(regions) / ncols), 1)
    fig, axes = plt.subplots(nrows, ncols, figsize=(4 * ncols, 3 * nrows), sharex=True, sharey=True, squeeze=False)

    flat = axes.ravel()
    for ax, region in zip(flat, regions):
        sub = by_region_year[by_region_year["region"] == region]
        ax.plot(sub["year"], sub["visitors"] / 1e6, linewidth=1.5)
        ax.set_title(region)
        ax.grid(alpha=0.3)
    # Hide the unused panels in the last row
    for ax in flat[len(regions):]:
        ax.set_visible(False)

    fig.supxlabel("Year")
    fig.supylabel("Visitors (millions)")
    fig.tight_layout()
    return fig


def state_choropleth(by_state: pd.DataFrame):
    fig = px.choropleth(
        by_state,
        locations="state",
        locationmode="USA-states",
        color="visitors",
        scope="usa",
        color_continuous_scale="Greens",
        labels={"visitors": "Visitors"},
        title="Total visitors by state",
    )
    return fig


def park_bubble_map(joined: pd.DataFrame):
    fig = px.scatter_geo(
        joined,
        lat="latitude",
        lon="longitude",
        size="total_visitors",
        hover_name="park_name",
        scope="usa",
        size_max=40,
        title="Total visitors by park",
    )
    return fig


def cluster_map(clustered: pd.DataFrame):
    df = clustered.assign(cluster=clustered["cluster"].astype(str))
    fig = px.scatter_geo(
        df,
        lat="latitude",
        lon="longitude",
        color="cluster",
        hover_name="park_name",
        scope="usa",
        category_orders={"cluster": sorted(df["cluster"].unique(), key=int)},
        title="Park clusters",
    )
    return fig
