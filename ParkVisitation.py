import marimo

__generated_with = "0.17.6"
app = marimo.App(width="medium")


@app.cell
def _():
    import marimo as mo
    from pathlib import Path

    from park_routes import config
    from park_routes.aggregate import (
        park_totals,
        top_parks,
        visitors_by_region_year,
        visitors_by_state,
        visitors_by_year,
    )
    from park_routes.cluster_parks import cluster_parks
    from park_routes.geo_join import join_locations, unmatched_parks
    from park_routes.load_visits import filter_unit_type, load_park_locations, load_visits
    from park_routes.osrm_routes import OSRMProvider, resolve_tours
    from park_routes.plots import (
        cluster_map,
        park_bubble_map,
        plot_region_facets,
        plot_visitors_by_year,
        state_choropleth,
    )
    from park_routes.route_map import build_route_map, save_route_map
    from park_routes.route_optimize import cluster_groups, order_clusters
    from park_routes.pipeline import tours_frame
    return (
        OSRMProvider,
        Path,
        build_route_map,
        cluster_groups,
        cluster_map,
        cluster_parks,
        config,
        filter_unit_type,
        join_locations,
        load_park_locations,
        load_visits,
        mo,
        order_clusters,
        park_bubble_map,
        park_totals,
        plot_region_facets,
        plot_visitors_by_year,
        resolve_tours,
        save_route_map,
        state_choropleth,
        top_parks,
        tours_frame,
        unmatched_parks,
        visitors_by_region_year,
        visitors_by_state,
        visitors_by_year,
    )


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    # U.S. National Park Visitation, 1904-2016

    ### Where do people go, how has that changed over a century, and if you wanted to see the most visited parks, in what order should you drive to them?

    ### The visitation data has one row per park per year, plus a "Total" row per park. The columns we need are Region, State, Unit.Name, YearRaw and Visitors. Park coordinates come from a separate table keyed by park name.
    """)
    return


@app.cell
def _(config, filter_unit_type, load_visits):
    load = load_visits(config.VISITS_CSV)
    print("Dropped rows:", load.dropped)
    records = filter_unit_type(load.records, config.UNIT_TYPE)
    records.head(10)
    return (records,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    ### Visitors per year, across every National Park
    """)
    return


@app.cell
def _(plot_visitors_by_year, records, visitors_by_year):
    plot_visitors_by_year(visitors_by_year(records))
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    ### The same series split by NPS region.
    """)
    return


@app.cell
def _(plot_region_facets, records, visitors_by_region_year):
    plot_region_facets(visitors_by_region_year(records))
    return


@app.cell
def _(records, state_choropleth, visitors_by_state):
    state_choropleth(visitors_by_state(records))
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    ### To place parks on a map we join each park's total with its coordinates. The join is on the exact park name, so any park whose name is spelled differently in the two files silently disappears. We list them here rather than lose them quietly.
    """)
    return


@app.cell
def _(
    config,
    join_locations,
    load_park_locations,
    park_totals,
    records,
    top_parks,
    unmatched_parks,
):
    totals = park_totals(records)
    locations = load_park_locations(config.LOCATIONS_CSV)
    print("Parks without coordinates:", unmatched_parks(totals, locations))

    joined = top_parks(join_locations(totals, locations), config.TOP_N_PARKS)
    joined.head(10)
    return (joined,)


@app.cell
def _(joined, park_bubble_map):
    park_bubble_map(joined)
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    ### Now the road trip. Visiting every top park in one loop is a cross-country TSP, so we first group parks that are close together with hierarchical clustering, then order the parks inside each group.

    ### Within each cluster a second, finer pass (about one subcluster per five parks) gives day-trip sized groups.
    """)
    return


@app.cell
def _(cluster_map, cluster_parks, config, joined):
    clustered = cluster_parks(joined, k=config.N_CLUSTERS)
    cluster_map(clustered)
    return (clustered,)


@app.cell
def _(cluster_groups, clustered, order_clusters, tours_frame):
    tours = order_clusters(cluster_groups(clustered))
    for tour in tours:
        print(f"{tour.cluster_id}: {' -> '.join(tour.parks)} ({tour.length_km:,.0f} km)")
    tours_frame(tours, clustered)
    return (tours,)


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""
    ### Straight lines are only a sketch. The public OSRM server gives the actual driving geometry for every leg. A leg OSRM cannot route (a park on an island, or a server hiccup) is drawn dashed instead of stopping the whole map.
    """)
    return


@app.cell
def _(OSRMProvider, Path, build_route_map, clustered, config, mo, resolve_tours, save_route_map, tours):
    routes = resolve_tours(tours, OSRMProvider())
    save_route_map(build_route_map(clustered, routes), config.OUTPUT_MAP_HTML)
    html = Path(config.OUTPUT_MAP_HTML).read_text()
    mo.iframe(html, height="600px")
    return


if __name__ == "__main__":
    app.run()
