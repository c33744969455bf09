import folium
import pandas as pd

from .config import PALETTE


def cluster_color(cluster_id) -> str:
    # Subcluster ids are (cluster, subcluster); colour by the top-level cluster
    top = cluster_id[0] if isinstance(cluster_id, tuple) else cluster_id
    return PALETTE[(int(top) - 1) % len(PALETTE)]


def build_route_map(clustered: pd.DataFrame, routes, zoom_start: int = 4) -> folium.Map:
    """Interactive map of parks and tour segments.

    Resolved segments are drawn along their road geometry; unavailable ones
    as a dashed straight line between the two parks.
    """
    center_lat = clustered["latitude"].mean()
    center_lon = clustered["longitude"].mean()
    m = folium.Map(location=[center_lat, center_lon], zoom_start=zoom_start, tiles="OpenStreetMap")

    for r in routes:
        color = cluster_color(r.cluster_id)
        if r.available:
            # folium wants (lat, lon)
            points = [(lat, lon) for lon, lat in r.geometry]
            folium.PolyLine(locations=points, color=color, weight=4, opacity=0.8).add_to(m)
        else:
            seg = r.segment
            folium.PolyLine(
                locations=[seg.from_coords[::-1], seg.to_coords[::-1]],
                color=color,
                weight=2,
                opacity=0.6,
                dashArray="6 8",
                tooltip=f"No road route: {seg.from_park} -> {seg.to_park}",
            ).add_to(m)

    for _, row in clustered.iterrows():
        visitors = row.get("total_visitors")
        popup = row["park_name"]
        if pd.notna(visitors):
            popup = f"{popup}<br>{int(visitors):,} visitors"
        folium.CircleMarker(
            location=[row["latitude"], row["longitude"]],
            radius=5,
            color=cluster_color(int(row["cluster"])),
            fill=True,
            fill_opacity=0.9,
            popup=popup,
        ).add_to(m)

    return m


def save_route_map(m: folium.Map, path: str) -> str:
    m.save(path)
    return path
