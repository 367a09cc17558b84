"""
Coarse offline naming of impact locations.

A rectangle-based guess at the continent or ocean containing a point, for
narration when no reverse geocoder is available. Land boxes are checked
before ocean bands and the first match wins, so coastal points can come
out on either side.
"""

from __future__ import annotations

from .geodesy import normalize_longitude


# (name, lat_min, lat_max, lng_min, lng_max), checked in order
LAND_REGIONS = (
    ("Europe", 36.0, 71.0, -10.0, 40.0),
    ("Russia / Siberia", 45.0, 78.0, 40.0, 180.0),
    ("China / Central Asia", 20.0, 45.0, 60.0, 122.0),
    ("Middle East", 12.0, 42.0, 35.0, 60.0),
    ("Africa", -35.0, 36.0, -17.0, 51.0),
    ("India", 8.0, 30.0, 68.0, 90.0),
    ("Southeast Asia", -10.0, 20.0, 92.0, 141.0),
    ("Australia / Oceania", -44.0, -10.0, 113.0, 154.0),
    ("North America", 15.0, 72.0, -168.0, -52.0),
    ("South America", -56.0, 12.0, -82.0, -34.0),
    ("Antarctica", -90.0, -66.0, -180.0, 180.0),
)


def location_name(lat: float, lng: float) -> str:
    """
    Approximate region name for a latitude/longitude in degrees.

    Args:
        lat: Latitude (degrees)
        lng: Longitude (degrees), any range

    Returns:
        Human-readable continent or ocean name
    """
    lng = normalize_longitude(lng)

    for name, lat_min, lat_max, lng_min, lng_max in LAND_REGIONS:
        if lat_min <= lat <= lat_max and lng_min <= lng <= lng_max:
            return name

    if lat > 66.5:
        return "Arctic Ocean"
    if lat < -60:
        return "Southern Ocean"

    if lng > 120 or lng < -70:
        return "North Pacific Ocean" if lat > 0 else "South Pacific Ocean"
    if lng <= 20:
        return "North Atlantic Ocean" if lat > 0 else "South Atlantic Ocean"
    return "Indian Ocean"
