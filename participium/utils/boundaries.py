"""
Municipality boundary check for report coordinates.

The polygon is a simplified outline of the Turin municipality in
(longitude, latitude) order.
"""

from typing import List, Tuple

TURIN_POLYGON: List[Tuple[float, float]] = [
    (7.5809, 45.1241), (7.5862, 45.0923), (7.5995, 45.0665), (7.6234, 45.0371),
    (7.6542, 45.0198), (7.6891, 45.0087), (7.7234, 45.0165), (7.7498, 45.0342),
    (7.7687, 45.0587), (7.7812, 45.0876), (7.7854, 45.1154), (7.7765, 45.1398),
    (7.7543, 45.1587), (7.7234, 45.1698), (7.6854, 45.1754), (7.6487, 45.1721),
    (7.6154, 45.1598), (7.5912, 45.1432), (7.5809, 45.1241),
]


def is_point_in_polygon(longitude: float, latitude: float, polygon: List[Tuple[float, float]]) -> bool:
    """Ray casting: count edge crossings of a horizontal ray from the point."""
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > latitude) != (yj > latitude):
            x_cross = (xj - xi) * (latitude - yi) / (yj - yi) + xi
            if longitude < x_cross:
                inside = not inside
        j = i
    return inside


def is_within_city(latitude: float, longitude: float) -> bool:
    return is_point_in_polygon(longitude, latitude, TURIN_POLYGON)


def is_valid_coordinate(latitude, longitude) -> bool:
    try:
        lat, lon = float(latitude), float(longitude)
    except (TypeError, ValueError):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
