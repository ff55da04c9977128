"""
Forward geocoding and map bounding boxes.

Used by the public /geocode proxy (address → coordinates + bbox for the map)
and by report creation (coordinates → street address).
"""

import logging
import math
from typing import Dict, Optional, Tuple

from participium.core.errors import AppError, BadRequestError
from participium.utils.boundaries import is_within_city
from .base import GeocodingServiceError
from .resolver import get_geocoding_provider

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111320
DEFAULT_ZOOM = 16
MIN_ZOOM = 12
MAX_ZOOM = 19


def radius_for_zoom(zoom: int) -> int:
    """Search radius in meters shown at a given map zoom level."""
    if zoom >= 18:
        return 100  # street
    if zoom >= 16:
        return 500  # neighbourhood
    if zoom >= 14:
        return 2000  # district
    if zoom >= 12:
        return 5000  # city area
    return 500


def calculate_bounding_box(latitude: float, longitude: float, zoom: int) -> str:
    """
    Bounding box around a point, formatted "minLon,minLat,maxLon,maxLat".
    """
    radius = radius_for_zoom(zoom)
    lat_radius = radius / METERS_PER_DEGREE
    lon_radius = radius / (METERS_PER_DEGREE * math.cos(math.radians(latitude)))
    return (
        f"{longitude - lon_radius:.6f},{latitude - lat_radius:.6f},"
        f"{longitude + lon_radius:.6f},{latitude + lat_radius:.6f}"
    )


def parse_bounding_box(bbox: str) -> Tuple[float, float, float, float]:
    """
    Parse "minLon,minLat,maxLon,maxLat".

    Raises:
        BadRequestError: malformed box or min >= max
    """
    parts = bbox.split(",")
    if len(parts) != 4:
        raise BadRequestError('Invalid bounding box format. Expected: "minLon,minLat,maxLon,maxLat"')
    try:
        min_lon, min_lat, max_lon, max_lat = (float(p.strip()) for p in parts)
    except ValueError:
        raise BadRequestError("Invalid bounding box coordinates")
    if min_lon >= max_lon or min_lat >= max_lat:
        raise BadRequestError("Invalid bounding box: min values must be less than max values")
    return min_lon, min_lat, max_lon, max_lat


def validate_zoom(zoom) -> int:
    try:
        value = int(zoom)
    except (TypeError, ValueError):
        raise BadRequestError(f"Zoom level must be between {MIN_ZOOM} and {MAX_ZOOM}")
    if value < MIN_ZOOM or value > MAX_ZOOM:
        raise BadRequestError(f"Zoom level must be between {MIN_ZOOM} and {MAX_ZOOM}")
    return value


def validate_address(address: Optional[str]) -> str:
    if not address or not isinstance(address, str):
        raise BadRequestError("Address is required")
    trimmed = address.strip()
    if len(trimmed) < 3 or len(trimmed) > 200:
        raise BadRequestError("Address must be between 3 and 200 characters")
    return trimmed


def geocode_address(address: Optional[str], zoom=DEFAULT_ZOOM) -> Dict:
    """
    Resolve an address inside the municipality to map coordinates.

    Returns:
        {"address", "latitude", "longitude", "bbox", "zoom"}

    Raises:
        BadRequestError: invalid input, unknown address, or outside the city
        AppError: geocoding service down (500)
    """
    address = validate_address(address)
    zoom = validate_zoom(zoom)

    try:
        result = get_geocoding_provider().forward_geocode(address)
    except GeocodingServiceError as e:
        raise AppError(str(e))

    if result is None:
        raise BadRequestError("Address not found by geocoding service")

    latitude, longitude = result["latitude"], result["longitude"]
    if not is_within_city(latitude, longitude):
        raise BadRequestError("Address is outside Turin municipality boundaries")

    return {
        "address": result["display_name"] or address,
        "latitude": latitude,
        "longitude": longitude,
        "bbox": calculate_bounding_box(latitude, longitude, zoom),
        "zoom": zoom,
    }


def resolve_address(latitude: float, longitude: float) -> Optional[str]:
    """Best-effort street address for a point; None when unknown."""
    data = get_geocoding_provider().reverse_geocode(latitude, longitude)
    return data.get("road") or data.get("formatted_address")
