"""
Geocoding proxy - address search for the report map.
"""

from fastapi import APIRouter, Query

from participium.models.geocode import GeocodeResponse
from participium.services.geocoding.service import DEFAULT_ZOOM, geocode_address

router = APIRouter(prefix="/geocode", tags=["Geocoding"])


@router.get("", response_model=GeocodeResponse)
async def geocode(
    address: str = Query(None, description="Street address inside the municipality"),
    zoom: str = Query(str(DEFAULT_ZOOM), description="Map zoom level (12-19)"),
):
    """
    Resolve an address to coordinates and a bounding box sized for the zoom.
    """
    return geocode_address(address, zoom)
