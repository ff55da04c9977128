"""
Geocoding proxy response model.
"""

from participium.models.base import CamelModel


class GeocodeResponse(CamelModel):
    address: str
    latitude: float
    longitude: float
    bbox: str
    zoom: int
