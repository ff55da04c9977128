import logging
from typing import Any, Dict, Optional

import requests

from .base import GeocodingProvider, GeocodingServiceError, empty_result

logger = logging.getLogger(__name__)


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim provider.

    - No API key required.
    - Includes a User-Agent header as required by Nominatim usage policy.
    - Forward searches are bounded to the Turin area viewbox.
    """

    REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
    SEARCH_URL = "https://nominatim.openstreetmap.org/search"
    # left,top,right,bottom
    CITY_VIEWBOX = "7.5,45.2,7.8,44.9"

    def __init__(self, user_agent: str = "Participium-Report-App/1.0", timeout: float = 5.0):
        self.user_agent = user_agent
        self.timeout = timeout

    def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Optional[str]]:
        try:
            params = {
                "lat": latitude,
                "lon": longitude,
                "format": "json",
                "addressdetails": 1,
            }
            resp = requests.get(
                self.REVERSE_URL,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                logger.warning(f"Nominatim reverse-geocode failed with status {resp.status_code}")
                return empty_result("nominatim")

            data: Dict[str, Any] = resp.json()
            address = data.get("address") or {}

            road = address.get("road") or address.get("pedestrian") or address.get("square")
            if road and address.get("house_number"):
                road = f"{road} {address['house_number']}"

            return {
                "formatted_address": data.get("display_name"),
                "road": road,
                "city": address.get("city") or address.get("town") or address.get("village"),
                "country": address.get("country"),
                "provider": "nominatim",
            }
        except Exception as e:
            # Never block report creation on the address lookup.
            logger.warning(f"Nominatim reverse-geocode error: {e}")
            return empty_result("nominatim")

    def forward_geocode(self, address: str) -> Optional[Dict]:
        params = {
            "q": address,
            "format": "jsonv2",
            "addressdetails": 1,
            "limit": 1,
            "bounded": 1,
            "viewbox": self.CITY_VIEWBOX,
        }
        try:
            resp = requests.get(
                self.SEARCH_URL,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.warning(f"Nominatim search timed out: {e}")
            raise GeocodingServiceError("Geocoding service temporarily unavailable", temporary=True)
        except requests.RequestException as e:
            logger.warning(f"Nominatim search error: {e}")
            raise GeocodingServiceError("Geocoding service error")

        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            logger.warning(f"Nominatim search failed with status {resp.status_code}")
            raise GeocodingServiceError("Geocoding service error")

        try:
            results = resp.json()
        except ValueError:
            raise GeocodingServiceError("Geocoding service error")

        if not results:
            return None

        first = results[0]
        return {
            "display_name": first.get("display_name"),
            "latitude": float(first["lat"]),
            "longitude": float(first["lon"]),
        }
