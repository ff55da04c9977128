from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


class GeocodingServiceError(Exception):
    """The upstream geocoding service could not be reached or answered badly."""

    def __init__(self, message: str, temporary: bool = False):
        super().__init__(message)
        self.temporary = temporary


class GeocodingProvider(ABC):
    """
    Abstract geocoding provider.

    Contract:
    - reverse_geocode(latitude, longitude) returns a dict with well-known keys:
      {
        "formatted_address": str | None,
        "road": str | None,
        "city": str | None,
        "country": str | None,
        "provider": str
      }
      It MUST NEVER raise; empty fields are returned on failure.
    - forward_geocode(address) returns {"display_name", "latitude", "longitude"}
      or None when nothing matches. Transport failures raise
      GeocodingServiceError so callers can tell "not found" from "down".
    """

    @abstractmethod
    def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Optional[str]]:
        raise NotImplementedError

    @abstractmethod
    def forward_geocode(self, address: str) -> Optional[Dict]:
        raise NotImplementedError


def empty_result(provider: str) -> Dict[str, Optional[str]]:
    return {
        "formatted_address": None,
        "road": None,
        "city": None,
        "country": None,
        "provider": provider,
    }
