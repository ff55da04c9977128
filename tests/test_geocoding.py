import pytest
import requests

from participium.core.errors import BadRequestError
from participium.services.geocoding.base import GeocodingServiceError
from participium.services.geocoding.nominatim_provider import NominatimProvider
from participium.services.geocoding.service import (
    calculate_bounding_box,
    parse_bounding_box,
    radius_for_zoom,
    validate_address,
    validate_zoom,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class TestBoundingBox:

    @pytest.mark.parametrize("zoom,radius", [(19, 100), (18, 100), (17, 500), (15, 2000), (12, 5000), (5, 500)])
    def test_radius_for_zoom(self, zoom, radius):
        assert radius_for_zoom(zoom) == radius

    def test_box_is_centered(self):
        min_lon, min_lat, max_lon, max_lat = parse_bounding_box(calculate_bounding_box(45.07, 7.68, 16))
        assert min_lon < 7.68 < max_lon
        assert min_lat < 45.07 < max_lat
        assert round((max_lat - min_lat) * 111320) == 1000

    @pytest.mark.parametrize("bbox", ["1,2,3", "a,b,c,d", "7.7,45.0,7.6,45.1"])
    def test_invalid_boxes(self, bbox):
        with pytest.raises(BadRequestError):
            parse_bounding_box(bbox)

    def test_zoom_and_address_validation(self):
        assert validate_zoom("16") == 16
        with pytest.raises(BadRequestError):
            validate_zoom(11)
        with pytest.raises(BadRequestError):
            validate_zoom("x")
        assert validate_address("  Via Po  ") == "Via Po"
        with pytest.raises(BadRequestError):
            validate_address("ab")


class TestNominatimProvider:

    def test_forward_geocode(self, monkeypatch):
        calls = {}

        def fake_get(url, params=None, headers=None, timeout=None):
            calls.update(url=url, params=params, headers=headers)
            return FakeResponse(payload=[{"display_name": "Via Po, Torino", "lat": "45.068", "lon": "7.693"}])

        monkeypatch.setattr(requests, "get", fake_get)
        result = NominatimProvider(user_agent="test-agent").forward_geocode("Via Po")

        assert result == {"display_name": "Via Po, Torino", "latitude": 45.068, "longitude": 7.693}
        assert calls["params"]["bounded"] == 1
        assert calls["params"]["viewbox"] == NominatimProvider.CITY_VIEWBOX
        assert calls["headers"]["User-Agent"] == "test-agent"

    def test_forward_geocode_not_found(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(payload=[]))
        assert NominatimProvider().forward_geocode("Nowhere") is None

    def test_forward_geocode_timeout(self, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.Timeout("slow")

        monkeypatch.setattr(requests, "get", boom)
        with pytest.raises(GeocodingServiceError) as excinfo:
            NominatimProvider().forward_geocode("Via Po")
        assert excinfo.value.temporary

    def test_reverse_geocode_never_raises(self, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(requests, "get", boom)
        result = NominatimProvider().reverse_geocode(45.07, 7.68)
        assert result["formatted_address"] is None
        assert result["provider"] == "nominatim"

    def test_reverse_geocode_road(self, monkeypatch):
        payload = {"display_name": "1, Via Roma, Torino", "address": {"road": "Via Roma", "house_number": "1", "city": "Torino"}}
        monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(payload=payload))
        result = NominatimProvider().reverse_geocode(45.07, 7.68)
        assert result["road"] == "Via Roma 1"
        assert result["city"] == "Torino"


class TestGeocodeEndpoint:

    def test_geocode_address(self, client):
        resp = client.get("/api/geocode", params={"address": "Piazza Castello", "zoom": 18})
        assert resp.status_code == 200
        data = resp.json()
        assert data["address"] == "Piazza Castello, Torino"
        assert data["zoom"] == 18
        assert len(data["bbox"].split(",")) == 4

    def test_unknown_address(self, client):
        resp = client.get("/api/geocode", params={"address": "Atlantis"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Address not found by geocoding service"

    def test_outside_city(self, client, reset_db):
        reset_db.places["Duomo di Milano"] = (45.4642, 9.1900)
        resp = client.get("/api/geocode", params={"address": "Duomo di Milano"})
        assert resp.status_code == 400
        assert "outside" in resp.json()["message"]

    def test_invalid_zoom(self, client):
        assert client.get("/api/geocode", params={"address": "Piazza Castello", "zoom": 25}).status_code == 400
