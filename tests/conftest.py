import os

os.environ["USE_MOCK_DB"] = "true"
os.environ["ENFORCE_CITY_BOUNDARIES"] = "true"

import pytest
from fastapi.testclient import TestClient

from participium.config.mock_firestore import get_mock_db
from participium.main import app
from participium.models.user import Role
from participium.repositories.external_company_repository import get_external_company_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.geocoding.base import GeocodingProvider, empty_result
from participium.services.geocoding.resolver import set_geocoding_provider
from participium.services.report_service import get_report_service
from participium.utils.security import create_session_token, hash_password

# Piazza Castello, Turin
TURIN_LAT = 45.0703
TURIN_LON = 7.6869
PASSWORD = "password123"


class FakeGeocoder(GeocodingProvider):
    """Offline provider: every point is on Via Roma, searches use `places`."""

    def __init__(self):
        self.places = {"Piazza Castello": (TURIN_LAT, TURIN_LON)}

    def reverse_geocode(self, latitude, longitude):
        result = empty_result("fake")
        result["road"] = "Via Roma 1"
        return result

    def forward_geocode(self, address):
        if address not in self.places:
            return None
        lat, lon = self.places[address]
        return {"display_name": f"{address}, Torino", "latitude": lat, "longitude": lon}


@pytest.fixture(autouse=True)
def reset_db():
    get_mock_db().reset()
    geocoder = FakeGeocoder()
    set_geocoding_provider(geocoder)
    yield geocoder
    set_geocoding_provider(None)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


_counter = {"n": 0}


@pytest.fixture
def make_user():
    def factory(*roles, email=None, verified=True, company_id=None, first_name="Test", last_name="User"):
        _counter["n"] += 1
        roles = [r.value if isinstance(r, Role) else r for r in (roles or (Role.CITIZEN,))]
        return get_user_repository().create({
            "first_name": first_name,
            "last_name": last_name,
            "email": email or f"user{_counter['n']}@example.com",
            "password_hash": hash_password(PASSWORD),
            "role": roles,
            "is_verified": verified,
            "external_company_id": company_id,
            "telegram_id": None,
            "telegram_username": None,
            "email_notifications_enabled": True,
        })
    return factory


@pytest.fixture
def auth():
    def headers(user):
        return {"Authorization": f"Bearer {create_session_token(user['id'], user['role'])}"}
    return headers


@pytest.fixture
def make_report():
    def factory(citizen, category="PUBLIC_LIGHTING", is_anonymous=False, title="Broken street lamp"):
        return get_report_service().create_report(
            user_id=citizen["id"],
            title=title,
            description="The lamp at the corner has been off for a week.",
            category=category,
            latitude=TURIN_LAT,
            longitude=TURIN_LON,
            photos=["https://example.com/photo1.jpg"],
            is_anonymous=is_anonymous,
        )
    return factory


@pytest.fixture
def make_company():
    def factory(categories=("PUBLIC_LIGHTING",), platform_access=True, name="Lux Srl"):
        return get_external_company_repository().create({
            "name": name,
            "categories": list(categories),
            "platform_access": platform_access,
        })
    return factory


@pytest.fixture
def citizen(make_user):
    return make_user(Role.CITIZEN, first_name="Mario", last_name="Rossi")


@pytest.fixture
def pr_officer(make_user):
    return make_user(Role.PUBLIC_RELATIONS, first_name="Paola", last_name="Rinaldi")


@pytest.fixture
def technical(make_user):
    return make_user(Role.LOCAL_PUBLIC_SERVICES, first_name="Luca", last_name="Bianchi")


@pytest.fixture
def assigned_report(citizen, pr_officer, technical, make_report):
    report = make_report(citizen)
    return get_report_service().approve(report["id"], pr_officer["id"], technical["id"])


@pytest.fixture
def external_setup(make_company, make_user):
    company = make_company()
    maintainer = make_user(Role.EXTERNAL_MAINTAINER, company_id=company["id"], first_name="Anna", last_name="Verdi")
    return company, maintainer
