from datetime import datetime, timedelta, timezone

from participium.repositories.telegram_token_repository import get_telegram_token_repository
from participium.services.telegram_service import TOKEN_ALPHABET

TURIN_LAT = 45.0703
TURIN_LON = 7.6869


def _link(client, citizen, auth, telegram_id="123456789"):
    token = client.post("/api/telegram/generate-token", headers=auth(citizen)).json()["token"]
    return client.post("/api/telegram/link", json={"token": token, "telegramId": telegram_id, "telegramUsername": "mrossi"})


class TestLinking:

    def test_generate_token(self, client, citizen, auth):
        resp = client.post("/api/telegram/generate-token", headers=auth(citizen))
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["token"]) == 6
        assert all(ch in TOKEN_ALPHABET for ch in data["token"])
        assert data["deepLink"].endswith(f"?start=link_{data['token']}")

    def test_link_and_status(self, client, citizen, auth):
        resp = _link(client, citizen, auth)
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == citizen["id"]

        status = client.get("/api/telegram/status", headers=auth(citizen)).json()
        assert status == {"linked": True, "telegramUsername": "mrossi", "telegramId": "123456789"}

        # already linked
        assert client.post("/api/telegram/generate-token", headers=auth(citizen)).status_code == 409
        assert client.post("/api/telegram/check-linked", json={"telegramId": 123456789}).json()["linked"] is True

    def test_token_errors(self, client, citizen, make_user, auth):
        assert client.post("/api/telegram/link", json={"token": "ZZZZZZ", "telegramId": "1"}).status_code == 404
        assert client.post("/api/telegram/link", json={"telegramId": "1"}).status_code == 400

        token = client.post("/api/telegram/generate-token", headers=auth(citizen)).json()["token"]
        assert client.post("/api/telegram/link", json={"token": token, "telegramId": "1"}).status_code == 200
        assert client.post("/api/telegram/link", json={"token": token, "telegramId": "1"}).status_code == 409

        other = make_user()
        token = client.post("/api/telegram/generate-token", headers=auth(other)).json()["token"]
        # telegram id 1 already belongs to citizen
        assert client.post("/api/telegram/link", json={"token": token, "telegramId": "1"}).status_code == 409

    def test_expired_token(self, client, citizen, auth):
        token = client.post("/api/telegram/generate-token", headers=auth(citizen)).json()["token"]
        repo = get_telegram_token_repository()
        row = repo.find_by_token(token)
        repo.update(row["id"], {"expires_at": datetime.now(timezone.utc) - timedelta(seconds=1)})
        assert client.post("/api/telegram/link", json={"token": token, "telegramId": "1"}).status_code == 400

    def test_unlink(self, client, citizen, auth):
        assert client.delete("/api/telegram/unlink", headers=auth(citizen)).status_code == 404
        _link(client, citizen, auth)
        assert client.delete("/api/telegram/unlink", headers=auth(citizen)).status_code == 200
        assert client.get("/api/telegram/status", headers=auth(citizen)).json()["linked"] is False


class TestBotReports:

    def _report(self, **overrides):
        body = {
            "telegramId": "123456789",
            "title": "Broken bench",
            "description": "The bench in the park is broken.",
            "category": "PUBLIC_GREEN_AREAS_PLAYGROUNDS",
            "latitude": TURIN_LAT,
            "longitude": TURIN_LON,
            "photoFileIds": ["AgACAgQAAx"],
        }
        body.update(overrides)
        return body

    def test_create_and_list(self, client, citizen, auth):
        _link(client, citizen, auth)
        resp = client.post("/api/telegram/reports", json=self._report())
        assert resp.status_code == 201
        report_id = resp.json()["reportId"]

        reports = client.get("/api/telegram/123456789/reports").json()
        assert [r["reportId"] for r in reports] == [report_id]
        detail = client.get(f"/api/telegram/123456789/reports/{report_id}").json()
        assert detail["status"] == "PENDING_APPROVAL"

        mine = client.get("/api/reports/mine", headers=auth(citizen)).json()
        assert mine[0]["photos"][0]["url"] == "telegram:AgACAgQAAx"

    def test_unlinked_telegram_id(self, client):
        assert client.post("/api/telegram/reports", json=self._report()).status_code == 404
        assert client.get("/api/telegram/999/reports").status_code == 404

    def test_validation(self, client, citizen, auth):
        _link(client, citizen, auth)
        assert client.post("/api/telegram/reports", json=self._report(description="short")).status_code == 400
        assert client.post("/api/telegram/reports", json=self._report(photoFileIds=[])).status_code == 400
        assert client.post("/api/telegram/reports", json=self._report(latitude=45.4642, longitude=9.19)).status_code == 422
