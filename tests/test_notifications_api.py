from participium.models.user import Role


class TestInbox:

    def test_list_and_mark_read(self, client, assigned_report, citizen, auth):
        inbox = client.get("/api/notifications", headers=auth(citizen)).json()
        assert [n["type"] for n in inbox] == ["REPORT_APPROVED"]
        assert inbox[0]["isRead"] is False
        assert inbox[0]["reportId"] == assigned_report["id"]

        resp = client.patch(f"/api/notifications/{inbox[0]['id']}/read", headers=auth(citizen))
        assert resp.status_code == 200
        assert resp.json()["isRead"] is True

        unread = client.get("/api/notifications", params={"unreadOnly": True}, headers=auth(citizen)).json()
        assert unread == []

    def test_limit(self, client, assigned_report, citizen, technical, auth):
        for status in ("IN_PROGRESS", "SUSPENDED"):
            client.patch(f"/api/reports/{assigned_report['id']}/status", json={"status": status}, headers=auth(technical))
        inbox = client.get("/api/notifications", params={"limit": 2}, headers=auth(citizen)).json()
        assert len(inbox) == 2

    def test_cannot_touch_other_inbox(self, client, assigned_report, citizen, make_user, auth):
        notification_id = client.get("/api/notifications", headers=auth(citizen)).json()[0]["id"]
        other = make_user(Role.CITIZEN)
        assert client.patch(f"/api/notifications/{notification_id}/read", headers=auth(other)).status_code == 403
        assert client.patch("/api/notifications/missing/read", headers=auth(other)).status_code == 404

    def test_requires_login(self, client):
        assert client.get("/api/notifications").status_code == 401
