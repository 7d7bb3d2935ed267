"""Tests for the Flask API."""


def _add(client, date="2024-03-05", start="08:00", end="16:30", user="Ana"):
    return client.post("/api/records", json={
        "user": user,
        "date": date,
        "start_time": start,
        "end_time": end,
    })


class TestRecordsApi:
    """Tests for the record endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_config(self, client):
        data = client.get("/api/config").get_json()
        assert data["sheet_name"] == "Work hours"
        assert data["summary_label"] == "Total hours"

    def test_add_and_list(self, client):
        response = _add(client)
        assert response.status_code == 201
        data = response.get_json()
        assert data["record"]["duration"] == "8.50"
        assert data["summary"]["total_hours"] == "8.50"

        _add(client, date="2024-03-10", start="09:00", end="17:00")
        data = client.get("/api/records?user=Ana&month=03-2024").get_json()
        assert [r["date"] for r in data["records"]] == ["2024-03-05", "2024-03-10"]
        assert data["summary"]["total_hours"] == "16.50"

    def test_add_rejects_end_before_start(self, client):
        response = _add(client, start="09:00", end="08:00")
        assert response.status_code == 400
        assert response.get_json()["status"] == "error"

        data = client.get("/api/records?user=Ana&month=03-2024").get_json()
        assert data["records"] == []

    def test_add_requires_user(self, client):
        assert _add(client, user="").status_code == 400

    def test_add_rejects_path_like_user(self, client, app):
        response = _add(client, user="../escaped")
        assert response.status_code == 400
        assert response.get_json()["status"] == "error"

        data_dir = app.config["DATA_DIR"]
        assert not (data_dir.parent / "escaped_03-2024.json").exists()
        assert client.get("/api/records?user=../escaped&month=03-2024").status_code == 400
        assert client.get("/api/export?user=../escaped&month=03-2024").status_code == 400

    def test_bad_month(self, client):
        assert client.get("/api/records?user=Ana&month=2024-03").status_code == 400

    def test_update(self, client):
        record_id = _add(client).get_json()["record"]["id"]
        response = client.put(f"/api/records/{record_id}", json={
            "user": "Ana",
            "month": "03-2024",
            "date": "2024-03-05",
            "start_time": "08:00",
            "end_time": "12:00",
        })
        assert response.status_code == 200
        assert response.get_json()["record"]["id"] == record_id

        data = client.get("/api/records?user=Ana&month=03-2024").get_json()
        assert data["summary"]["total_hours"] == "4.00"

    def test_update_unknown_record(self, client):
        response = client.put("/api/records/missing", json={
            "user": "Ana",
            "month": "03-2024",
            "date": "2024-03-05",
            "start_time": "08:00",
            "end_time": "12:00",
        })
        assert response.status_code == 404

    def test_delete(self, client):
        first = _add(client).get_json()["record"]["id"]
        _add(client, date="2024-03-10", start="09:00", end="17:00")

        response = client.delete(f"/api/records/{first}?user=Ana&month=03-2024")
        assert response.status_code == 200
        assert response.get_json()["summary"]["total_hours"] == "8.00"

        assert client.delete(f"/api/records/{first}?user=Ana&month=03-2024").status_code == 404

    def test_navigate(self, client):
        data = client.get("/api/months/12-2024/navigate?step=1").get_json()
        assert data["month"] == "01-2025"
        data = client.get("/api/months/01-2025/navigate?step=-1").get_json()
        assert data["month"] == "12-2024"
        assert client.get("/api/months/nope/navigate").status_code == 400


class TestExportApi:
    """Tests for the Excel download."""

    def test_export(self, client, read_sheet):
        _add(client)
        _add(client, date="2024-03-10", start="09:00", end="17:00")

        response = client.get("/api/export?user=Ana&month=03-2024")
        assert response.status_code == 200
        assert "Ana_March.xlsx" in response.headers["Content-Disposition"]

        _, rows = read_sheet(response.data)
        assert len(rows) == 3
        assert rows[-1] == ["Total hours", "16.50"]
