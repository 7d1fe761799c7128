"""Tests for the organiser endpoints under /admin/registrations"""

import csv
import io
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from soapbox_portal.services.registration_repository import RegistrationRepository
from soapbox_portal.services.schemas import MemberInput

T0 = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def _fields(team_name, captain_name, email):
    return {
        "team_name": team_name,
        "captain_name": captain_name,
        "email": email,
        "phone_number": "07700 900123",
        "age_range": "",
        "soapbox_name": f"{team_name} Mk1",
        "design_description": "Plywood",
        "dimensions": "2m",
        "brakes_steering": "Rope",
    }


@pytest.fixture
def teams(repository):
    """Three registrations, Rocket with an uploaded design"""
    rocket = repository.upsert(
        "auth0|alice",
        _fields("Rocket", "Alice", "alice@example.com"),
        [MemberInput(name="Alice", age=30), MemberInput(name="Bob", age=10)],
        file_ref="auth0|alice/1.png",
        now=T0,
    )
    bolt = repository.upsert(
        "auth0|bea",
        _fields("Bolt", "Bea", "bea@derby.org"),
        [MemberInput(name="Bea", age=15)],
        now=T0 + timedelta(hours=1),
    )
    comet = repository.upsert(
        "auth0|cara",
        _fields("Comet", "Cara", "cara@example.com"),
        [MemberInput(name="Cara", age=12)],
        now=T0 + timedelta(hours=2),
    )
    return {"rocket": rocket.id, "bolt": bolt.id, "comet": comet.id}


class TestAdminKey:
    def test_missing_key(self, api_client):
        client, _ = api_client

        response = client.get("/admin/registrations")

        assert response.status_code == 422

    def test_wrong_key(self, api_client):
        client, _ = api_client

        response = client.get(
            "/admin/registrations", headers={"X-Admin-Key": "guess"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid admin API key"


class TestListRegistrations:
    def test_default_listing(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get("/admin/registrations", headers=admin_headers)

        assert response.status_code == 200
        page = response.json()
        assert page["total"] == 3
        assert page["page"] == 1
        assert page["total_pages"] == 1
        assert [item["team_name"] for item in page["items"]] == ["Comet", "Bolt", "Rocket"]
        assert page["items"][2]["members"] == [
            {"name": "Alice", "age": 30},
            {"name": "Bob", "age": 10},
        ]

    def test_search(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get(
            "/admin/registrations",
            params={"search": "derby.org"},
            headers=admin_headers,
        )

        assert [item["team_name"] for item in response.json()["items"]] == ["Bolt"]

    def test_sort_and_paginate(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get(
            "/admin/registrations",
            params={"sort": "team_name", "direction": "asc", "page": 2, "page_size": 2},
            headers=admin_headers,
        )

        page = response.json()
        assert page["total"] == 3
        assert page["total_pages"] == 2
        assert [item["team_name"] for item in page["items"]] == ["Rocket"]

    def test_status_filter(self, api_client, admin_headers, teams):
        client, _ = api_client
        client.patch(
            f"/admin/registrations/{teams['bolt']}/status",
            json={"status": "approved"},
            headers=admin_headers,
        )

        response = client.get(
            "/admin/registrations", params={"status": "approved"}, headers=admin_headers
        )

        assert [item["team_name"] for item in response.json()["items"]] == ["Bolt"]

    def test_unknown_sort_field(self, api_client, admin_headers):
        client, _ = api_client

        response = client.get(
            "/admin/registrations", params={"sort": "owner_id"}, headers=admin_headers
        )

        assert response.status_code == 400


class TestRegistrationDetail:
    def test_includes_download_link(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get(
            f"/admin/registrations/{teams['rocket']}", headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["file_ref"] == "auth0|alice/1.png"
        assert body["file_url"].startswith("https://files.example.com/auth0|alice/1.png")

    def test_no_link_without_file(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get(
            f"/admin/registrations/{teams['bolt']}", headers=admin_headers
        )

        assert response.json()["file_url"] is None

    def test_unknown_registration(self, api_client, admin_headers):
        client, _ = api_client

        response = client.get(
            f"/admin/registrations/{uuid.uuid4()}", headers=admin_headers
        )

        assert response.status_code == 404


class TestStatusAndCheckIn:
    def test_approve(self, api_client, admin_headers, teams, repository):
        client, _ = api_client

        response = client.patch(
            f"/admin/registrations/{teams['rocket']}/status",
            json={"status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["team_name"] == "Rocket"
        assert repository.fetch_by_owner("auth0|alice").status.value == "approved"

    def test_invalid_status(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.patch(
            f"/admin/registrations/{teams['rocket']}/status",
            json={"status": "shortlisted"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_status_unknown_registration(self, api_client, admin_headers):
        client, _ = api_client

        response = client.patch(
            f"/admin/registrations/{uuid.uuid4()}/status",
            json={"status": "rejected"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_check_in_is_idempotent(self, api_client, admin_headers, teams):
        client, _ = api_client
        url = f"/admin/registrations/{teams['comet']}/check-in"

        first = client.post(url, headers=admin_headers)
        second = client.post(url, headers=admin_headers)

        assert first.status_code == 200
        assert first.json()["checked_in_at"] is not None
        assert second.json()["checked_in_at"] == first.json()["checked_in_at"]


class TestStatsAndExports:
    def test_stats(self, api_client, admin_headers, teams):
        client, _ = api_client
        client.patch(
            f"/admin/registrations/{teams['rocket']}/status",
            json={"status": "rejected"},
            headers=admin_headers,
        )
        client.post(f"/admin/registrations/{teams['bolt']}/check-in", headers=admin_headers)

        response = client.get("/admin/registrations/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "checked_in": 1,
            "by_status": {"pending": 2, "approved": 0, "rejected": 1},
        }

    def test_stats_are_counted_in_the_database(
        self, api_client, admin_headers, teams, monkeypatch
    ):
        client, _ = api_client
        client.post(f"/admin/registrations/{teams['comet']}/check-in", headers=admin_headers)

        def full_scan(*args, **kwargs):
            raise AssertionError("stats must not load every registration")

        monkeypatch.setattr(RegistrationRepository, "list_all", full_scan)

        response = client.get("/admin/registrations/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 3
        assert response.json()["checked_in"] == 1

    def test_csv_export(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get("/admin/registrations/export.csv", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "registrations.csv" in response.headers["content-disposition"]
        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert {row["Team Name"] for row in rows} == {"Rocket", "Bolt", "Comet"}
        rocket = next(row for row in rows if row["Team Name"] == "Rocket")
        assert rocket["Members"] == "Alice (30); Bob (10)"

    def test_json_export_with_status_filter(self, api_client, admin_headers, teams):
        client, _ = api_client
        client.patch(
            f"/admin/registrations/{teams['comet']}/status",
            json={"status": "approved"},
            headers=admin_headers,
        )

        response = client.get(
            "/admin/registrations/export.json",
            params={"status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        rows = response.json()
        assert [row["team_name"] for row in rows] == ["Comet"]
        assert rows[0]["members"] == [{"name": "Cara", "age": 12}]

    def test_team_list_pdf_export(self, api_client, admin_headers, teams):
        client, _ = api_client

        response = client.get("/admin/registrations/export.pdf", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="teams-' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF-")

    def test_team_list_pdf_needs_admin_key(self, api_client):
        client, _ = api_client

        response = client.get(
            "/admin/registrations/export.pdf", headers={"X-Admin-Key": "guess"}
        )

        assert response.status_code == 401
