import json

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from auction_engine.models import AuctionStatus, Player, Role, Team, UserRole


def post(client, url, data):
    return client.post(url, data=json.dumps(data), content_type="application/json")


def patch(client, url, data):
    return client.patch(url, data=json.dumps(data), content_type="application/json")


@pytest.mark.django_db
def test_reads_need_a_session(client):
    response = client.get("/api/teams/")
    assert response.status_code == 401
    assert response.json() == {
        "data": None,
        "error": {"message": "Sign in to continue", "code": "unauthenticated"},
    }


def test_viewer_reads_but_cannot_write(viewer_api, team):
    response = viewer_api.get("/api/teams/")
    assert response.status_code == 200
    card = response.json()["data"][0]
    assert card["name"] == "Chennai"
    assert card["budget_level"] == "low"

    response = post(viewer_api, "/api/teams/", {"name": "Delhi"})
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"
    assert Team.objects.count() == 1


def test_admin_team_crud(admin_api):
    response = post(admin_api, "/api/teams/", {"name": "Delhi", "short_name": "DC"})
    assert response.status_code == 201
    team_id = response.json()["data"]["id"]

    response = patch(admin_api, f"/api/teams/{team_id}/", {"budget_cap": 2_000_000})
    assert response.json()["data"]["budget_cap"] == 2_000_000

    response = admin_api.post(f"/api/teams/{team_id}/toggle/")
    assert response.json()["data"]["is_active"] is False

    assert admin_api.delete(f"/api/teams/{team_id}/").status_code == 200
    assert admin_api.get(f"/api/teams/{team_id}/").status_code == 404


def test_unknown_fields_rejected(admin_api):
    response = post(admin_api, "/api/teams/", {"name": "Delhi", "owner": "x"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid"


def test_invalid_json_and_wrong_method(admin_api):
    response = admin_api.post("/api/teams/", data="{not json", content_type="application/json")
    assert response.status_code == 400
    assert admin_api.put("/api/teams/").status_code == 405


def test_player_search(admin_api, players):
    response = admin_api.get("/api/players/", {"search": "in", "category": "Batsman"})
    assert [p["name"] for p in response.json()["data"]] == ["Asha", "Dev"]

    response = admin_api.get("/api/players/", {"sort": "base_price", "direction": "sideways"})
    assert response.status_code == 400


def test_players_bulk_delete(admin_api, players):
    ids = [str(players[0].id), str(players[1].id)]
    response = post(admin_api, "/api/players/bulk-delete/", {"player_ids": ids})
    assert response.json()["data"] == {"deleted": 2}
    assert Player.objects.count() == 2


def test_players_import(admin_api):
    upload = SimpleUploadedFile("squad.csv", b"Name,Category,Price\nZara,Bowler,150000\n", content_type="text/csv")
    response = admin_api.post("/api/players/import/", {"file_upload": upload})
    assert response.status_code == 201
    assert response.json()["data"] == {"imported": 1}
    assert Player.objects.get(name="Zara").base_price == 150_000


def test_live_auction_flow(admin_api, viewer_api, config, team, players):
    response = post(admin_api, "/api/auction/action/", {"action": "initialize"})
    assert response.json()["data"]["result"] == {"queued": 4}

    response = post(admin_api, "/api/auction/action/", {"action": "NEXT"})
    assert response.json()["data"]["result"]["name"] == "Asha"

    response = post(admin_api, "/api/auction/action/", {
        "action": "SELL", "team_id": str(team.id), "price": 200_000, "notes": "opening lot",
    })
    assert response.status_code == 200
    state = response.json()["data"]["state"]
    assert state["current_player"] is None
    assert state["stats"]["progress_percentage"] == 25
    assert state["teams"][0]["budget_spent"] == 200_000
    assert state["teams"][0]["player_count"] == 1

    post(admin_api, "/api/auction/action/", {"action": "NEXT"})
    response = post(admin_api, "/api/auction/action/", {"action": "UNSOLD"})
    assert response.json()["data"]["result"]["status"] == "UNSOLD"

    response = viewer_api.get("/api/auction/history/", {"sort": "price"})
    body = response.json()["data"]
    assert [h["player"]["name"] for h in body["history"]] == ["Asha", "Ben"]
    assert body["summary"]["total_revenue"] == 200_000

    response = viewer_api.get("/api/auction/state/")
    assert response.json()["data"]["stats"]["remaining_players"] == 2


def test_sale_over_budget_is_rejected(admin_api, config, other_team, players):
    post(admin_api, "/api/auction/action/", {"action": "NEXT"})
    response = post(admin_api, "/api/auction/action/", {
        "action": "SELL", "team_id": str(other_team.id), "price": 900_000,
    })
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "budget_exceeded"
    assert Player.objects.get(pk=players[0].pk).auction_status == AuctionStatus.CURRENT


def test_unknown_action(admin_api, config):
    response = post(admin_api, "/api/auction/action/", {"action": "SPIN"})
    assert response.status_code == 400


def test_changes_bump_on_write(admin_api, team):
    before = admin_api.get("/api/changes/").json()["data"]
    patch(admin_api, f"/api/teams/{team.id}/", {"name": "Chennai Kings"})
    after = admin_api.get("/api/changes/").json()["data"]
    assert after["teams"] == before["teams"] + 1
    assert after["players"] == before["players"]


@pytest.mark.django_db
def test_login_and_me(client, admin):
    response = post(client, "/api/auth/login/", {"email": "admin@example.com", "password": "wrong"})
    assert response.status_code == 401

    response = post(client, "/api/auth/login/", {"email": "Admin@Example.com ", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["data"]["role"] == Role.ADMIN

    assert client.get("/api/auth/me/").json()["data"]["email"] == "admin@example.com"
    client.post("/api/auth/logout/")
    assert client.get("/api/auth/me/").status_code == 401


@pytest.mark.django_db
def test_signup(client):
    response = post(client, "/api/auth/signup/", {"email": "new@example.com", "password": "hunter22"})
    assert response.status_code == 201
    assert response.json()["data"]["role"] == Role.USER
    assert UserRole.objects.get(user__username="new@example.com").role == Role.USER

    response = post(client, "/api/auth/signup/", {"email": "new@example.com", "password": "hunter22"})
    assert response.status_code == 400
    response = post(client, "/api/auth/signup/", {"email": "short@example.com", "password": "123"})
    assert response.status_code == 400


def test_users_admin_only(admin_api, viewer_api, viewer):
    assert viewer_api.get("/api/users/").status_code == 403

    body = admin_api.get("/api/users/").json()["data"]
    assert body["stats"]["total"] == 2
    assert body["users"][0]["role_config"]["label"] == "Admin"
    assert body["users"][0]["last_sign_in_display"] != "Never"

    response = post(admin_api, f"/api/users/{viewer.pk}/role/", {"role": "user"})
    assert response.json()["data"] == {"user_id": viewer.pk, "role": "user"}
    assert UserRole.objects.get(user=viewer).role == Role.USER


@pytest.mark.django_db
def test_version_is_public(client, settings):
    settings.APP_VERSION = "3.1.0"
    body = client.get("/api/version/").json()["data"]
    assert body["version"] == "3.1.0"
    assert body["label"] == "v3.1.0"
    assert body["short"] == "v3.1"


def test_events_endpoint(admin_api):
    response = post(admin_api, "/api/events/", {
        "name": "Mega Auction", "event_type": "auction",
        "start_date": "2030-01-01T10:00:00", "end_date": "2030-01-01T18:00:00",
    })
    assert response.status_code == 201
    assert [e["name"] for e in admin_api.get("/api/events/", {"upcoming": "3"}).json()["data"]] == ["Mega Auction"]
    assert admin_api.get("/api/events/", {"upcoming": "many"}).status_code == 400


def test_dashboard(admin_api, config, team, players):
    body = admin_api.get("/api/dashboard/").json()["data"]
    assert body["welcome_message"] == "Welcome back, admin!"
    assert body["players"] == 4


def test_export_csv(admin_api, team, players):
    post(admin_api, "/api/team-players/", {
        "team_id": str(team.id), "player_id": str(players[0].id), "purchase_price": 120_000,
    })
    response = admin_api.get("/export/")
    assert response["Content-Type"] == "text/csv"
    assert "auction_final_report.csv" in response["Content-Disposition"]
    lines = response.content.decode().splitlines()
    assert lines[0] == "Team,Player,Price,Status,Position,Category,Nationality,Base_Price"
    assert lines[1].startswith("Chennai,Asha,120000,SOLD")


def test_impossible_date_gets_error_envelope(admin_api):
    response = post(admin_api, "/api/events/", {
        "name": "x", "event_type": "auction",
        "start_date": "2024-13-45T10:00:00", "end_date": "2024-12-01T11:00:00",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid"
