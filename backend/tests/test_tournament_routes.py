import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from kendo.main import app
from kendo.models.championship import Championship
from kendo.models.invite import InvitableKind, Invite
from kendo.models.tournament import Tournament
from kendo.routes.tournaments import get_rule_preset_provider
from kendo.rule_presets import MissingPresetEntryError, StaticRulePresetProvider
from kendo.services import tournament_service


@pytest.fixture
def tournament(client: TestClient):
    """Create a tournament for testing"""
    response = client.post(
        "/api/tournaments",
        json={
            "name": "Copa Kendo Lima",
            "date_ini": "2026-03-14",
            "date_fin": "2026-03-15",
            "register_date_limit": "2026-03-01",
            "type": 1,
            "level_id": 7,
        },
    )
    assert response.status_code == 201
    return response.json()


def test_create_tournament(tournament):
    assert tournament["slug"] == "copa-kendo-lima"
    assert tournament["date_ini"] == "2026-03-14"
    assert tournament["register_date_limit"] == "2026-03-01"
    assert tournament["is_open"] is True
    assert tournament["needs_invitation"] is False
    assert tournament["is_deleted"] is False


def test_create_rejects_invalid_type_and_level(client: TestClient):
    response = client.post("/api/tournaments", json={"name": "Bad", "type": 2})
    assert response.status_code == 422

    response = client.post("/api/tournaments", json={"name": "Bad", "level_id": 9})
    assert response.status_code == 422
    assert any("level_id must be between 1 and 8" in str(err) for err in response.json()["detail"])


def test_create_rejects_inverted_dates(client: TestClient):
    response = client.post(
        "/api/tournaments",
        json={"name": "Bad", "date_ini": "2026-03-15", "date_fin": "2026-03-14"},
    )
    assert response.status_code == 422
    assert any("date_fin must be >= date_ini" in str(err) for err in response.json()["detail"])


def test_create_with_rule_applies_preset(client: TestClient):
    response = client.post("/api/tournaments", json={"name": "IKF Cup", "rule_id": 1})
    assert response.status_code == 201
    slug = response.json()["slug"]

    categories = client.get(f"/api/tournaments/{slug}/categories").json()
    # Preset fixture covers categories 1 (single) and 3 (team)
    assert categories == {"category_ids": [1, 3], "has_team_category": 1}

    team_categories = client.get(f"/api/tournaments/{slug}/team-categories").json()
    assert list(team_categories.values()) == ["Team Male Adults"]


def test_failed_preset_leaves_no_tournament(client: TestClient, session: Session):
    broken = StaticRulePresetProvider({"ikf_settings": {1: {"fighting_areas": None}}})
    app.dependency_overrides[get_rule_preset_provider] = lambda: broken

    response = client.post("/api/tournaments", json={"name": "Broken Cup", "rule_id": 1})
    assert response.status_code == 500
    assert "Failed to create tournament" in response.json()["detail"]

    assert session.exec(select(Tournament)).all() == []
    assert session.exec(select(Championship)).all() == []


def test_missing_preset_entry_is_bad_request(client: TestClient, session: Session, monkeypatch):
    def lookup_fails(options, championship_id, category_id):
        raise MissingPresetEntryError(championship_id, category_id)

    monkeypatch.setattr(tournament_service, "settings_for_championship", lookup_fails)

    response = client.post("/api/tournaments", json={"name": "IKF Cup", "rule_id": 1})
    assert response.status_code == 400
    assert "No preset entry for category 1" in response.json()["detail"]
    assert session.exec(select(Tournament)).all() == []


def test_get_by_slug(client: TestClient, tournament):
    response = client.get(f"/api/tournaments/{tournament['slug']}")
    assert response.status_code == 200
    assert response.json()["id"] == tournament["id"]

    assert client.get("/api/tournaments/missing").status_code == 404


def test_update_keeps_slug(client: TestClient, tournament):
    response = client.put(f"/api/tournaments/{tournament['slug']}", json={"name": "Renamed", "type": 0})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["slug"] == "copa-kendo-lima"
    assert data["needs_invitation"] is True


@pytest.mark.parametrize("field", ["name", "type", "level_id", "rule_id", "sport"])
def test_update_rejects_null_for_required_fields(client: TestClient, tournament, field):
    response = client.put(f"/api/tournaments/{tournament['slug']}", json={field: None})
    assert response.status_code == 422
    assert any(f"{field} cannot be null" in str(err) for err in response.json()["detail"])

    # Nothing was written
    data = client.get(f"/api/tournaments/{tournament['slug']}").json()
    assert data["name"] == "Copa Kendo Lima"
    assert data["type"] == 1
    assert data["level_id"] == 7


def test_update_rejects_blank_name(client: TestClient, tournament):
    response = client.put(f"/api/tournaments/{tournament['slug']}", json={"name": "   "})
    assert response.status_code == 422


def test_delete_and_restore_flow(client: TestClient, session: Session, tournament):
    slug = tournament["slug"]
    client.post(f"/api/tournaments/{slug}/rules", json={"rule_id": 1})
    session.add(Invite(code="inv1", email="a@example.com", object_type=InvitableKind.TOURNAMENT, object_id=tournament["id"]))
    session.commit()

    assert client.delete(f"/api/tournaments/{slug}").status_code == 204
    assert client.get(f"/api/tournaments/{slug}").status_code == 404
    assert [t["slug"] for t in client.get("/api/tournaments").json()] == []
    trashed = client.get("/api/tournaments", params={"with_trashed": True}).json()
    assert [t["is_deleted"] for t in trashed] == [True]

    session.expire_all()
    assert session.exec(select(Invite)).all() == []

    response = client.post(f"/api/tournaments/{slug}/restore")
    assert response.status_code == 200
    assert response.json()["is_deleted"] is False
    assert client.get(f"/api/tournaments/{slug}/categories").json()["category_ids"] == [1, 3]

    # Restoring an active tournament is a conflict
    assert client.post(f"/api/tournaments/{slug}/restore").status_code == 409


def test_configure_rules(client: TestClient, tournament):
    slug = tournament["slug"]

    response = client.post(f"/api/tournaments/{slug}/rules", json={"rule_id": 0})
    assert response.status_code == 200
    assert response.json() == {"rule_id": 0, "category_ids": [], "settings_created": 0}

    response = client.post(f"/api/tournaments/{slug}/rules", json={"rule_id": 1})
    assert response.status_code == 200
    assert response.json() == {"rule_id": 1, "category_ids": [1, 3], "settings_created": 2}


def test_health(client: TestClient):
    assert client.get("/api/health").json()["status"] == "healthy"
