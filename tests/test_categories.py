from party_planner_api.app.core.db import new_id

from .helpers import API


def test_category_round_trip(client, admin):
    created = client.post(f"{API}/categories/", json={"name": "Music"}, headers=admin["headers"])
    assert created.status_code == 201
    category = created.json()
    assert category["name"] == "Music"
    assert category["id"]

    fetched = client.get(f"{API}/categories/{category['id']}").json()
    assert fetched == category

    listed = client.get(f"{API}/categories/").json()
    assert [c["id"] for c in listed].count(category["id"]) == 1


def test_only_administrators_manage_categories(client, admin, organizer, base_user):
    for user in (organizer, base_user):
        response = client.post(f"{API}/categories/", json={"name": "Sport"}, headers=user["headers"])
        assert response.status_code == 403

    category = client.post(f"{API}/categories/", json={"name": "Sport"}, headers=admin["headers"]).json()
    assert client.delete(f"{API}/categories/{category['id']}", headers=organizer["headers"]).status_code == 403
    assert client.delete(f"{API}/categories/{category['id']}", headers=admin["headers"]).status_code == 204
    assert client.delete(f"{API}/categories/{category['id']}", headers=admin["headers"]).status_code == 404


def test_missing_category(client):
    response = client.get(f"{API}/categories/{new_id()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Category not found"}
    assert client.get(f"{API}/categories/").json() == []


def test_empty_name_is_rejected(client, admin):
    assert client.post(f"{API}/categories/", json={"name": ""}, headers=admin["headers"]).status_code == 400
