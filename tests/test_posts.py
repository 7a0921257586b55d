from party_planner_api.app.core.db import new_id

from .helpers import API, post_payload


def test_only_base_users_publish_posts(client, base_user, organizer, admin):
    created = client.post(f"{API}/posts/", json=post_payload(), headers=base_user["headers"])
    assert created.status_code == 201
    assert created.json()["user_id"] == base_user["id"]
    for user in (organizer, admin):
        assert client.post(f"{API}/posts/", json=post_payload(), headers=user["headers"]).status_code == 403
    assert client.post(f"{API}/posts/", json=post_payload()).status_code == 401


def test_post_with_invalid_coordinates(client, base_user):
    response = client.post(f"{API}/posts/", json=post_payload(latitude=200), headers=base_user["headers"])
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid latitude or longitude"}


def test_list_get_and_by_user(client, make_user):
    alice = make_user()
    bob = make_user()
    first = client.post(f"{API}/posts/", json=post_payload(), headers=alice["headers"]).json()
    second = client.post(f"{API}/posts/", json=post_payload(), headers=bob["headers"]).json()

    assert [p["id"] for p in client.get(f"{API}/posts/").json()] == [first["id"], second["id"]]
    assert client.get(f"{API}/posts/{first['id']}").json() == first
    assert [p["id"] for p in client.get(f"{API}/posts/user/{bob['id']}").json()] == [second["id"]]
    assert client.get(f"{API}/posts/user/{new_id()}").json() == []
    assert client.get(f"{API}/posts/{new_id()}").status_code == 404


def test_delete_post_ownership(client, make_user):
    owner = make_user()
    intruder = make_user()
    post = client.post(f"{API}/posts/", json=post_payload(), headers=owner["headers"]).json()

    assert client.delete(f"{API}/posts/{post['id']}", headers=intruder["headers"]).status_code == 403
    assert client.delete(f"{API}/posts/{post['id']}", headers=owner["headers"]).status_code == 204
    assert client.delete(f"{API}/posts/{post['id']}", headers=owner["headers"]).status_code == 404


def test_delete_post_removes_comments_and_likes(client, app, base_user):
    post = client.post(f"{API}/posts/", json=post_payload(), headers=base_user["headers"]).json()
    client.post(f"{API}/comments/", json={"post_id": post["id"], "text": "nice"}, headers=base_user["headers"])
    client.post(f"{API}/likes/{post['id']}", headers=base_user["headers"])

    client.delete(f"{API}/posts/{post['id']}", headers=base_user["headers"])

    counts = app.state.db.execute(
        lambda conn: (
            conn.execute("SELECT COUNT(*) FROM comments").fetchone()[0],
            conn.execute("SELECT COUNT(*) FROM likes").fetchone()[0],
        )
    )
    assert counts == (0, 0)


def test_exact_location_lookup(client, base_user):
    post = client.post(f"{API}/posts/", json=post_payload(10.5, 20.25), headers=base_user["headers"]).json()
    found = client.post(f"{API}/posts/location", json={"lat": 10.5, "lng": 20.25}).json()
    assert [p["id"] for p in found] == [post["id"]]
    assert client.post(f"{API}/posts/location", json={"lat": 100, "lng": 0}).status_code == 400
