from party_planner_api.app.core.db import new_id

from .helpers import API, post_payload, register_user


def _payload(**overrides):
    payload = {
        "username": "anna",
        "name": "Anna",
        "email": "anna@example.com",
        "gender": "F",
        "notification_preference": "email",
        "role": "base_user",
        "password": "secret",
    }
    payload.update(overrides)
    return payload


def test_register_returns_unverified_user_with_token(client):
    response = client.post(f"{API}/users/", json=_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["verified"] is False
    assert body["verification_token"]
    assert len(body["id"]) == 24
    assert "password" not in body


def test_client_supplied_verification_token_is_kept(client):
    body = client.post(f"{API}/users/", json=_payload(verification_token="abc123")).json()
    assert body["verification_token"] == "abc123"
    assert client.get(f"{API}/email/verify", params={"token": "abc123"}).status_code == 200


def test_duplicate_email_is_checked_before_username(client):
    client.post(f"{API}/users/", json=_payload())
    both = client.post(f"{API}/users/", json=_payload())
    assert both.status_code == 409
    assert both.json() == {"error": "Registration failed, email already exists"}

    username_only = client.post(f"{API}/users/", json=_payload(email="other@example.com"))
    assert username_only.status_code == 409
    assert username_only.json() == {"error": "Registration failed, username already exists"}


def test_missing_field_and_unknown_role_are_rejected(client):
    payload = _payload()
    del payload["name"]
    missing = client.post(f"{API}/users/", json=payload)
    assert missing.status_code == 400
    assert missing.json()["error"] == "Missing required fields"
    assert client.post(f"{API}/users/", json=_payload(role="superuser")).status_code == 400
    assert client.post(f"{API}/users/", json=_payload(email="not-an-email")).status_code == 400


def test_verification_is_one_time(client):
    token = client.post(f"{API}/users/", json=_payload()).json()["verification_token"]
    assert client.get(f"{API}/email/verify", params={"token": token}).status_code == 200
    # The token is consumed, so a second use no longer finds the account
    assert client.get(f"{API}/email/verify", params={"token": token}).status_code == 404
    assert client.get(f"{API}/email/verify").status_code == 400


def test_list_users_by_role(client):
    organizer = register_user(client, role="organizer", verify=False)
    register_user(client, role="base_user", verify=False)

    listed = client.get(f"{API}/users/", params={"role": "organizer"}).json()
    assert [u["id"] for u in listed] == [organizer["id"]]
    assert client.get(f"{API}/users/", params={"role": "administrator"}).json() == []
    assert client.get(f"{API}/users/", params={"role": "nobody"}).status_code == 400


def test_get_user_and_me(client, base_user):
    assert client.get(f"{API}/users/{base_user['id']}").json()["username"] == base_user["username"]
    assert client.get(f"{API}/users/me", headers=base_user["headers"]).json()["id"] == base_user["id"]
    assert client.get(f"{API}/users/{new_id()}").status_code == 404
    assert client.get(f"{API}/users/me").status_code == 401


def test_rename(client, make_user):
    user = make_user()
    other = make_user()

    renamed = client.patch(f"{API}/users/me", json={"username": "fresh_name"}, headers=user["headers"])
    assert renamed.status_code == 200
    assert renamed.json()["username"] == "fresh_name"

    # Keeping one's own name is fine, taking someone else's is not
    assert client.patch(f"{API}/users/me", json={"username": "fresh_name"}, headers=user["headers"]).status_code == 200
    clash = client.patch(f"{API}/users/me", json={"username": other["username"]}, headers=user["headers"])
    assert clash.status_code == 409
    assert clash.json() == {"error": "Username already exists"}


def test_profile_lists_todays_posts(client, base_user):
    post = client.post(f"{API}/posts/", json=post_payload(), headers=base_user["headers"]).json()
    profile = client.get(f"{API}/users/{base_user['id']}/profile")
    assert profile.status_code == 200
    assert profile.json()["user"]["id"] == base_user["id"]
    assert [p["id"] for p in profile.json()["posts"]] == [post["id"]]
    assert client.get(f"{API}/users/{new_id()}/profile").status_code == 404


def test_delete_me_removes_participations_and_likes(client, make_event, make_user):
    author = make_user()
    leaver = make_user()
    event = make_event()
    post = client.post(f"{API}/posts/", json=post_payload(), headers=author["headers"]).json()
    client.post(f"{API}/participations/events/{event['id']}", headers=leaver["headers"])
    client.post(f"{API}/likes/{post['id']}", headers=leaver["headers"])

    assert client.delete(f"{API}/users/me", headers=leaver["headers"]).status_code == 204

    assert client.get(f"{API}/users/{leaver['id']}").status_code == 404
    assert client.get(f"{API}/participations/events/{event['id']}").json() == []
    assert client.get(f"{API}/likes/post/{post['id']}").json() == []
    assert client.delete(f"{API}/users/me", headers=leaver["headers"]).status_code == 404


def test_verifying_a_verified_account_is_rejected(client, app):
    user = client.post(f"{API}/users/", json=_payload(verification_token="tok")).json()
    app.state.db.execute(
        lambda conn: conn.execute("UPDATE users SET verified = 1 WHERE id = ?", (user["id"],)),
        write=True,
    )
    response = client.get(f"{API}/email/verify", params={"token": "tok"})
    assert response.status_code == 400
    assert response.json() == {"error": "User already verified"}
