import pytest

from party_planner_api.app.core.db import new_id

from .helpers import API, post_payload


@pytest.fixture
def post(client, base_user):
    return client.post(f"{API}/posts/", json=post_payload(), headers=base_user["headers"]).json()


def _comment(client, post, user, text="Great!"):
    response = client.post(f"{API}/comments/", json={"post_id": post["id"], "text": text}, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_any_role_can_comment(client, post, organizer, admin):
    for user in (organizer, admin):
        comment = _comment(client, post, user)
        assert comment["user_id"] == user["id"]
        assert comment["likes"] == []
    listed = client.get(f"{API}/comments/post/{post['id']}").json()
    assert [c["user_id"] for c in listed] == [organizer["id"], admin["id"]]


def test_comment_on_missing_post(client, base_user):
    response = client.post(f"{API}/comments/", json={"post_id": new_id(), "text": "hi"}, headers=base_user["headers"])
    assert response.status_code == 404
    assert client.get(f"{API}/comments/post/{new_id()}").status_code == 404
    assert client.post(f"{API}/comments/", json={"post_id": new_id(), "text": "hi"}).status_code == 401


def test_comment_delete_ownership(client, post, make_user):
    author = make_user()
    other = make_user()
    comment = _comment(client, post, author)
    assert client.delete(f"{API}/comments/{comment['id']}", headers=other["headers"]).status_code == 403
    assert client.delete(f"{API}/comments/{comment['id']}", headers=author["headers"]).status_code == 204
    assert client.delete(f"{API}/comments/{comment['id']}", headers=author["headers"]).status_code == 404


def test_comment_likes(client, post, make_user):
    author = make_user()
    fan = make_user(username="fan_one")
    comment = _comment(client, post, author)
    path = f"{API}/comments/{comment['id']}/likes"

    liked = client.post(path, headers=fan["headers"])
    assert liked.status_code == 201
    assert [like["user_id"] for like in liked.json()["likes"]] == [fan["id"]]
    assert client.post(path, headers=fan["headers"]).status_code == 409

    likes = client.get(path).json()
    assert likes[0]["username"] == "fan_one"

    unliked = client.delete(path, headers=fan["headers"])
    assert unliked.status_code == 200
    assert unliked.json()["likes"] == []
    assert client.delete(path, headers=fan["headers"]).status_code == 404
    assert client.post(path, headers=fan["headers"]).status_code == 201


def test_likes_on_missing_comment(client, base_user):
    assert client.post(f"{API}/comments/{new_id()}/likes", headers=base_user["headers"]).status_code == 404
    assert client.get(f"{API}/comments/{new_id()}/likes").status_code == 404


def test_post_like_once_per_user(client, post, make_user):
    fan = make_user()
    first = client.post(f"{API}/likes/{post['id']}", headers=fan["headers"])
    assert first.status_code == 201
    assert first.json()["user_id"] == fan["id"]
    duplicate = client.post(f"{API}/likes/{post['id']}", headers=fan["headers"])
    assert duplicate.status_code == 409
    assert duplicate.json() == {"error": "You already liked this post"}
    assert len(client.get(f"{API}/likes/post/{post['id']}").json()) == 1


def test_post_like_delete_ownership(client, post, make_user):
    fan = make_user()
    other = make_user()
    like = client.post(f"{API}/likes/{post['id']}", headers=fan["headers"]).json()
    assert client.delete(f"{API}/likes/{like['id']}", headers=other["headers"]).status_code == 403
    assert client.delete(f"{API}/likes/{like['id']}", headers=fan["headers"]).status_code == 204
    assert client.delete(f"{API}/likes/{like['id']}", headers=fan["headers"]).status_code == 404
    assert client.get(f"{API}/likes/post/{post['id']}").json() == []


def test_likes_on_missing_post(client, base_user):
    assert client.post(f"{API}/likes/{new_id()}", headers=base_user["headers"]).status_code == 404
    assert client.get(f"{API}/likes/post/{new_id()}").status_code == 404
