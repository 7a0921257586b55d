from party_planner_api.app.core.db import new_id

from .helpers import API


def _ask(client, event, user, question="Is there parking?"):
    return client.post(f"{API}/faqs/", json={"event_id": event["id"], "question": question}, headers=user["headers"])


def test_base_user_asks_organizer_answers(client, make_event, organizer, base_user):
    event = make_event()
    asked = _ask(client, event, base_user)
    assert asked.status_code == 201
    faq = asked.json()
    assert faq["answer"] is None
    assert faq["user_id"] == base_user["id"]

    answered = client.patch(f"{API}/faqs/{faq['id']}", json={"answer": "Yes"}, headers=organizer["headers"])
    assert answered.status_code == 200
    assert answered.json()["answer"] == "Yes"
    assert client.get(f"{API}/faqs/{faq['id']}").json()["answer"] == "Yes"
    assert [f["id"] for f in client.get(f"{API}/faqs/event/{event['id']}").json()] == [faq["id"]]


def test_only_base_users_ask(client, make_event, organizer, admin):
    event = make_event()
    assert _ask(client, event, organizer).status_code == 403
    assert _ask(client, event, admin).status_code == 403


def test_question_on_missing_event(client, base_user):
    response = _ask(client, {"id": new_id()}, base_user)
    assert response.status_code == 404
    assert response.json() == {"error": "Event not found"}
    assert client.get(f"{API}/faqs/event/{new_id()}").status_code == 404


def test_only_event_organizer_answers(client, make_event, make_user, base_user):
    event = make_event()
    faq = _ask(client, event, base_user).json()
    other_organizer = make_user("organizer")
    for user in (other_organizer, base_user):
        response = client.patch(f"{API}/faqs/{faq['id']}", json={"answer": "No"}, headers=user["headers"])
        assert response.status_code == 403
    assert client.patch(f"{API}/faqs/{new_id()}", json={"answer": "No"}, headers=base_user["headers"]).status_code == 404


def test_only_asker_deletes(client, make_event, make_user, organizer):
    event = make_event()
    asker = make_user()
    faq = _ask(client, event, asker).json()
    assert client.delete(f"{API}/faqs/{faq['id']}", headers=organizer["headers"]).status_code == 403
    assert client.delete(f"{API}/faqs/{faq['id']}", headers=asker["headers"]).status_code == 204
    assert client.delete(f"{API}/faqs/{faq['id']}", headers=asker["headers"]).status_code == 404
    assert client.get(f"{API}/faqs/{faq['id']}").status_code == 404


def test_empty_faq_list(client, make_event):
    event = make_event()
    assert client.get(f"{API}/faqs/event/{event['id']}").json() == []
