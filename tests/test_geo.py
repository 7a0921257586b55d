import math

import pytest

from party_planner_api.app.core.errors import InvalidCoordinates
from party_planner_api.app.services.geo import (
    EARTH_RADIUS_KM,
    find_within_radius,
    haversine_km,
    validate_coordinates,
)

from .helpers import API, post_payload


def _pos(item):
    return item


def test_haversine_known_distance():
    # Trento -> Rovereto, roughly 21 km apart
    distance = haversine_km(46.0667, 11.1167, 45.8904, 11.0340)
    assert 19 < distance < 22
    assert haversine_km(10, 20, 10, 20) == 0


def test_one_degree_of_latitude():
    assert haversine_km(0, 0, 1, 0) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)


def test_point_exactly_on_radius_is_included():
    point = (1.0, 0.0)
    radius = haversine_km(0.0, 0.0, *point)
    assert find_within_radius([point], 0.0, 0.0, radius, position=_pos) == [point]


def test_filter_keeps_input_order_and_drops_far_points():
    points = [(0.5, 0.0), (10.0, 10.0), (0.0, 0.1), (-0.2, 0.0)]
    assert find_within_radius(points, 0.0, 0.0, 100, position=_pos) == [(0.5, 0.0), (0.0, 0.1), (-0.2, 0.0)]


def test_no_match_is_empty_list():
    assert find_within_radius([(50.0, 50.0)], 0.0, 0.0, 1, position=_pos) == []


@pytest.mark.parametrize("lat,lng", [(200, 0), (-90.01, 0), (0, 180.5), (0, -181), (float("nan"), 0)])
def test_invalid_coordinates(lat, lng):
    with pytest.raises(InvalidCoordinates):
        validate_coordinates(lat, lng)


def test_invalid_latitude_fails_even_with_nothing_to_search():
    with pytest.raises(InvalidCoordinates):
        find_within_radius([], 200, 0, 10, position=_pos)


def test_negative_radius_is_invalid():
    with pytest.raises(InvalidCoordinates):
        find_within_radius([(0, 0)], 0, 0, -1, position=_pos)


def test_bounds_are_inclusive():
    validate_coordinates(90, 180)
    validate_coordinates(-90, -180)


def test_post_radius_search_over_http(client, base_user):
    near = client.post(f"{API}/posts/", json=post_payload(46.0667, 11.1167), headers=base_user["headers"]).json()
    client.post(f"{API}/posts/", json=post_payload(41.9, 12.5), headers=base_user["headers"])

    query = {"lat": 46.07, "lng": 11.12, "rad": 10}
    first = client.post(f"{API}/posts/search", json=query)
    second = client.post(f"{API}/posts/search", json=query)
    assert first.status_code == 200
    assert [p["id"] for p in first.json()] == [near["id"]]
    assert first.json() == second.json()


def test_radius_search_rejects_bad_latitude(client):
    response = client.post(f"{API}/posts/search", json={"lat": 200, "lng": 0, "rad": 5})
    assert response.status_code == 400
    response = client.post(f"{API}/events/search", json={"lat": 200, "lng": 0, "rad": 5})
    assert response.status_code == 400


def test_radius_search_requires_all_fields(client):
    response = client.post(f"{API}/parties/search", json={"lat": 10})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_event_radius_and_exact_location(client, make_event):
    event = make_event(position={"latitude": 45.0, "longitude": 9.0})
    make_event(position={"latitude": 40.0, "longitude": 15.0})

    found = client.post(f"{API}/events/search", json={"lat": 45.0, "lng": 9.0, "rad": 1}).json()
    assert [e["id"] for e in found] == [event["id"]]

    exact = client.post(f"{API}/events/location", json={"lat": 45.0, "lng": 9.0}).json()
    assert [e["id"] for e in exact] == [event["id"]]
    assert client.post(f"{API}/events/location", json={"lat": 45.0001, "lng": 9.0}).json() == []
