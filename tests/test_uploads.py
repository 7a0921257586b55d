import hashlib

import pytest

from party_planner_api.app.core.config import Settings
from party_planner_api.app.core.errors import UpstreamError
from party_planner_api.app.services.upload_service import UploadContext, UploadService, sign_params

from .helpers import API


def _expected(timestamp, preset, secret="secret-456"):
    return hashlib.sha1(f"timestamp={timestamp}&upload_preset={preset}{secret}".encode()).hexdigest()


def test_signature_scheme():
    assert sign_params({"upload_preset": "Post", "timestamp": 1700000000}, "s") == _expected(1700000000, "Post", "s")


@pytest.mark.parametrize(
    "context,preset",
    [("post", "Post"), ("party", "Party"), ("event", "Event"), ("profile-photo", "ProfilePhoto")],
)
def test_presets(client, make_user, context, preset):
    role = "organizer" if context == "event" else "base_user"
    user = make_user(role)
    response = client.post(f"{API}/uploads/{context}/signature", headers=user["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["upload_preset"] == preset
    assert body["api_key"] == "key-123"
    assert body["cloud_name"] == "demo"
    assert body["signature"] == _expected(body["timestamp"], preset)


def test_role_gating(client, organizer, base_user):
    assert client.post(f"{API}/uploads/post/signature", headers=organizer["headers"]).status_code == 403
    assert client.post(f"{API}/uploads/party/signature", headers=organizer["headers"]).status_code == 403
    assert client.post(f"{API}/uploads/event/signature", headers=base_user["headers"]).status_code == 403
    assert client.post(f"{API}/uploads/post/signature").status_code == 401


def test_profile_photo_is_open(client):
    assert client.post(f"{API}/uploads/profile-photo/signature").status_code == 200


def test_unknown_context(client):
    assert client.post(f"{API}/uploads/video/signature").status_code == 400


def test_unconfigured_image_host():
    with pytest.raises(UpstreamError):
        UploadService.sign_upload(Settings(cloud_api_key="", cloud_api_secret=""), UploadContext.PROFILE_PHOTO)
