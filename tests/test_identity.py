import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.errors import IdentityServiceError
from app.services.identity import IdentityClient, profile_from_user


CLERK_USER = {
    "id": "user_2abc",
    "username": "alice",
    "email_addresses": [
        {"email_address": "alice@example.com"},
        {"email_address": "alice@work.example.com"},
    ],
    "image_url": "https://img.clerk.com/alice.png",
}


def test_profile_uses_username_and_first_email():
    profile = profile_from_user(CLERK_USER)
    assert profile.id == "user_2abc"
    assert profile.display_name == "alice"
    assert profile.email == "alice@example.com"
    assert profile.profile_image_url == "https://img.clerk.com/alice.png"


def test_profile_optional_fields_missing():
    profile = profile_from_user({
        "id": "user_1", "username": None, "email_addresses": [], "profile_image_url": "https://x/y.png",
    })
    assert profile.display_name is None
    assert profile.email is None
    assert profile.profile_image_url == "https://x/y.png"


def _client_with_response(payload):
    client = IdentityClient("https://api.example.com/v1/", "sk_test")
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return client, response


def test_get_user_list_sends_one_batched_request():
    client, response = _client_with_response([CLERK_USER])
    with patch.object(client.session, "get", return_value=response) as get:
        profiles = asyncio.run(client.get_user_list(["user_2abc", "user_3def"], limit=100))

    assert [p.id for p in profiles] == ["user_2abc"]
    get.assert_called_once()
    args, kwargs = get.call_args
    assert args[0] == "https://api.example.com/v1/users"
    assert kwargs["params"] == [("user_id", "user_2abc"), ("user_id", "user_3def"), ("limit", "100")]
    assert client.session.headers["Authorization"] == "Bearer sk_test"


def test_get_user_list_accepts_wrapped_response():
    client, response = _client_with_response({"data": [CLERK_USER], "total_count": 1})
    with patch.object(client.session, "get", return_value=response):
        profiles = asyncio.run(client.get_user_list(["user_2abc"]))
    assert profiles[0].display_name == "alice"


def test_get_user_list_skips_request_for_no_ids():
    client = IdentityClient("https://api.example.com/v1", "sk_test")
    with patch.object(client.session, "get") as get:
        assert asyncio.run(client.get_user_list([])) == []
    get.assert_not_called()


def test_get_user_list_raises_on_transport_error():
    client = IdentityClient("https://api.example.com/v1", "sk_test")
    with patch.object(client.session, "get", side_effect=requests.ConnectionError("boom")):
        with pytest.raises(IdentityServiceError):
            asyncio.run(client.get_user_list(["user_1"]))


def test_get_user_list_raises_on_error_status():
    client, response = _client_with_response({})
    response.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")
    with patch.object(client.session, "get", return_value=response):
        with pytest.raises(IdentityServiceError):
            asyncio.run(client.get_user_list(["user_1"]))
