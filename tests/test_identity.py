"""Identity client tests (provider mocked with httpx.MockTransport)."""

import httpx
import pytest

from reviewhub.services.identity import IdentityClient, IdentityError, parse_bearer_token


def _client(handler) -> IdentityClient:
    client = IdentityClient(base_url="https://auth.example.com/", api_key="anon-key", timeout=5)
    client._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc", "abc"),
        ("bearer  abc ", "abc"),
        ("Basic abc", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_bearer_token(header, expected) -> None:
    assert parse_bearer_token(header) == expected


async def test_get_user_sends_token_and_api_key() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers["authorization"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(
            200,
            json={"id": "user-1", "email": "a@example.com", "email_confirmed_at": "2026-01-01T00:00:00Z"},
        )

    client = _client(handler)
    user = await client.get_user("tok")
    await client.close()

    assert user is not None
    assert user.id == "user-1"
    assert user.email == "a@example.com"
    assert user.email_confirmed is True
    assert seen == {
        "url": "https://auth.example.com/auth/v1/user",
        "authorization": "Bearer tok",
        "apikey": "anon-key",
    }


async def test_rejected_token_returns_none() -> None:
    client = _client(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))
    assert await client.get_user("expired") is None
    await client.close()


async def test_provider_failure_raises() -> None:
    client = _client(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(IdentityError):
        await client.get_user("tok")
    await client.close()


async def test_payload_without_id_raises() -> None:
    client = _client(lambda request: httpx.Response(200, json={"email": "a@example.com"}))
    with pytest.raises(IdentityError):
        await client.get_user("tok")
    await client.close()
