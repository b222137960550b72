from types import SimpleNamespace

from fastapi.responses import JSONResponse
from limits import parse
from starlette.requests import Request

from marketplace.middleware.auth import SessionCookies, get_session_context
from marketplace.middleware.rate_limit import (
    custom_rate_limit_handler,
    get_user_or_ip,
    retry_after_seconds,
)


def make_request(cookie: str | None = None, state: dict | None = None) -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return Request(
        {"type": "http", "headers": headers, "client": ("10.0.0.7", 1234), "state": state or {}}
    )


def cookie_header(session) -> str:
    return f"sb-access-token={session.access_token}; sb-refresh-token={session.refresh_token}"


def test_rate_limit_key_prefers_session_user():
    assert get_user_or_ip(make_request()) == "ip:10.0.0.7"
    assert get_user_or_ip(make_request(state={"user_id": "u1"})) == "user:u1"


async def test_rate_limit_key_survives_token_refresh(fake_client):
    user = fake_client.sign_in_as("me@example.com")
    first = make_request(cookie_header(fake_client.auth.session))
    await get_session_context(first, fake_client)

    refreshed = fake_client.auth._start_session(user)
    second = make_request(cookie_header(refreshed))
    await get_session_context(second, fake_client)

    assert get_user_or_ip(first) == get_user_or_ip(second) == f"user:{user.id}"


async def test_rejected_session_is_limited_by_ip(fake_client):
    request = make_request("sb-access-token=old; sb-refresh-token=old")

    context = await get_session_context(request, fake_client)

    assert get_user_or_ip(request) == "ip:10.0.0.7"
    assert context.cookies.changed is True


def test_unchanged_session_writes_no_cookies():
    response = SessionCookies().apply(JSONResponse({}))

    assert response.headers.getlist("set-cookie") == []


def test_new_session_sets_http_only_cookies():
    cookies = SessionCookies()
    cookies.track("TOKEN_REFRESHED", SimpleNamespace(access_token="a1", refresh_token="r1"))

    headers = cookies.apply(JSONResponse({})).headers.getlist("set-cookie")

    assert len(headers) == 2
    assert headers[0].startswith("sb-access-token=a1;")
    assert headers[1].startswith("sb-refresh-token=r1;")
    assert all("HttpOnly" in header and "SameSite=lax" in header for header in headers)


def test_sign_out_deletes_cookies():
    cookies = SessionCookies()
    cookies.track("SIGNED_IN", SimpleNamespace(access_token="a1", refresh_token="r1"))
    cookies.track("SIGNED_OUT", None)

    headers = cookies.apply(JSONResponse({})).headers.getlist("set-cookie")

    assert cookies.access_token is None
    assert all("Max-Age=0" in header for header in headers)


def test_rate_limit_response_uses_limit_window():
    exc = SimpleNamespace(limit=SimpleNamespace(limit=parse("5/hour")))

    response = custom_rate_limit_handler(make_request(), exc)

    assert response.status_code == 429
    assert response.headers["retry-after"] == "3600"
    assert retry_after_seconds(SimpleNamespace()) == 60
