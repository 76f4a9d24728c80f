import pytest

from yodl.yapp.config import ProtocolConfig
from yodl.yapp.exceptions import MalformedResponseError, NotEmbeddedError, RequestTimedOutError
from yodl.yapp.types import (
    GET_COOKIES_REQUEST,
    GET_COOKIES_RESPONSE,
    SAVE_COOKIES_REQUEST,
    SAVE_COOKIES_RESPONSE,
    Cookie,
    CookieData,
)


def _echo(host_window, kind):
    """Host that answers with the payload it received"""
    host_window.responder = lambda message, origin: host_window.reply(kind, message.get("payload"))


@pytest.mark.anyio
async def test_save_cookies_sets_default_expiry(in_frame_sdk, host_window, clock):
    _echo(host_window, SAVE_COOKIES_RESPONSE)
    now_ms = int(clock() * 1000)

    saved = await in_frame_sdk.save_cookies(
        [
            Cookie(key="theme", data=CookieData(value="dark")),
            Cookie(key="session", data=CookieData(value={"id": 1}, exp=123)),
        ]
    )

    sent = host_window.last_sent
    assert sent["kind"] == SAVE_COOKIES_REQUEST
    assert sent["payload"][0] == {
        "key": "theme",
        "data": {"value": "dark", "exp": now_ms + ProtocolConfig.COOKIE_DEFAULT_EXPIRY_MS},
    }
    assert sent["payload"][1]["data"]["exp"] == 123
    assert [cookie.key for cookie in saved] == ["theme", "session"]


@pytest.mark.anyio
async def test_get_cookies(in_frame_sdk, host_window):
    host_window.responder = lambda message, origin: host_window.reply(
        GET_COOKIES_RESPONSE, [{"key": "theme", "data": {"value": "dark", "exp": 1}}]
    )

    cookies = await in_frame_sdk.get_cookies(["theme"])

    assert host_window.last_sent == {"kind": GET_COOKIES_REQUEST, "payload": ["theme"]}
    assert cookies[0].data.value == "dark"


@pytest.mark.anyio
async def test_get_all_cookies(in_frame_sdk, host_window):
    host_window.responder = lambda message, origin: host_window.reply(GET_COOKIES_RESPONSE)

    assert await in_frame_sdk.get_cookies() == []
    assert host_window.last_sent == {"kind": GET_COOKIES_REQUEST}


@pytest.mark.anyio
async def test_get_cookies_malformed(in_frame_sdk, host_window):
    host_window.responder = lambda message, origin: host_window.reply(GET_COOKIES_RESPONSE, [{"key": "theme"}])

    with pytest.raises(MalformedResponseError, match="Malformed cookie response"):
        await in_frame_sdk.get_cookies(["theme"])


@pytest.mark.anyio
async def test_cookie_request_timeout(in_frame_sdk):
    with pytest.raises(RequestTimedOutError, match="Cookie retrieval request timed out"):
        await in_frame_sdk.get_cookies()


@pytest.mark.anyio
async def test_cookies_outside_iframe(redirect_sdk):
    with pytest.raises(NotEmbeddedError, match="only supported in iframe mode"):
        await redirect_sdk.save_cookies([Cookie(key="theme", data=CookieData(value="dark"))])
