import asyncio

import pytest

from yodl.yapp.exceptions import (
    MalformedResponseError,
    NotEmbeddedError,
    RequestOutcomeError,
    SignatureCancelledError,
)
from yodl.yapp.types import PAYMENT_CANCELLED, SIWE_REQUEST, SIWE_RESPONSE, SiweRequest


@pytest.fixture
def siwe_request():
    return SiweRequest(
        domain="guest.example",
        uri="https://guest.example/login",
        chainId=1,
        nonce="n0nc3",
        statement="Sign in to Guest",
    )


@pytest.mark.anyio
async def test_sign_siwe_message(in_frame_sdk, host_window, siwe_request):
    task = asyncio.create_task(in_frame_sdk.sign_siwe_message(siwe_request))
    await asyncio.sleep(0)

    assert host_window.last_sent == {
        "kind": SIWE_REQUEST,
        "payload": {
            "domain": "guest.example",
            "uri": "https://guest.example/login",
            "version": "1",
            "chainId": 1,
            "nonce": "n0nc3",
            "statement": "Sign in to Guest",
        },
    }
    host_window.reply(SIWE_RESPONSE, {"address": "0xabc", "signature": "0xsig"})
    response = await task

    assert response.address == "0xabc"
    assert response.signature == "0xsig"
    assert len(in_frame_sdk.channel.registry) == 0


@pytest.mark.anyio
async def test_sign_siwe_message_cancelled(in_frame_sdk, host_window, siwe_request):
    host_window.responder = lambda message, origin: host_window.reply(PAYMENT_CANCELLED)

    with pytest.raises(SignatureCancelledError, match="Signature request was cancelled"):
        await in_frame_sdk.sign_siwe_message(siwe_request)
    assert len(in_frame_sdk.channel.registry) == 0


@pytest.mark.anyio
async def test_sign_siwe_message_malformed(in_frame_sdk, host_window, siwe_request):
    host_window.responder = lambda message, origin: host_window.reply(SIWE_RESPONSE, {"address": "0xabc"})

    with pytest.raises(MalformedResponseError, match="Malformed signature response") as exc_info:
        await in_frame_sdk.sign_siwe_message(siwe_request)
    assert isinstance(exc_info.value, RequestOutcomeError)
    assert len(in_frame_sdk.channel.registry) == 0


@pytest.mark.anyio
async def test_sign_siwe_message_outside_iframe(redirect_sdk, siwe_request):
    with pytest.raises(NotEmbeddedError, match="SIWE signing is only supported in iframe mode"):
        await redirect_sdk.sign_siwe_message(siwe_request)
