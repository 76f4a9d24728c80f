"""
Redirect round trip against a mock host payment page
"""

import asyncio

import httpx
import pytest

from yapp_testing import HOST_ORIGIN, create_mock_host
from yapp_testing.mock_host import MOCK_CHAIN_ID, MOCK_TX_HASH
from yodl.yapp.exceptions import PaymentCancelledError, PaymentFailedError

REDIRECT_URL = "https://guest.example/done?order=42"


async def _visit_host(app, url):
    """Follow the guest to the host page and return where the host sends it back"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=HOST_ORIGIN) as client:
        response = await client.get(url, follow_redirects=False)
    assert response.status_code == 302
    return response.headers["location"]


async def _round_trip(sdk, page, app, **kwargs):
    task = asyncio.create_task(
        sdk.request_payment("vitalik.eth", redirect_url=REDIRECT_URL, **kwargs)
    )
    await asyncio.sleep(0)

    page.hide()
    page.return_to(await _visit_host(app, page.navigations[-1]))
    return await task


@pytest.mark.anyio
async def test_round_trip_success(redirect_sdk, page):
    app = create_mock_host("success")

    result = await _round_trip(redirect_sdk, page, app, amount=12.5, currency="EUR", memo="order-42")

    assert result.tx_hash == MOCK_TX_HASH
    assert result.chain_id == MOCK_CHAIN_ID
    assert app.state.requests == [
        {
            "addressOrEns": "vitalik.eth",
            "redirectUrl": REDIRECT_URL,
            "memo": "order-42",
            "amount": 12.5,
            "currency": "EUR",
        }
    ]
    assert page.url == REDIRECT_URL


@pytest.mark.anyio
async def test_round_trip_derived_memo(redirect_sdk, page):
    app = create_mock_host("success")

    await _round_trip(redirect_sdk, page, app)

    assert len(app.state.requests[0]["memo"]) == 32
    assert app.state.requests[0]["amount"] is None


@pytest.mark.anyio
async def test_round_trip_cancelled(redirect_sdk, page):
    with pytest.raises(PaymentCancelledError):
        await _round_trip(redirect_sdk, page, create_mock_host("cancelled"))


@pytest.mark.anyio
async def test_round_trip_failed(redirect_sdk, page):
    with pytest.raises(PaymentFailedError):
        await _round_trip(redirect_sdk, page, create_mock_host("failed"))
