import asyncio
import json
from unittest.mock import Mock
from urllib.parse import parse_qs, urlsplit

import pytest

from yapp_testing import FakePage
from yodl.yapp import YappSDK
from yodl.yapp.config import ProtocolConfig
from yodl.yapp.exceptions import (
    PaymentCancelledError,
    PaymentFailedError,
    PaymentSupersededError,
    PaymentTimedOutError,
)
from yodl.yapp.transport import TransportMode

REDIRECT_URL = "https://guest.example/done"


async def _start(sdk, memo="abc123", **kwargs):
    task = asyncio.create_task(
        sdk.request_payment("vitalik.eth", memo=memo, redirect_url=REDIRECT_URL, **kwargs)
    )
    await asyncio.sleep(0)
    return task


async def _abandon(task):
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


def _stored(storage):
    raw = storage.get_item(ProtocolConfig.STORAGE_KEY)
    return json.loads(raw) if raw is not None else None


@pytest.mark.anyio
async def test_redirect_navigates_to_host_payment_page(redirect_sdk, page, storage):
    task = await _start(redirect_sdk, amount=50, currency="USD")

    assert redirect_sdk.transport_mode is TransportMode.REDIRECT
    assert len(page.navigations) == 1
    parts = urlsplit(page.navigations[0])
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://yodl.me/vitalik.eth"
    assert parse_qs(parts.query) == {
        "redirectUrl": [REDIRECT_URL],
        "memo": ["abc123"],
        "amount": ["50"],
        "currency": ["USD"],
    }

    record = _stored(storage)
    assert record["memo"] == "abc123"
    assert record["redirectUrl"] == REDIRECT_URL
    assert record["payload"]["addressOrEns"] == "vitalik.eth"
    assert redirect_sdk.payments.pending_memo == "abc123"
    assert page.listener_count == 1

    await _abandon(task)
    assert page.listener_count == 0


@pytest.mark.anyio
async def test_redirect_return_success(redirect_sdk, page, storage):
    task = await _start(redirect_sdk)

    page.return_to(f"{REDIRECT_URL}?order=7&memo=abc123&txHash=0xdeadbeef&chainId=8453")
    result = await task

    assert result.tx_hash == "0xdeadbeef"
    assert result.chain_id == 8453
    assert _stored(storage) is None
    assert page.url == f"{REDIRECT_URL}?order=7"
    assert page.listener_count == 0
    assert redirect_sdk.payments.pending_memo is None


@pytest.mark.anyio
async def test_redirect_return_cancelled(redirect_sdk, page, storage):
    task = await _start(redirect_sdk)

    page.return_to(f"{REDIRECT_URL}?memo=abc123&status=cancelled")

    with pytest.raises(PaymentCancelledError):
        await task
    assert _stored(storage) is None
    assert page.url == REDIRECT_URL


@pytest.mark.anyio
@pytest.mark.parametrize(
    "query",
    [
        "memo=abc123&status=failed",
        "memo=abc123",
        "memo=abc123&txHash=0xdeadbeef",
        "memo=abc123&txHash=0xdeadbeef&chainId=base",
    ],
)
async def test_redirect_return_failure(redirect_sdk, page, storage, query):
    task = await _start(redirect_sdk)

    page.return_to(f"{REDIRECT_URL}?{query}")

    with pytest.raises(PaymentFailedError):
        await task
    assert _stored(storage) is None


@pytest.mark.anyio
async def test_success_does_not_require_status(redirect_sdk, page):
    """txHash and chainId are enough even when status says otherwise"""
    task = await _start(redirect_sdk)

    page.return_to(f"{REDIRECT_URL}?memo=abc123&status=cancelled&txHash=0x1&chainId=1")

    assert (await task).tx_hash == "0x1"


@pytest.mark.anyio
async def test_return_for_other_memo_is_ignored(redirect_sdk, page, storage):
    task = await _start(redirect_sdk)
    other_return = f"{REDIRECT_URL}?memo=other&txHash=0x1&chainId=1"

    page.return_to(other_return)
    await asyncio.sleep(0)

    assert not task.done()
    assert _stored(storage)["memo"] == "abc123"
    assert page.url == other_return
    assert page.replacements == []

    page.return_to(f"{REDIRECT_URL}?memo=abc123&txHash=0x2&chainId=1")
    assert (await task).tx_hash == "0x2"


@pytest.mark.anyio
async def test_hidden_page_is_not_checked(redirect_sdk, page):
    task = await _start(redirect_sdk)

    page.url = f"{REDIRECT_URL}?memo=abc123&txHash=0x1&chainId=1"
    page.hide()
    await asyncio.sleep(0)
    assert not task.done()

    page.return_to(page.url)
    assert (await task).tx_hash == "0x1"


@pytest.mark.anyio
async def test_redirect_timeout(redirect_sdk, page, storage):
    task = await _start(redirect_sdk)

    with pytest.raises(PaymentTimedOutError):
        await task

    assert _stored(storage) is None
    assert page.listener_count == 0


@pytest.mark.anyio
async def test_memo_derived_when_absent(redirect_sdk, page, storage):
    task = await _start(redirect_sdk, memo=None)

    memo = parse_qs(urlsplit(page.navigations[0]).query)["memo"][0]
    assert len(memo) == 32
    assert _stored(storage)["memo"] == memo
    assert _stored(storage)["payload"]["memo"] == memo

    await _abandon(task)


@pytest.mark.anyio
async def test_new_request_supersedes_pending_one(redirect_sdk, page, storage):
    first = await _start(redirect_sdk, memo="first")
    timer = Mock(wraps=redirect_sdk.payments._redirect.timer)
    redirect_sdk.payments._redirect.timer = timer

    second = await _start(redirect_sdk, memo="second")

    with pytest.raises(PaymentSupersededError) as exc_info:
        await first
    assert exc_info.value.memo == "first"
    timer.cancel.assert_called()
    assert _stored(storage)["memo"] == "second"
    assert page.listener_count == 1

    page.return_to(f"{REDIRECT_URL}?memo=first&txHash=0x1&chainId=1")
    await asyncio.sleep(0)
    assert not second.done()

    page.return_to(f"{REDIRECT_URL}?memo=second&txHash=0x2&chainId=1")
    assert (await second).tx_hash == "0x2"


@pytest.mark.anyio
async def test_stale_record_from_previous_page_is_replaced(config, top_level_window, storage, clock):
    earlier = YappSDK(config, top_level_window, FakePage(), storage=storage, clock=clock)
    stale = await _start(earlier, memo="stale")
    await _abandon(stale)
    assert _stored(storage)["memo"] == "stale"

    page = FakePage()
    sdk = YappSDK(config, top_level_window, page, storage=storage, clock=clock)
    task = await _start(sdk, memo="fresh")

    assert _stored(storage)["memo"] == "fresh"
    page.return_to(f"{REDIRECT_URL}?memo=fresh&txHash=0x1&chainId=1")
    assert (await task).tx_hash == "0x1"


@pytest.mark.anyio
async def test_navigation_failure_cleans_up(config, top_level_window, storage):
    page = FakePage()
    page.navigate = Mock(side_effect=RuntimeError("navigation blocked"))
    sdk = YappSDK(config, top_level_window, page, storage=storage)

    with pytest.raises(RuntimeError, match="navigation blocked"):
        await sdk.request_payment("vitalik.eth", memo="abc123", redirect_url=REDIRECT_URL)

    assert _stored(storage) is None
    assert page.listener_count == 0
    assert sdk.payments.pending_memo is None
