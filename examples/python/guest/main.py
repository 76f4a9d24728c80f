import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from yodl.yapp import MemorySessionStorage, PaymentCancelledError, YappConfig, YappError, YappSDK
from yodl.yapp.logging_config import setup_logging
from yodl.yapp.types import PAYMENT_REQUEST, PAYMENT_SUCCESS, USER_CONTEXT_REQUEST, USER_CONTEXT_RESPONSE

setup_logging(logging.INFO, sdk_level=logging.DEBUG)

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

# YAPP_ENS_NAME is required; YAPP_ORIGIN defaults to https://yodl.me
os.environ.setdefault("YAPP_ENS_NAME", "example.yodl.eth")
RECIPIENT = os.getenv("YAPP_RECIPIENT", "vitalik.eth")
TRANSPORT = os.getenv("YAPP_EXAMPLE_TRANSPORT", "in_frame")


class SimulatedHostWindow:
    """Stands in for the host frame: answers requests after a short delay"""

    def __init__(self, origin: str, embedded: bool = True) -> None:
        self._origin = origin
        self._embedded = embedded
        self._hooks = []

    def is_embedded(self) -> bool:
        return self._embedded

    def add_message_listener(self, callback) -> None:
        self._hooks.append(callback)

    def post_to_parent(self, message: dict, target_origin: str) -> None:
        print(f"  -> host: {message}")
        loop = asyncio.get_running_loop()
        if message["kind"] == PAYMENT_REQUEST:
            reply = {"kind": PAYMENT_SUCCESS, "payload": {"txHash": "0x" + "12" * 32, "chainId": 8453}}
            loop.call_later(0.5, self._deliver, reply)
        elif message["kind"] == USER_CONTEXT_REQUEST:
            reply = {"kind": USER_CONTEXT_RESPONSE, "payload": {"address": "0x" + "ab" * 20}}
            loop.call_later(0.1, self._deliver, reply)

    def _deliver(self, data: dict) -> None:
        print(f"  <- host: {data}")
        for hook in self._hooks:
            hook(self._origin, data)


class ConsolePage:
    """Prints navigations instead of leaving the page"""

    def __init__(self, url: str) -> None:
        self._url = url
        self._listeners = []

    def current_url(self) -> str:
        return self._url

    def navigate(self, url: str) -> None:
        print(f"\nOpen this URL to pay:\n  {url}\n")

    def replace_url(self, url: str) -> None:
        self._url = url

    def is_visible(self) -> bool:
        return True

    def add_visibility_listener(self, listener) -> None:
        self._listeners.append(listener)

    def remove_visibility_listener(self, listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


async def main():
    config = YappConfig.from_env()
    if TRANSPORT == "redirect":
        config = config.model_copy(update={"payment_timeout_ms": 3_000})
    print(f"Initializing YappSDK...")
    print(f"  ENS name: {config.ens_name}")
    print(f"  Host origin: {config.origin}")

    window = SimulatedHostWindow(config.origin, embedded=TRANSPORT != "redirect")
    page = ConsolePage("http://localhost:3000/checkout")
    sdk = YappSDK(config, window, page, storage=MemorySessionStorage())
    print(f"  Transport: {sdk.transport_mode.value}")

    try:
        if sdk.is_in_iframe():
            context = await sdk.get_user_context()
            print(f"\nUser: {context.address}")

        result = await sdk.request_payment(
            RECIPIENT,
            amount=5,
            currency="USD",
            redirect_url="http://localhost:3000/checkout/done",
        )
        print(f"\n✅ Paid on chain {result.chain_id}: {result.tx_hash}")
    except PaymentCancelledError:
        print("\n⚠️  Payment was cancelled")
    except YappError as e:
        print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
