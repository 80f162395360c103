import json
import os
import struct
import sys
import zlib
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'balance_frame' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("AIRSTACK_API_KEY", "test-key")
os.environ.setdefault("FRAME_THEME", "classic")
os.environ.setdefault("ENV", "test")


class FakeAirstack:
    """Queue of canned Airstack responses that records every request."""

    def __init__(self) -> None:
        self.responses: list[httpx.Response | Exception] = []
        self.requests: list[httpx.Request] = []

    def reply(self, body=None, status_code: int = 200) -> "FakeAirstack":
        self.responses.append(httpx.Response(status_code, json=body if body is not None else {}))
        return self

    def reply_wallet(self, socials=None, balances=None) -> "FakeAirstack":
        return self.reply({"data": {"Wallet": {"socials": socials, "tokenBalances": balances}}})

    def fail(self, exc: Exception) -> "FakeAirstack":
        self.responses.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("unexpected Airstack call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def variables(self, n: int = -1) -> dict:
        return json.loads(self.requests[n].content)["variables"]


@pytest.fixture()
def airstack() -> FakeAirstack:
    return FakeAirstack()


@pytest.fixture()
def settings():
    from balance_frame.config import Settings

    return Settings()


@pytest.fixture()
def make_client(airstack):
    # lazy import after env configured
    from balance_frame.infrastructure.airstack.airstack_client import AirstackClient
    from balance_frame.infrastructure.api.dependencies import get_airstack_client, get_asset_fetcher
    from balance_frame.infrastructure.rendering.image_renderer import AssetFetcher
    from balance_frame.main import create_app

    def _make(settings=None) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_airstack_client] = lambda: AirstackClient(
            "test-key", transport=airstack.transport
        )
        app.dependency_overrides[get_asset_fetcher] = lambda: AssetFetcher(
            transport=httpx.MockTransport(lambda request: httpx.Response(404))
        )
        return TestClient(app)

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture()
def frame_payload():
    def _payload(fid=12345, button_index=1, input_text=None) -> dict:
        data = {
            "fid": fid,
            "url": "http://testserver/api",
            "messageHash": "0xabc",
            "timestamp": 1706243218,
            "network": 1,
            "buttonIndex": button_index,
            "castId": {"fid": 226, "hash": "0xa48dd46161d8e57725f5e26e34ec19c13ff7f3b9"},
        }
        if input_text is not None:
            data["inputText"] = input_text
        return {"untrustedData": data, "trustedData": {"messageBytes": "d2b1ddc6c88e865810"}}

    return _payload


@pytest.fixture()
def png_header():
    """PNG with a valid header for any size but no pixel data; Pillow reads the size on open."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    def _png(width: int, height: int) -> bytes:
        ihdr = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
        return (
            b"\x89PNG\r\n\x1a\n"
            + chunk(b"IHDR", ihdr)
            + chunk(b"IDAT", zlib.compress(b""))
            + chunk(b"IEND", b"")
        )

    return _png
