import re
from urllib.parse import urlsplit

import httpx


def meta(html: str) -> dict[str, str]:
    return dict(re.findall(r'<meta property="([^"]+)" content="([^"]*)" />', html))


def texts(html: str) -> list[str]:
    return re.findall(r"<p>(.*?)</p>", html)


def buttons(html: str) -> list[tuple[str, str]]:
    tags = meta(html)
    out = []
    i = 1
    while f"fc:frame:button:{i}" in tags:
        out.append((tags[f"fc:frame:button:{i}"], tags[f"fc:frame:button:{i}:target"]))
        i += 1
    return out


def state(html: str) -> str:
    return re.search(r'data-frame-state="(\w+)"', html).group(1)


def test_root_and_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["service"] == "balance-frame"
    assert r.json()["theme"] == "classic"
    assert client.get("/health").json() == {"status": "healthy"}


def test_home_frame_get(client, airstack):
    r = client.get("/api")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    tags = meta(r.text)
    assert tags["fc:frame"] == "vNext"
    assert tags["fc:frame:image"].startswith("data:image/png;base64,")
    assert buttons(r.text) == [("Check Balance", "http://testserver/api/check")]
    assert airstack.requests == []


def test_check_frame_uses_platform_fid(client, frame_payload):
    r = client.post("/api/check", json=frame_payload(fid=12345))
    assert state(r.text) == "checking"
    assert "Identity: 12345" in texts(r.text)
    assert ("Show Balance", "http://testserver/api/result?value=12345") in buttons(r.text)


def test_result_scenario_alice(client, airstack, frame_payload):
    airstack.reply_wallet(
        [{"dappName": "farcaster", "profileName": "alice", "profileImage": None}],
        [{"tokenAddress": "0x3150", "amount": "42500000000000000000", "formattedAmount": "42.5"}],
    )
    r = client.post("/api/result?value=12345", json=frame_payload(fid=12345))
    assert r.status_code == 200
    assert state(r.text) == "result"
    assert "Profile: alice" in texts(r.text)
    assert "Balance: 42.5 $GOLDIES" in texts(r.text)
    assert [label for label, _ in buttons(r.text)] == ["Back", "Refresh"]
    assert airstack.variables()["identity"] == "12345"


def test_result_without_identity_does_not_query(client, airstack):
    r = client.post("/api/result")
    assert r.status_code == 200
    assert state(r.text) == "error"
    assert any("Unable to retrieve your Farcaster ID" in t for t in texts(r.text))
    assert airstack.requests == []


def test_carried_value_is_not_trusted_by_default(client, airstack):
    r = client.post("/api/result?value=vitalik.eth", json={"untrustedData": {}})
    assert state(r.text) == "error"
    assert airstack.requests == []


def test_malformed_payload_treated_as_no_metadata(client, airstack):
    r = client.post("/api/result", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert state(r.text) == "error"
    assert airstack.requests == []


def test_http_500_then_retry(client, airstack, frame_payload):
    airstack.reply({"message": "internal"}, status_code=500)
    airstack.reply_wallet([{"profileName": "alice"}], [{"formattedAmount": "42.5"}])

    r = client.post("/api/result", json=frame_payload(fid=12345))
    assert state(r.text) == "error"
    assert any("500" in t for t in texts(r.text))
    labels = dict(buttons(r.text))
    assert labels["Back"] == "http://testserver/api"

    target = urlsplit(labels["Retry"])
    r2 = client.post(f"{target.path}?{target.query}", json=frame_payload(fid=12345))
    assert state(r2.text) == "result"
    assert len(airstack.requests) == 2


def test_no_profile_found(client, airstack, frame_payload):
    airstack.reply_wallet([], [])
    r = client.post("/api/result", json=frame_payload(fid=5))
    assert state(r.text) == "error"
    assert "No Farcaster profile found for 5." in texts(r.text)


def test_every_frame_links_home(client, airstack, frame_payload):
    airstack.reply_wallet([{"profileName": "alice"}], [])
    airstack.reply({}, status_code=502)
    pages = [
        client.post("/api/check", json=frame_payload()),
        client.post("/api/result", json=frame_payload()),
        client.post("/api/result", json=frame_payload()),
        client.post("/api/check"),
    ]
    for page in pages:
        assert "http://testserver/api" in [target for _, target in buttons(page.text)]


def test_carried_identity_when_enabled(make_client, airstack, settings):
    client = make_client(settings.model_copy(update={"allow_carried_identity": True}))
    airstack.reply_wallet([{"profileName": "vitalik"}], [{"formattedAmount": "1000"}])
    r = client.post("/api/result?value=vitalik.eth")
    assert state(r.text) == "result"
    assert "Balance: 1,000 $GOLDIES" in texts(r.text)
    assert airstack.variables()["identity"] == "vitalik.eth"


def test_public_base_url_used_for_targets(make_client, settings):
    client = make_client(settings.model_copy(update={"frame_base_url": "https://frames.example.com/"}))
    r = client.get("/api")
    assert buttons(r.text) == [("Check Balance", "https://frames.example.com/api/check")]


def test_undecodable_avatar_does_not_break_result(make_client, airstack, settings, frame_payload, png_header):
    from balance_frame.infrastructure.api.dependencies import get_asset_fetcher
    from balance_frame.infrastructure.rendering.image_renderer import AssetFetcher

    bomb = png_header(20000, 10000)
    client = make_client(settings.model_copy(update={"frame_theme": "goldies"}))
    client.app.dependency_overrides[get_asset_fetcher] = lambda: AssetFetcher(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=bomb))
    )
    airstack.reply_wallet(
        [{"profileName": "alice", "profileImage": "https://img/bomb.png"}],
        [{"formattedAmount": "42.5"}],
    )
    r = client.post("/api/result", json=frame_payload(fid=12345))
    assert r.status_code == 200
    assert state(r.text) == "result"


def test_typed_name_flow_when_enabled(make_client, airstack, settings, frame_payload):
    client = make_client(settings.model_copy(update={"allow_carried_identity": True}))
    home = client.get("/api")
    assert meta(home.text)["fc:frame:input:text"] == "FID or ENS name (optional)"

    check = client.post("/api/check", json=frame_payload(fid=12345, input_text="vitalik.eth"))
    assert "Identity: vitalik.eth" in texts(check.text)
    show = urlsplit(dict(buttons(check.text))["Show Balance"])

    airstack.reply_wallet([{"profileName": "vitalik"}], [{"formattedAmount": "7"}])
    result = client.post(f"{show.path}?{show.query}", json=frame_payload(fid=12345))
    assert state(result.text) == "result"
    assert airstack.variables()["identity"] == "vitalik.eth"


def test_home_has_no_text_input_by_default(client):
    assert "fc:frame:input:text" not in meta(client.get("/api").text)
