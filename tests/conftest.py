import urllib.parse

import httpx
import pytest

STEAM_ID = 76561197960287930
RETURN_TO = "http://localhost:8080/callback"
ENV_KEYS = ["STEAMAUTH_REALM", "STEAMAUTH_CALLBACK_PATH", "STEAMAUTH_HTTP_TIMEOUT", "STEAMAUTH_ENV"]

# shape of a real Steam id_res callback
CALLBACK = {
    "ns": "http://specs.openid.net/auth/2.0",
    "mode": "id_res",
    "op_endpoint": "https://steamcommunity.com/openid/login",
    "claimed_id": f"https://steamcommunity.com/openid/id/{STEAM_ID}",
    "identity": f"https://steamcommunity.com/openid/id/{STEAM_ID}",
    "return_to": RETURN_TO,
    "response_nonce": "2019-06-15T00:36:00Z7nVIS5lDAcZe/T0gT4+QNQyexyA=",
    "assoc_handle": "1234567890",
    "signed": "signed,op_endpoint,claimed_id,identity,return_to,response_nonce,assoc_handle",
    "sig": "BK0zC//KzERs7N+NlDO0aL06+BA=",
}


def make_query(drop=(), **overrides):
    fields = dict(CALLBACK)
    fields.update(overrides)
    return urllib.parse.urlencode(
        [("openid." + k, v) for k, v in fields.items() if k not in drop]
    )


class StubSteam:
    """Stands in for steamcommunity.com behind an httpx.MockTransport."""

    def __init__(self, status=200, body="ns:http://specs.openid.net/auth/2.0\nis_valid:true\n", fail=False):
        self.status = status
        self.body = body
        self.fail = fail
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status, content=self.body.encode() if isinstance(self.body, str) else self.body)

    def client(self):
        return httpx.Client(transport=httpx.MockTransport(self))

    def async_client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def query():
    return make_query


@pytest.fixture
def steam():
    return StubSteam


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so that undo removes variables a .env file may have added
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
