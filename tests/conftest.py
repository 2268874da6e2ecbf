import json

import pytest

from sfrest.api import SalesforceAPI, SFConfig


class DummyResponse:
    """Stand-in for requests.Response built from a status and a raw body."""

    def __init__(self, *, status_code=200, json_data=None, content=None):
        self.status_code = status_code
        if content is None:
            content = json.dumps(json_data if json_data is not None else {}).encode("utf-8")
        self.content = content
        self.text = content.decode("utf-8", errors="replace")
        self.closed = False

    def json(self):
        return json.loads(self.text)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_sf_env(monkeypatch):
    """Keep developer SF_* variables (or a local .env) out of the tests."""
    for var in (
        "SF_MY_DOMAIN",
        "SF_CLIENT_ID",
        "SF_CLIENT_SECRET",
        "SF_ACCESS_TOKEN",
        "SF_API_VERSION",
        "SF_TIMEOUT",
        "SF_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_response():
    return DummyResponse


@pytest.fixture
def connected_api():
    """Return an API instance that already holds a credential."""
    cfg = SFConfig(
        my_domain="acme",
        client_id="cid",
        client_secret="csecret",
        access_token="Bearer 00DTOKEN",
    )
    return SalesforceAPI(cfg)


@pytest.fixture
def dummy_api(monkeypatch):
    """Replace SalesforceAPI inside the CLI so no real network calls occur."""

    class DummyAPI:
        token = "Bearer 0123456789ABCDEFGH"
        created = []
        queries = []
        error = None

        def __init__(self, cfg=None):
            self.cfg = cfg
            self.access_token = None

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return None

        def get_access_token(self):
            if DummyAPI.error:
                raise DummyAPI.error
            return DummyAPI.token

        def connect(self):
            self.access_token = self.get_access_token()
            return self.access_token

        def query(self, soql):
            DummyAPI.queries.append(soql)
            return b'{"totalSize":1,"done":true,"records":[{"Id":"001","Name":"Acme Corp"}]}'

        def create(self, object_name, data):
            DummyAPI.created.append((object_name, data))
            return "001xx000003DGcFAAW"

    DummyAPI.created = []
    DummyAPI.queries = []
    monkeypatch.setattr("sfrest.cli.SalesforceAPI", DummyAPI)
    return DummyAPI
