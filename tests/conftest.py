import json
import sys
from pathlib import Path

import pytest

# ensure src package importable
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

FIXTURES = ROOT / "tests" / "fixtures"


class DummyResp:
    def __init__(self, payload, status_error=None):
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error is not None:
            raise self._status_error

    def json(self):
        return self._payload


class DummySession:
    """Stand-in for ``requests.Session``; replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item if isinstance(item, DummyResp) else DummyResp(item)


@pytest.fixture
def pvgis_payload():
    return json.loads((FIXTURES / "pvgis_pvcalc_sample.json").read_text())


@pytest.fixture
def make_session():
    return DummySession


@pytest.fixture
def make_resp():
    return DummyResp
