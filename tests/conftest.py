"""Pytest configuration and shared fixtures."""

import json
import sys
import pytest
from pathlib import Path

# Add the src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from mullsign.errors import SubprocessFailed
from mullsign.tailscale import ProcessInvoker

FIXTURES = Path(__file__).parent / "fixtures"


class FakeInvoker(ProcessInvoker):
    """In-memory ProcessInvoker that records sign calls."""

    def __init__(self, status=b"", fail_on=None, fetch_error=None):
        self.status = status
        self.fail_on = set(fail_on or [])
        self.fetch_error = fetch_error
        self.fetch_calls = 0
        self.sign_calls = []

    def fetch_status(self):
        self.fetch_calls += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.status

    def sign_node(self, key):
        index = len(self.sign_calls)
        self.sign_calls.append(key)
        if index in self.fail_on:
            raise SubprocessFailed(["tailscale", "lock", "sign", key], 1)


def make_peer(name, node_key, peer_id=1):
    """Build a peer in wire form."""
    return {
        "Name": name,
        "ID": peer_id,
        "StableID": f"stable{peer_id}",
        "TailscaleIPs": [f"100.64.0.{peer_id}"],
        "NodeKey": node_key,
    }


def make_status(filtered=None, visible=None):
    """Build a lock status document in wire form."""
    return {
        "Enabled": True,
        "Head": [152, 59],
        "PublicKey": "nlpub:0000",
        "NodeKey": "nodekey:self",
        "NodeKeySigned": True,
        "TrustedKeys": [{"Key": "nlpub:0000", "Votes": 1}],
        "VisiblePeers": visible or [],
        "FilteredPeers": filtered or [],
    }


@pytest.fixture
def status_bytes():
    """Raw bytes of the sample lock status fixture."""
    return (FIXTURES / "lock-status.json").read_bytes()


@pytest.fixture
def mullvad_status():
    """Status from the node selection scenario: one filtered and two visible Mullvad peers."""
    return make_status(
        filtered=[
            make_peer("nz-akl-wg-302.mullvad.ts.net.", "nodekey:AAA", 1),
            make_peer("node.other.ts.net.", "nodekey:BBB", 2),
        ],
        visible=[
            make_peer("nz-akl-wg-302.mullvad.ts.net.", "nodekey:AAA", 1),
            make_peer("us-bos-wg-102.mullvad.ts.net.", "nodekey:CCC", 3),
        ],
    )


@pytest.fixture
def fake_invoker(mullvad_status):
    """FakeInvoker serving the Mullvad scenario status."""
    return FakeInvoker(json.dumps(mullvad_status).encode())


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    monkeypatch.delenv("MULLSIGN_TAILSCALE", raising=False)
    monkeypatch.delenv("MULLSIGN_TAILSCALE_SOCKET", raising=False)
    monkeypatch.delenv("MULLSIGN_LOG_LEVEL", raising=False)


@pytest.fixture
def invoker_factory():
    """Factory for FakeInvoker instances."""
    def _make(status, fail_on=None, fetch_error=None):
        if isinstance(status, dict):
            status = json.dumps(status).encode()
        return FakeInvoker(status, fail_on=fail_on, fetch_error=fetch_error)
    return _make
