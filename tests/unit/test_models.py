"""Tests for lock status data models."""

import json
import pytest
from pydantic import ValidationError

from mullsign.models import LockStatus, Peer, SignTarget, TrustedKey

from conftest import make_peer, make_status


class TestModels:
    """Test data model classes."""

    def test_peer_from_wire_names(self):
        """Test creating a peer from its wire field names."""
        peer = Peer.model_validate_json(json.dumps({
            "Name": "nz-akl-wg-302.mullvad.ts.net.",
            "ID": 10000000000000,
            "StableID": "000000000000",
            "TailscaleIPs": ["100.0.0.0"],
            "NodeKey": "nodekey:AAA"
        }))

        assert peer.name == "nz-akl-wg-302.mullvad.ts.net."
        assert peer.id == 10000000000000
        assert peer.stable_id == "000000000000"
        assert peer.tailscale_ips == ("100.0.0.0",)
        assert peer.node_key == "nodekey:AAA"

    def test_attribute_names_not_accepted(self):
        """Test that Python attribute names do not populate wire fields."""
        with pytest.raises(ValidationError):
            TrustedKey.model_validate({"key": "nlpub:0000", "votes": 1})

    def test_trusted_key_creation(self):
        """Test creating a trusted key."""
        key = TrustedKey.model_validate({"Key": "nlpub:0000", "Votes": 1})

        assert key.key == "nlpub:0000"
        assert key.votes == 1

    def test_lock_status_is_frozen(self):
        """Test that a lock status cannot be modified after construction."""
        status = LockStatus.model_validate_json(json.dumps(make_status(
            filtered=[make_peer("a.mullvad.ts.net.", "nodekey:A")]
        )))

        with pytest.raises(ValidationError):
            status.enabled = False
        assert isinstance(status.filtered_peers, tuple)
        assert isinstance(status.head, tuple)
        with pytest.raises(AttributeError):
            status.filtered_peers.append(status.filtered_peers[0])
        with pytest.raises(TypeError):
            status.filtered_peers[0].tailscale_ips[0] = "100.64.0.99"

    def test_votes_must_be_unsigned(self):
        """Test that negative votes are rejected."""
        with pytest.raises(ValidationError):
            TrustedKey.model_validate({"Key": "nlpub:0000", "Votes": -1})

    def test_sign_target_is_a_pair(self):
        """Test that a sign target compares equal to a plain tuple."""
        target = SignTarget(node_key="nodekey:AAA", name="nz-akl-wg-302.mullvad.ts.net.")

        assert target == ("nodekey:AAA", "nz-akl-wg-302.mullvad.ts.net.")
        node_key, name = target
        assert node_key == "nodekey:AAA"
        assert name == "nz-akl-wg-302.mullvad.ts.net."
