"""Data models for Tailscale lock status."""

from typing import Annotated, NamedTuple, Tuple

from pydantic import BaseModel, ConfigDict, Field

UINT32_MAX = 2**32 - 1
UINT64_MAX = 2**64 - 1

UInt32 = Annotated[int, Field(ge=0, le=UINT32_MAX)]
UInt64 = Annotated[int, Field(ge=0, le=UINT64_MAX)]


class _WireModel(BaseModel):
    """
    Base for models decoded from `tailscale lock status --json`.

    Fields are populated by their wire names only. Sequences are tuples so a
    decoded status cannot be modified.
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="ignore",
    )


class TrustedKey(_WireModel):
    """Key authorized to co-sign lock operations."""
    key: str = Field(alias="Key")
    votes: UInt32 = Field(alias="Votes")


class Peer(_WireModel):
    """A single tailnet peer."""
    name: str = Field(alias="Name")
    id: UInt64 = Field(alias="ID")
    stable_id: str = Field(alias="StableID")
    tailscale_ips: Tuple[str, ...] = Field(alias="TailscaleIPs")
    node_key: str = Field(alias="NodeKey")


class LockStatus(_WireModel):
    """Snapshot of the tailnet lock state."""
    enabled: bool = Field(alias="Enabled")
    head: Tuple[UInt32, ...] = Field(alias="Head")
    public_key: str = Field(alias="PublicKey")
    node_key: str = Field(alias="NodeKey")
    node_key_signed: bool = Field(alias="NodeKeySigned")
    trusted_keys: Tuple[TrustedKey, ...] = Field(alias="TrustedKeys")
    visible_peers: Tuple[Peer, ...] = Field(alias="VisiblePeers")
    filtered_peers: Tuple[Peer, ...] = Field(alias="FilteredPeers")


class SignTarget(NamedTuple):
    """One unit of signing work: (node_key, name)."""
    node_key: str
    name: str
