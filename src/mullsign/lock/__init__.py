"""Tailscale lock status decoding and node selection."""

from .parser import parse, encode
from .selector import select, MULLVAD_NODE_SUFFIX

__all__ = [
    "parse",
    "encode",
    "select",
    "MULLVAD_NODE_SUFFIX"
]
