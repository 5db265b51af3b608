"""mullsign - Trust-sign Mullvad exit nodes in a Tailscale lock."""

__version__ = "0.1.0"
