"""Tailscale CLI integration."""

from .invoker import ProcessInvoker, TailscaleCLI

__all__ = [
    "ProcessInvoker",
    "TailscaleCLI"
]
