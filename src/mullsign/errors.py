"""Error types raised by mullsign."""

from typing import List, Optional


class MullsignError(Exception):
    """Base class for all mullsign errors."""
    pass


class InvocationError(MullsignError):
    """Running the tailscale binary failed."""

    def __init__(self, command: List[str], message: str):
        self.command = list(command)
        super().__init__(message)


class LaunchFailed(InvocationError):
    """The tailscale process could not be started."""

    def __init__(self, command: List[str], cause: OSError):
        self.cause = cause
        super().__init__(command, f"Could not run {command[0]}: {cause}")


class SubprocessFailed(InvocationError):
    """The tailscale process exited with a non-zero status."""

    def __init__(self, command: List[str], exit_code: Optional[int]):
        self.exit_code = exit_code
        code = str(exit_code) if exit_code is not None else "Unknown"
        super().__init__(command, f"Tailscale subprocess failed with code: {code}")


class EncodingError(InvocationError):
    """The tailscale process wrote output that is not valid UTF-8."""

    def __init__(self, command: List[str], cause: UnicodeDecodeError):
        self.cause = cause
        super().__init__(command, f"Error reading output for Tailscale subprocess: {cause}")


class FetchError(MullsignError):
    """Fetching the lock status failed."""

    def __init__(self, cause: InvocationError):
        self.cause = cause
        super().__init__(f"Error fetching Tailscale lock status: {cause}")


class ParseError(MullsignError):
    """The lock status document could not be decoded."""

    def __init__(self, diagnostic: str):
        self.diagnostic = diagnostic
        super().__init__(f"Error parsing Tailscale output: {diagnostic}")


# Alias matching the decode stage name
DecodeError = ParseError


class NoNodesFound(MullsignError):
    """Selection produced an empty worklist."""

    def __init__(self, resign: bool = False):
        self.resign = resign
        if resign:
            message = "No Mullvad nodes found. Make sure your device is authorized\nto access Mullvad nodes."
        else:
            message = (
                "No filtered Mullvad nodes found. Make sure your device is authorized\n"
                "to access Mullvad nodes and that they aren't already signed."
            )
        super().__init__(message)


class SignFailed(MullsignError):
    """Signing a single node failed; nodes after it were not attempted."""

    def __init__(self, index: int, node_key: str, name: str, cause: InvocationError):
        self.index = index
        self.node_key = node_key
        self.name = name
        self.cause = cause
        super().__init__(f"Error signing node: {cause} (node key: {node_key})")
