"""Wrapper around the tailscale binary for lock operations."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from mullsign.errors import EncodingError, LaunchFailed, SubprocessFailed

logger = logging.getLogger(__name__)


class ProcessInvoker(ABC):
    """Runs the two lock operations the signing workflow needs."""

    @abstractmethod
    def fetch_status(self) -> bytes:
        """
        Return the raw lock status document.

        Raises:
            LaunchFailed, SubprocessFailed, EncodingError
        """
        pass

    @abstractmethod
    def sign_node(self, key: str) -> None:
        """
        Sign a single node key.

        Raises:
            LaunchFailed, SubprocessFailed
        """
        pass


class TailscaleCLI(ProcessInvoker):
    """
    ProcessInvoker backed by the `tailscale` command line tool.

    Commands are run without a shell and without a timeout. stdin is closed and
    stderr is left attached so tailscale's own messages reach the terminal.
    """

    def __init__(self, binary: str = "tailscale", socket: Optional[str] = None):
        self.binary = binary
        self.socket = socket

    def _command(self, *args: str) -> List[str]:
        cmd = [self.binary]
        if self.socket:
            cmd.extend(["--socket", self.socket])
        cmd.extend(args)
        return cmd

    def _run(self, cmd: List[str], capture: bool) -> bytes:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                check=False
            )
        except OSError as e:
            raise LaunchFailed(cmd, e) from e

        if result.returncode != 0:
            # Negative return codes mean the process was killed by a signal
            exit_code = result.returncode if result.returncode > 0 else None
            logger.debug(f"{cmd[0]} exited with {result.returncode}")
            raise SubprocessFailed(cmd, exit_code)

        return result.stdout if capture else b""

    def fetch_status(self) -> bytes:
        cmd = self._command("lock", "status", "--json")
        output = self._run(cmd, capture=True)
        try:
            output.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(cmd, e) from e
        return output

    def sign_node(self, key: str) -> None:
        self._run(self._command("lock", "sign", key), capture=False)
