# Copyright (c) 2025 mullsign contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI interface for mullsign."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.status import Status

from mullsign import __version__
from mullsign.config import SignerConfig, load_config
from mullsign.errors import MullsignError, NoNodesFound, SignFailed
from mullsign.models import SignTarget
from mullsign.tailscale import TailscaleCLI
from mullsign.workflow import SigningWorkflow, WorkflowObserver, WorkflowState

app = typer.Typer(
    name="mullsign",
    help="Sign Mullvad exit nodes in a locked Tailscale tailnet",
    rich_markup_mode="markdown",
    add_completion=False
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"mullsign version {__version__}")
        raise typer.Exit()


def error(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True
    )


class ConsoleObserver(WorkflowObserver):
    """Renders workflow progress to the terminal."""

    def __init__(self, print_nodes: bool = True):
        self.print_nodes = print_nodes
        self._spinner: Optional[Status] = None
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None
        self._targets: List[SignTarget] = []

    def _start_spinner(self, message: str) -> None:
        self._spinner = console.status(message)
        self._spinner.start()

    def _stop_spinner(self, message: str, ok: bool = True) -> None:
        if self._spinner is None:
            return
        self._spinner.stop()
        self._spinner = None
        mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
        console.print(f"{mark} {message}")

    def on_state(self, state: WorkflowState) -> None:
        if state == WorkflowState.FETCHING:
            self._start_spinner("Fetching nodes...")
        elif state == WorkflowState.SELECTING:
            self._stop_spinner("Fetched nodes")
            self._start_spinner("Selecting nodes...")
        elif state == WorkflowState.SIGNING:
            self._progress = Progress(
                SpinnerColumn(),
                TimeElapsedColumn(),
                BarColumn(bar_width=40, complete_style="green"),
                MofNCompleteColumn(),
                TimeRemainingColumn(),
                console=console
            )
            self._task = self._progress.add_task("Signing nodes...", total=len(self._targets))
            self._progress.start()
        elif state == WorkflowState.DONE:
            self._stop_progress("Signed nodes")

    def on_selected(self, targets: List[SignTarget]) -> None:
        self._targets = list(targets)
        self._stop_spinner("Nodes selected")

        if self.print_nodes:
            console.print("Nodes:")
            for target in targets:
                console.print(f"- {escape(target.name)}: [dim]{escape(target.node_key)}[/dim]")
            console.print()

        count = len(targets)
        console.print(f"Selected {count} node{'' if count == 1 else 's'}\n")
        console.print("These nodes have been selected by checking for the node name suffix.")
        console.print("[bold]By signing these nodes, you trust them to interact with your tailnet.[/bold]")
        console.print("The signing process may take several minutes to complete.\n")

    def confirm(self, targets: List[SignTarget]) -> bool:
        return typer.confirm("Sign ALL selected nodes?", default=False)

    def on_signed(self, index: int, target: SignTarget) -> None:
        if self._progress is not None:
            self._progress.advance(self._task)

    def on_failed(self, error: MullsignError) -> None:
        if isinstance(error, NoNodesFound):
            self._stop_spinner("Nodes selected")
        else:
            self._stop_spinner("Failed to fetch nodes", ok=False)
        self._stop_progress("Failed signing nodes", ok=False)

    def _stop_progress(self, message: str, ok: bool = True) -> None:
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
        console.print(f"{mark} {message}")

    def close(self) -> None:
        """Stop any live display, e.g. after an interrupt."""
        if self._spinner is not None:
            self._spinner.stop()
            self._spinner = None
        if self._progress is not None:
            self._progress.stop()
            self._progress = None


@app.command()
def main(
    yes: bool = typer.Option(False, "--yes", "-y", help="Signs without confirmation"),
    no_print: bool = typer.Option(False, "--no-print", help="Prevents printing a list of nodes to be signed to the console"),
    resign: bool = typer.Option(False, "--resign", "-r", help="Signs already signed nodes"),
    tailscale: Optional[str] = typer.Option(None, "--tailscale", help="Path to the tailscale binary"),
    socket: Optional[str] = typer.Option(None, "--socket", help="Path to the tailscaled socket"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file (YAML or JSON)"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True
    )
) -> None:
    """Sign every Mullvad node that Tailscale lock is filtering out."""
    try:
        settings = load_config(config_file) if config_file else SignerConfig()
    except (OSError, ValueError, yaml.YAMLError) as e:
        error(f"Error loading configuration: {e}")
        raise typer.Exit(1)

    _configure_logging("DEBUG" if verbose else settings.log_level)

    invoker = TailscaleCLI(
        tailscale or settings.tailscale_binary,
        socket or settings.tailscale_socket
    )
    observer = ConsoleObserver(print_nodes=not no_print)
    workflow = SigningWorkflow(invoker, resign=resign, skip_confirmation=yes, observer=observer)

    try:
        result = workflow.run()
    except SignFailed as e:
        error(str(e))
        if e.index:
            error(f"{e.index} node(s) were signed before the failure. Re-run to sign the rest.")
        raise typer.Exit(1)
    except MullsignError as e:
        error(str(e))
        raise typer.Exit(1)
    finally:
        observer.close()

    if result.state == WorkflowState.DECLINED:
        error("Aborting...")
        return

    console.print("All detected Mullvad nodes should now be signed.")
    console.print(
        "You may need to sign additional nodes over time as available Mullvad\n"
        "servers change (either manually or by re-running this tool.)"
    )


if __name__ == "__main__":
    app()
