"""
Signing workflow for Mullvad nodes.

Fetches the lock status, selects the Mullvad peers and signs them one at a
time. The first failure ends the run; nodes signed before it stay signed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from mullsign.errors import (
    FetchError,
    InvocationError,
    MullsignError,
    NoNodesFound,
    SignFailed,
)
from mullsign.lock import parse, select
from mullsign.models import LockStatus, SignTarget
from mullsign.tailscale import ProcessInvoker

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    """Workflow states"""
    START = "start"
    FETCHING = "fetching"
    PARSING = "parsing"
    SELECTING = "selecting"
    CONFIRM_PENDING = "confirm_pending"
    SIGNING = "signing"
    DONE = "done"              # Every selected node signed
    DECLINED = "declined"      # Operator said no at the prompt
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Outcome of a run that did not fail"""
    state: WorkflowState
    targets: List[SignTarget] = field(default_factory=list)
    signed: int = 0


class WorkflowObserver:
    """
    Hooks for the presentation layer.

    The defaults do nothing and decline confirmation, so a workflow that is
    neither observed nor told to skip confirmation never signs anything.
    """

    def on_state(self, state: WorkflowState) -> None:
        pass

    def on_selected(self, targets: List[SignTarget]) -> None:
        pass

    def confirm(self, targets: List[SignTarget]) -> bool:
        return False

    def on_signing(self, index: int, target: SignTarget) -> None:
        pass

    def on_signed(self, index: int, target: SignTarget) -> None:
        pass

    def on_failed(self, error: MullsignError) -> None:
        pass


class SigningWorkflow:
    """Single-use fetch, select, confirm and sign run."""

    def __init__(
        self,
        invoker: ProcessInvoker,
        resign: bool = False,
        skip_confirmation: bool = False,
        observer: Optional[WorkflowObserver] = None
    ):
        self.invoker = invoker
        self.resign = resign
        self.skip_confirmation = skip_confirmation
        self.observer = observer or WorkflowObserver()

        self.state = WorkflowState.START
        self.status: Optional[LockStatus] = None
        self.targets: List[SignTarget] = []
        self.signed: List[SignTarget] = []
        self.failure: Optional[MullsignError] = None

    def _enter(self, state: WorkflowState) -> None:
        logger.debug(f"Workflow {self.state.value} -> {state.value}")
        self.state = state
        self.observer.on_state(state)

    def _fail(self, error: MullsignError) -> None:
        self.failure = error
        self._enter(WorkflowState.FAILED)
        self.observer.on_failed(error)

    def run(self) -> WorkflowResult:
        """
        Run the workflow to completion.

        Returns:
            WorkflowResult in state DONE or DECLINED

        Raises:
            FetchError, ParseError, NoNodesFound or SignFailed. The workflow is
            left in state FAILED with ``failure`` set.
        """
        if self.state != WorkflowState.START:
            raise RuntimeError("SigningWorkflow can only be run once")

        try:
            self._enter(WorkflowState.FETCHING)
            try:
                raw = self.invoker.fetch_status()
            except InvocationError as e:
                raise FetchError(e) from e

            self._enter(WorkflowState.PARSING)
            self.status = parse(raw)

            self._enter(WorkflowState.SELECTING)
            self.targets = select(self.status, self.resign)
            if not self.targets:
                raise NoNodesFound(self.resign)
            logger.info(f"Selected {len(self.targets)} node(s) for signing")
            self.observer.on_selected(self.targets)

            self._enter(WorkflowState.CONFIRM_PENDING)
            if not self.skip_confirmation and not self.observer.confirm(self.targets):
                logger.info("Signing declined by operator")
                self._enter(WorkflowState.DECLINED)
                return WorkflowResult(WorkflowState.DECLINED, self.targets, 0)

            self._enter(WorkflowState.SIGNING)
            self._sign_all()
        except MullsignError as e:
            self._fail(e)
            raise

        self._enter(WorkflowState.DONE)
        return WorkflowResult(WorkflowState.DONE, self.targets, len(self.signed))

    def _sign_all(self) -> None:
        for index, target in enumerate(self.targets):
            self.observer.on_signing(index, target)
            try:
                self.invoker.sign_node(target.node_key)
            except InvocationError as e:
                logger.info(f"Signing {target.name} failed after {index} signed node(s)")
                raise SignFailed(index, target.node_key, target.name, e) from e

            self.signed.append(target)
            logger.info(f"Signed {target.name}")
            self.observer.on_signed(index, target)
