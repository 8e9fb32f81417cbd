"""
Rollback stack and controller.

The stack only ever holds compensations of steps whose forward action already
succeeded, in application order. Unwinding pops it LIFO, runs every
compensation even if an earlier one failed, and always finishes with a hard
reset to the pre-deploy commit.
"""
import logging
from typing import Iterator, List, Tuple

from .actions import ActionInterpreter, RunContext
from .models import RollbackEntry, StepResult, GitReset, ANCHOR_RESET_STEP


class RollbackStack:
    """Explicit LIFO of RollbackEntry descriptors"""

    def __init__(self):
        self._entries: List[RollbackEntry] = []

    def push(self, entry: RollbackEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> RollbackEntry:
        return self._entries.pop()

    def entries(self) -> Tuple[RollbackEntry, ...]:
        """Snapshot in push order (bottom of the stack first)"""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[RollbackEntry]:
        return iter(self.entries())


class RollbackController:
    """Unwinds a rollback stack and resets the tree to the anchor commit"""

    def __init__(self, interpreter: ActionInterpreter):
        self.interpreter = interpreter
        self.event_logger = interpreter.event_logger
        self.logger = logging.getLogger(__name__)

    def unwind(self, stack: RollbackStack, context: RunContext) -> Tuple[StepResult, ...]:
        repository = context.repository.name
        results: List[StepResult] = []

        while stack:
            entry = stack.pop()
            self.event_logger.info(f"Rolling back step: {entry.step_name}", repository)
            result = self.interpreter.perform(entry.step_name, entry.compensating_action, context)
            if not result.succeeded:
                self.event_logger.error(f"Rollback failed for step {entry.step_name}", repository)
            results.append(result)

        self.event_logger.info(f"Rolling back to commit: {context.pre_deploy_commit}", repository)
        anchor = self.interpreter.perform(ANCHOR_RESET_STEP, GitReset(), context)
        if not anchor.succeeded:
            self.event_logger.error(
                f"Reset to {context.pre_deploy_commit} failed, working tree state is indeterminate",
                repository
            )
        results.append(anchor)

        return tuple(results)
