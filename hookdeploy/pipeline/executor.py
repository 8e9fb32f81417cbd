"""
Step executor: runs a deployment profile against a repository working tree.

States: IDLE -> RUNNING -> SUCCEEDED, or RUNNING -> UNWINDING -> FAILED.
A run never continues past a failing step and every call starts with a fresh
rollback stack and a freshly captured pre-deploy commit.
"""
import logging
from typing import List, Optional, Tuple

from ..core.enums import ExecutorState
from ..core.exceptions import UnknownProfileError
from ..core.models import RepositoryRecord
from ..monitoring.event_logger import EventLogger
from ..runner.command_runner import CommandRunner
from .actions import ActionInterpreter, RunContext
from .models import DeploymentProfile, DeploymentOutcome, RollbackEntry, StepResult
from .profiles import ProfileSelector
from .rollback import RollbackStack, RollbackController

CURRENT_COMMIT_COMMAND = "git rev-parse HEAD"


class DeploymentRun:
    """Mutable state of a single pipeline walk"""

    def __init__(self, repository: RepositoryRecord, profile: DeploymentProfile):
        self.repository = repository
        self.profile = profile
        self.state = ExecutorState.IDLE
        self.rollback_stack = RollbackStack()
        # stack contents at the moment unwinding started
        self.rollback_plan: Tuple[RollbackEntry, ...] = ()
        self.step_results: List[StepResult] = []
        self.context: Optional[RunContext] = None


class StepExecutor:
    """Executes profile steps in order and unwinds them on failure"""

    def __init__(
        self,
        runner: CommandRunner,
        event_logger: Optional[EventLogger] = None,
        selector: Optional[ProfileSelector] = None
    ):
        self.runner = runner
        self.event_logger = event_logger or EventLogger()
        self.selector = selector or ProfileSelector()
        self.interpreter = ActionInterpreter(runner, self.event_logger)
        self.rollback_controller = RollbackController(self.interpreter)
        self.logger = logging.getLogger(__name__)
        self.last_run: Optional[DeploymentRun] = None

    def deploy(self, repository: RepositoryRecord) -> DeploymentOutcome:
        """Resolve the repository's profile and execute it"""
        try:
            profile = self.selector.resolve(repository.profile_type)
        except UnknownProfileError as e:
            self.event_logger.error(f"Deployment failed: {e}", repository.name)
            return DeploymentOutcome.aborted(repository.name, str(e), repository.profile_type)
        return self.execute(repository, profile)

    def execute(self, repository: RepositoryRecord, profile: DeploymentProfile) -> DeploymentOutcome:
        run = DeploymentRun(repository, profile)
        self.last_run = run
        name = repository.name

        anchor = self._capture_anchor(repository)
        if not anchor:
            run.state = ExecutorState.FAILED
            return DeploymentOutcome.aborted(
                name,
                f"Unable to determine current commit in {repository.local_path}",
                profile.profile_type.value
            )
        run.context = RunContext(repository=repository, pre_deploy_commit=anchor)

        run.state = ExecutorState.RUNNING
        for step in profile.steps:
            self.event_logger.info(f"Executing step: {step.name}", name)
            result = self.interpreter.perform(step.name, step.forward_action, run.context)
            run.step_results.append(result)

            if not result.succeeded:
                self.event_logger.error(f"Step failed: {step.name}", name)
                return self._unwind(run, failed_step=step.name)

            if step.compensating_action is not None:
                run.rollback_stack.push(RollbackEntry(step.name, step.compensating_action))

        run.state = ExecutorState.SUCCEEDED
        return DeploymentOutcome(
            repository=name,
            succeeded=True,
            step_results=tuple(run.step_results),
            profile_type=profile.profile_type.value,
            pre_deploy_commit=anchor,
        )

    def _unwind(self, run: DeploymentRun, failed_step: str) -> DeploymentOutcome:
        run.state = ExecutorState.UNWINDING
        run.rollback_plan = run.rollback_stack.entries()
        rollback_results = self.rollback_controller.unwind(run.rollback_stack, run.context)
        run.state = ExecutorState.FAILED
        return DeploymentOutcome(
            repository=run.repository.name,
            succeeded=False,
            step_results=tuple(run.step_results),
            failed_step=failed_step,
            rollback_results=rollback_results,
            profile_type=run.profile.profile_type.value,
            pre_deploy_commit=run.context.pre_deploy_commit,
        )

    def _capture_anchor(self, repository: RepositoryRecord) -> str:
        result = self.runner.run(CURRENT_COMMIT_COMMAND, repository.local_path)
        if not result.ok:
            self.event_logger.error(
                f"Could not read current commit [{result.exit_code}]: {result.output}",
                repository.name
            )
            return ""
        return result.output.strip()
