"""
Interpretation of action descriptors against a working tree.
"""
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..core.models import RepositoryRecord
from ..monitoring.event_logger import EventLogger
from ..runner.command_runner import CommandRunner
from .models import Action, RunCommand, NodeCommand, GitPull, GitReset, StepResult, PRE_DEPLOY_COMMIT


@dataclass
class RunContext:
    """Per-run facts the descriptors are resolved against"""
    repository: RepositoryRecord
    pre_deploy_commit: str

    @property
    def working_directory(self) -> str:
        return self.repository.local_path

    def has_file(self, relative_path: str) -> bool:
        return (Path(self.working_directory) / relative_path).exists()


def reset_command(commit: str) -> str:
    return f"git reset --hard {shlex.quote(commit)}"


class ActionInterpreter:
    """Turns action descriptors into commands and runs them through the CommandRunner"""

    def __init__(self, runner: CommandRunner, event_logger: Optional[EventLogger] = None):
        self.runner = runner
        self.event_logger = event_logger or EventLogger()
        self.logger = logging.getLogger(__name__)

    def render(self, action: Action, context: RunContext) -> str:
        """Command line for a descriptor in the given context"""
        if isinstance(action, GitPull):
            return f"git pull {shlex.quote(action.remote)} {shlex.quote(context.repository.branch)}"
        if isinstance(action, GitReset):
            target = context.pre_deploy_commit if action.target == PRE_DEPLOY_COMMIT else action.target
            return reset_command(target)
        if isinstance(action, NodeCommand):
            return action.yarn if context.has_file("yarn.lock") else action.npm
        if isinstance(action, RunCommand):
            return action.command
        raise TypeError(f"Unsupported action descriptor: {action!r}")

    def perform(self, step_name: str, action: Action, context: RunContext) -> StepResult:
        """
        Run one descriptor and report it as a StepResult.

        Order for anchored actions: restore the anchor tree, then evaluate the
        manifest requirement on that tree, then run the command.
        """
        outputs: List[str] = []
        repository = context.repository.name

        if getattr(action, 'at_anchor', False):
            restore = reset_command(context.pre_deploy_commit)
            result = self._run(restore, context)
            outputs.append(result.output)
            if not result.ok:
                return StepResult(
                    step_name=step_name,
                    succeeded=False,
                    output_text=self._join(outputs),
                    command=restore,
                    exit_code=result.exit_code,
                )

        requires = getattr(action, 'requires', None)
        if requires and not context.has_file(requires):
            message = f"No {requires} found"
            self.event_logger.info(f"{step_name}: {message}, skipping", repository)
            outputs.append(message)
            return StepResult(
                step_name=step_name,
                succeeded=True,
                output_text=self._join(outputs),
                skipped=True,
            )

        command = self.render(action, context)
        result = self._run(command, context)
        outputs.append(result.output)
        return StepResult(
            step_name=step_name,
            succeeded=result.ok,
            output_text=self._join(outputs),
            command=command,
            exit_code=result.exit_code,
        )

    def _run(self, command: str, context: RunContext):
        repository = context.repository.name
        self.event_logger.info(f"Executing: cd {context.working_directory} && {command}", repository)
        result = self.runner.run(command, context.working_directory)
        if not result.ok:
            self.event_logger.error(
                f"Command failed [{result.exit_code}]: {command} - {result.output}",
                repository
            )
        return result

    @staticmethod
    def _join(outputs: List[str]) -> str:
        return "\n".join(output for output in outputs if output)
