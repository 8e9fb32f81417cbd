"""
Step descriptors and run records for the deployment pipeline.

Actions are plain data: the executor interprets them, so profiles and the
rollback stack can be inspected and serialized without running anything.
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any, Tuple, Union

from ..core.enums import ProfileType, RollbackStatus

# Placeholder resolved by the executor to the commit captured before the first step
PRE_DEPLOY_COMMIT = "pre_deploy_commit"

ANCHOR_RESET_STEP = "anchor_reset"


@dataclass(frozen=True)
class RunCommand:
    """
    Run a shell command in the repository working tree.

    requires:  manifest file; when absent from the tree the action is a no-op success
    at_anchor: restore the tree to the pre-deploy commit before running
    """
    command: str
    requires: Optional[str] = None
    at_anchor: bool = False
    kind: str = field(default="run_command", init=False)


@dataclass(frozen=True)
class NodeCommand:
    """Frontend command; the yarn variant is used when yarn.lock is present"""
    npm: str
    yarn: str
    requires: Optional[str] = None
    at_anchor: bool = False
    kind: str = field(default="node_command", init=False)


@dataclass(frozen=True)
class GitPull:
    """Pull the repository's configured branch from origin"""
    remote: str = "origin"
    kind: str = field(default="git_pull", init=False)


@dataclass(frozen=True)
class GitReset:
    """Hard reset of the working tree to a commit (the pre-deploy commit by default)"""
    target: str = PRE_DEPLOY_COMMIT
    kind: str = field(default="git_reset", init=False)


Action = Union[RunCommand, NodeCommand, GitPull, GitReset]


def action_to_dict(action: Action) -> Dict[str, Any]:
    return asdict(action)


@dataclass(frozen=True)
class StepSpec:
    """A named deployment step with its optional compensation"""
    name: str
    forward_action: Action
    compensating_action: Optional[Action] = None


@dataclass(frozen=True)
class DeploymentProfile:
    """Ordered step sequence for a project type"""
    profile_type: ProfileType
    steps: Tuple[StepSpec, ...]

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]


@dataclass
class StepResult:
    """Result of running one forward or compensating action"""
    step_name: str
    succeeded: bool
    output_text: str = ""
    command: Optional[str] = None
    exit_code: Optional[int] = None
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RollbackEntry:
    """Compensation registered after a forward step succeeded"""
    step_name: str
    compensating_action: Action

    def to_dict(self) -> Dict[str, Any]:
        return {
            'step_name': self.step_name,
            'compensating_action': action_to_dict(self.compensating_action),
        }


@dataclass(frozen=True)
class DeploymentOutcome:
    """Terminal record of one pipeline run"""
    repository: str
    succeeded: bool
    step_results: Tuple[StepResult, ...] = ()
    failed_step: Optional[str] = None
    rollback_results: Optional[Tuple[StepResult, ...]] = None
    profile_type: Optional[str] = None
    pre_deploy_commit: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def aborted(cls, repository: str, error: str, profile_type: Optional[str] = None) -> 'DeploymentOutcome':
        """Failed outcome for a run that stopped before any step executed"""
        return cls(repository=repository, succeeded=False, profile_type=profile_type, error=error)

    @property
    def anchor_reset(self) -> Optional[StepResult]:
        if self.rollback_results and self.rollback_results[-1].step_name == ANCHOR_RESET_STEP:
            return self.rollback_results[-1]
        return None

    @property
    def anchor_reset_failed(self) -> bool:
        if self.rollback_results is None:
            return False
        anchor = self.anchor_reset
        return anchor is None or not anchor.succeeded

    @property
    def rollback_status(self) -> RollbackStatus:
        if self.rollback_results is None:
            return RollbackStatus.NOT_NEEDED
        if self.anchor_reset_failed:
            return RollbackStatus.ANCHOR_RESET_FAILED
        if all(result.succeeded for result in self.rollback_results):
            return RollbackStatus.COMPLETE
        return RollbackStatus.PARTIAL

    @property
    def message(self) -> str:
        if self.succeeded:
            return "Deployment completed successfully"
        if self.failed_step:
            return f"Deployment failed at step: {self.failed_step}"
        return self.error or "Deployment failed"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'repository': self.repository,
            'profile_type': self.profile_type,
            'succeeded': self.succeeded,
            'failed_step': self.failed_step,
            'pre_deploy_commit': self.pre_deploy_commit,
            'error': self.error,
            'step_results': [result.to_dict() for result in self.step_results],
            'rollback_results': (
                [result.to_dict() for result in self.rollback_results]
                if self.rollback_results is not None else None
            ),
            'rollback_status': self.rollback_status.value,
        }
