# Pipeline package initialization
from .models import (
    RunCommand,
    NodeCommand,
    GitPull,
    GitReset,
    StepSpec,
    DeploymentProfile,
    StepResult,
    RollbackEntry,
    DeploymentOutcome,
    PRE_DEPLOY_COMMIT,
    ANCHOR_RESET_STEP,
)
from .profiles import ProfileSelector
from .rollback import RollbackStack, RollbackController
from .executor import StepExecutor, DeploymentRun

__all__ = [
    'RunCommand',
    'NodeCommand',
    'GitPull',
    'GitReset',
    'StepSpec',
    'DeploymentProfile',
    'StepResult',
    'RollbackEntry',
    'DeploymentOutcome',
    'PRE_DEPLOY_COMMIT',
    'ANCHOR_RESET_STEP',
    'ProfileSelector',
    'RollbackStack',
    'RollbackController',
    'StepExecutor',
    'DeploymentRun',
]
