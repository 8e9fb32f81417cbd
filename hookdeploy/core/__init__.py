# Core package initialization
from .enums import EventKind, DecisionKind, ProfileType, LogLevel, RollbackStatus, ExecutorState
from .exceptions import (
    HookDeployError,
    ConfigurationError,
    UnknownProfileError,
    CommandRunnerError,
    RegistryError,
    RepositoryLockTimeout,
)
from .models import RepositoryRecord, WebhookEvent, Decision

__all__ = [
    'EventKind',
    'DecisionKind',
    'ProfileType',
    'LogLevel',
    'RollbackStatus',
    'ExecutorState',
    'HookDeployError',
    'ConfigurationError',
    'UnknownProfileError',
    'CommandRunnerError',
    'RegistryError',
    'RepositoryLockTimeout',
    'RepositoryRecord',
    'WebhookEvent',
    'Decision',
]
