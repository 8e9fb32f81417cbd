from enum import Enum


class EventKind(str, Enum):
    PUSH = "push"
    MERGE_REQUEST = "merge_request"
    OTHER = "other"


class DecisionKind(str, Enum):
    DEPLOY = "deploy"
    IGNORE = "ignore"
    REJECT = "reject"


class ProfileType(str, Enum):
    """Deployment profiles a repository can declare"""
    SIMPLE = "simple"
    SYMFONY_API = "symfony-api"
    SYMFONY_WEBPACK = "symfony-webpack"
    SYMFONY_ASSET_MAPPER = "symfony-asset-mapper"


class LogLevel(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RollbackStatus(str, Enum):
    NOT_NEEDED = "not_needed"
    COMPLETE = "complete"
    PARTIAL = "partial"
    ANCHOR_RESET_FAILED = "anchor_reset_failed"


class ExecutorState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    UNWINDING = "unwinding"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
