"""
Exception hierarchy for hookdeploy.

Admission decisions and pipeline failures are returned as values; these
exceptions cover configuration faults and collaborators that cannot be used.
"""
from typing import Optional


class HookDeployError(Exception):
    """Base class for all hookdeploy errors"""


class ConfigurationError(HookDeployError):
    """Invalid or inconsistent configuration"""


class UnknownProfileError(ConfigurationError):
    """Raised when a repository declares a deployment profile that does not exist"""

    def __init__(self, profile_type: Optional[str]) -> None:
        self.profile_type = profile_type
        super().__init__(f"Unknown deployment type: {profile_type}")


class CommandRunnerError(HookDeployError):
    """The command runner itself could not execute a command"""

    def __init__(self, command: str, working_directory: str, reason: str) -> None:
        self.command = command
        self.working_directory = working_directory
        self.reason = reason
        super().__init__(f"Cannot run '{command}' in {working_directory}: {reason}")


class RegistryError(HookDeployError):
    """Repository registry could not be read or updated"""


class RepositoryLockTimeout(HookDeployError, TimeoutError):
    """Another deployment of the same repository holds the lock"""

    def __init__(self, repository: str, timeout: float) -> None:
        self.repository = repository
        self.timeout = timeout
        super().__init__(
            f"Could not acquire deployment lock for '{repository}' within {timeout}s. "
            "Another deployment may be in progress."
        )
