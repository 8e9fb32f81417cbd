"""
Command runner used by the deployment pipeline to shell out (git, composer, npm, bin/console).
"""
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import CommandRunnerError

# same convention as coreutils `timeout`
TIMEOUT_EXIT_CODE = 124


@dataclass
class CommandResult:
    """Exit status and combined stdout/stderr of a command"""
    command: str
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner(ABC):
    """Executes a shell command with the working directory pinned"""

    @abstractmethod
    def run(self, command: str, working_directory: str) -> CommandResult:
        """Run ``command`` inside ``working_directory``"""
        pass


class SubprocessCommandRunner(CommandRunner):
    """Runs commands through /bin/sh with stderr merged into stdout."""

    def __init__(self, timeout: Optional[float] = 900, shell_executable: str = "/bin/sh"):
        """
        Args:
            timeout: Seconds before a command is killed and reported as failed
                     (None waits forever)
            shell_executable: Shell used to interpret commands
        """
        self.timeout = timeout
        self.shell_executable = shell_executable
        self.logger = logging.getLogger(__name__)

    def run(self, command: str, working_directory: str) -> CommandResult:
        cwd = Path(working_directory)
        if not cwd.is_dir():
            raise CommandRunnerError(command, str(working_directory), "working directory does not exist")

        self.logger.debug(f"Running '{command}' in {cwd}")
        try:
            process = subprocess.run(
                command,
                shell=True,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                executable=self.shell_executable,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            partial = e.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            self.logger.warning(f"Command timed out after {self.timeout}s: {command}")
            return CommandResult(
                command=command,
                exit_code=TIMEOUT_EXIT_CODE,
                output=f"{partial}\nCommand timed out after {self.timeout} seconds".strip(),
            )
        except OSError as e:
            raise CommandRunnerError(command, str(working_directory), str(e)) from e

        return CommandResult(
            command=command,
            exit_code=process.returncode,
            output=(process.stdout or "").strip(),
        )
