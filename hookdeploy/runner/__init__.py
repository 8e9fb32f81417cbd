from .command_runner import CommandRunner, CommandResult, SubprocessCommandRunner, TIMEOUT_EXIT_CODE

__all__ = ['CommandRunner', 'CommandResult', 'SubprocessCommandRunner', 'TIMEOUT_EXIT_CODE']
