"""Test cases for the subprocess command runner."""

import pytest

from hookdeploy.core.exceptions import CommandRunnerError
from hookdeploy.runner.command_runner import SubprocessCommandRunner, TIMEOUT_EXIT_CODE


class TestSubprocessCommandRunner:
    """Test shell command execution"""

    def test_runs_in_working_directory(self, tmp_path):
        result = SubprocessCommandRunner().run("pwd", str(tmp_path))

        assert result.ok
        assert result.output == str(tmp_path.resolve())

    def test_stderr_is_merged(self, tmp_path):
        result = SubprocessCommandRunner().run("echo out; echo err >&2; exit 3", str(tmp_path))

        assert result.exit_code == 3
        assert not result.ok
        assert "out" in result.output and "err" in result.output

    def test_no_state_between_commands(self, tmp_path):
        runner = SubprocessCommandRunner()
        runner.run("export DEPLOY_MARKER=1", str(tmp_path))

        assert runner.run('echo "${DEPLOY_MARKER:-unset}"', str(tmp_path)).output == "unset"

    def test_timeout(self, tmp_path):
        result = SubprocessCommandRunner(timeout=0.2).run("sleep 5", str(tmp_path))

        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert "timed out" in result.output

    def test_missing_working_directory(self, tmp_path):
        with pytest.raises(CommandRunnerError) as exc_info:
            SubprocessCommandRunner().run("true", str(tmp_path / "missing"))

        assert exc_info.value.command == "true"

    def test_undecodable_output_is_replaced(self, tmp_path):
        result = SubprocessCommandRunner().run("printf 'caf\\351\\n'; exit 1", str(tmp_path))

        assert result.exit_code == 1
        assert result.output == "caf�"
