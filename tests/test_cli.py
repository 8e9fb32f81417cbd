"""Test cases for the hookdeploy command line."""

from datetime import datetime

import pytest
import yaml
from click.testing import CliRunner

from hookdeploy.cli import repository_cli
from hookdeploy.deployment.service import DeploymentService
from hookdeploy.main import cli
from hookdeploy.monitoring.logs_storage import LogsStorage
from hookdeploy.pipeline.profiles import DOCTRINE_MIGRATE
from hookdeploy.registry.file_repository_store import FileRepositoryStore


@pytest.fixture
def config_file(tmp_path, global_config):
    path = tmp_path / "hookdeploy.yaml"
    path.write_text(yaml.safe_dump({
        'storage': {
            'registry_path': global_config.storage.registry_path,
            'logs_dir': global_config.storage.logs_dir,
            'lock_dir': global_config.storage.lock_dir,
            'repositories_dir': global_config.storage.repositories_dir,
        },
    }))
    return str(path)


@pytest.fixture
def runner():
    return CliRunner()


class TestListCommand:

    def test_lists_repositories(self, runner, repository_store, config_file):
        result = runner.invoke(cli, ['list', '--global-config', config_file])

        assert result.exit_code == 0
        assert "shop" in result.output
        assert "blog" in result.output
        assert "symfony-api" in result.output

    def test_empty_registry(self, runner, config_file):
        result = runner.invoke(cli, ['list', '--global-config', config_file])

        assert result.exit_code == 0
        assert "No repositories configured" in result.output


class TestInstallCommand:

    @pytest.fixture(autouse=True)
    def no_clone(self, monkeypatch):
        monkeypatch.setattr(DeploymentService, "clone", lambda self, git_url, local_path, branch="main": True)

    def test_install_with_arguments(self, runner, config_file, global_config, tmp_path):
        result = runner.invoke(cli, [
            'install', 'git@gitlab.com:acme/api.git', str(tmp_path / "api"), 'production', 'symfony-api',
            '--global-config', config_file,
        ])

        assert result.exit_code == 0, result.output
        record = FileRepositoryStore(global_config.storage.registry_path).get("api")
        assert record.branch == "production"
        assert record.profile_type == "symfony-api"
        assert len(record.webhook_token) == 64
        assert record.webhook_token in result.output

    def test_interactive_install(self, runner, config_file, global_config, tmp_path):
        answers = "\n".join([
            "git@gitlab.com:acme/api.git",
            str(tmp_path / "api"),
            "main",
            "simple",
            "y",
        ]) + "\n"
        result = runner.invoke(cli, ['install', '--global-config', config_file], input=answers)

        assert result.exit_code == 0, result.output
        assert FileRepositoryStore(global_config.storage.registry_path).get("api").profile_type == "simple"

    def test_duplicate_name_fails(self, runner, repository_store, config_file, tmp_path):
        result = runner.invoke(cli, [
            'install', 'git@gitlab.com:acme/shop.git', str(tmp_path / "shop2"), '--global-config', config_file,
        ])

        assert result.exit_code != 0
        assert "already exists" in result.output

    def test_unknown_type_fails(self, runner, config_file, tmp_path):
        result = runner.invoke(cli, [
            'install', 'git@gitlab.com:acme/api.git', str(tmp_path / "api"), 'main', 'laravel',
            '--global-config', config_file,
        ])

        assert result.exit_code != 0
        assert "Unknown deployment type: laravel" in result.output


class TestRemoveCommand:

    def test_remove_keeps_directory(self, runner, repository_store, project_dir, config_file):
        result = runner.invoke(cli, ['remove', 'shop', '--global-config', config_file], input="y\nn\n")

        assert result.exit_code == 0, result.output
        assert not repository_store.has("shop")
        assert project_dir.exists()

    def test_remove_and_delete_directory(self, runner, repository_store, project_dir, config_file):
        result = runner.invoke(cli, ['remove', 'shop', '--global-config', config_file], input="y\ny\n")

        assert result.exit_code == 0, result.output
        assert not project_dir.exists()

    def test_cancel(self, runner, repository_store, config_file):
        result = runner.invoke(cli, ['remove', 'shop', '--global-config', config_file], input="n\n")

        assert result.exit_code == 0
        assert repository_store.has("shop")
        assert "Operation cancelled." in result.output

    def test_choice_prompt(self, runner, repository_store, config_file):
        result = runner.invoke(cli, ['remove', '--global-config', config_file], input="blog\ny\nn\n")

        assert result.exit_code == 0, result.output
        assert not repository_store.has("blog")
        assert repository_store.has("shop")

    def test_unknown_repository(self, runner, repository_store, config_file):
        result = runner.invoke(cli, ['remove', 'missing', '--global-config', config_file])

        assert result.exit_code != 0
        assert "not found" in result.output


class TestLogsCommand:

    def test_shows_entries(self, runner, global_config, config_file):
        storage = LogsStorage(global_config.storage.logs_dir)
        storage.append_log("shop", datetime(2024, 5, 1, 12, 0), "INFO", "Deployment successful")

        result = runner.invoke(cli, ['logs', 'shop', '--global-config', config_file])

        assert result.exit_code == 0
        assert "[2024-05-01 12:00:00] [INFO] Deployment successful" in result.output

    def test_no_logs(self, runner, config_file):
        result = runner.invoke(cli, ['logs', '--global-config', config_file])

        assert result.exit_code == 0
        assert "No logs found for: global" in result.output


class TestTestCommand:

    @pytest.fixture(autouse=True)
    def service(self, monkeypatch, deployment_service):
        monkeypatch.setattr(repository_cli, "create_deployment_service", lambda config: deployment_service)
        return deployment_service

    def test_successful_test_deployment(self, runner, config_file, fake_runner):
        result = runner.invoke(cli, ['test', 'shop', '--global-config', config_file])

        assert result.exit_code == 0, result.output
        assert "Test deployment successful" in result.output
        assert "git pull origin main" in fake_runner.commands

    def test_failed_test_deployment(self, runner, config_file, fake_runner):
        fake_runner.failures[DOCTRINE_MIGRATE] = 1
        result = runner.invoke(cli, ['test', 'shop', '--global-config', config_file])

        assert result.exit_code != 0
        assert "Test deployment failed: Deployment failed at step: schema_migrate" in result.output
        assert "anchor_reset" in result.output

    def test_unknown_repository(self, runner, config_file):
        result = runner.invoke(cli, ['test', 'missing', '--global-config', config_file])

        assert result.exit_code != 0
        assert "Repository 'missing' not found" in result.output

    def test_reports_profile_of_registered_repository(self, runner, config_file):
        result = runner.invoke(cli, ['test', 'shop', '--global-config', config_file])

        assert "Testing deployment for: shop" in result.output
        assert "Profile: symfony-api" in result.output

    def test_held_lock_fails_without_running_steps(self, runner, config_file, service, fake_runner):
        with service.lock_manager.hold("shop"):
            result = runner.invoke(cli, ['test', 'shop', '--global-config', config_file])

        assert result.exit_code != 0
        assert "Could not acquire deployment lock for 'shop'" in result.output
        assert fake_runner.calls == []

    def test_unknown_repository_runs_nothing(self, runner, config_file, fake_runner):
        runner.invoke(cli, ['test', 'missing', '--global-config', config_file])

        assert fake_runner.calls == []
