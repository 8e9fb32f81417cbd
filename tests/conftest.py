"""Pytest configuration and fixtures for hookdeploy tests."""

import sys
import logging
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hookdeploy.config.global_config_loader import GlobalConfig
from hookdeploy.config.lock import RepositoryLockManager
from hookdeploy.core.models import RepositoryRecord
from hookdeploy.deployment.service import DeploymentService
from hookdeploy.monitoring.event_logger import EventLogger
from hookdeploy.monitoring.logs_storage import LogsStorage
from hookdeploy.registry.file_repository_store import FileRepositoryStore
from hookdeploy.runner.command_runner import CommandRunner, CommandResult

# Configure logging
logging.basicConfig(level=logging.INFO)

ANCHOR_SHA = "3f2a9c1d0b7e4a5f6c8d9e0a1b2c3d4e5f6a7b8c"
MAIN_TOKEN = "a" * 64
OTHER_TOKEN = "b" * 64


class FakeCommandRunner(CommandRunner):
    """
    Scripted command runner.

    ``failures`` maps a command substring to the exit code it should return;
    every other command succeeds. ``git rev-parse HEAD`` answers ANCHOR_SHA.
    """

    def __init__(self, failures: Dict[str, int] = None, anchor: str = ANCHOR_SHA):
        self.failures = dict(failures or {})
        self.anchor = anchor
        self.calls: List[Tuple[str, str]] = []

    def run(self, command: str, working_directory: str) -> CommandResult:
        self.calls.append((command, working_directory))
        for fragment, exit_code in self.failures.items():
            if fragment in command:
                return CommandResult(command=command, exit_code=exit_code, output=f"{fragment} failed")
        if command == "git rev-parse HEAD":
            return CommandResult(command=command, exit_code=0, output=f"{self.anchor}\n")
        return CommandResult(command=command, exit_code=0, output="")

    @property
    def commands(self) -> List[str]:
        return [command for command, _ in self.calls]


def make_record(local_path, name="shop", branch="main", profile_type="symfony-api", token=MAIN_TOKEN):
    return RepositoryRecord(
        name=name,
        git_url=f"git@gitlab.example.com:acme/{name}.git",
        local_path=str(local_path),
        branch=branch,
        profile_type=profile_type,
        webhook_token=token,
        created_at="2024-05-01 10:00:00",
    )


@pytest.fixture
def fake_runner():
    return FakeCommandRunner()


@pytest.fixture
def project_dir(tmp_path):
    """Working tree containing the manifests of a Symfony project"""
    path = tmp_path / "projects" / "shop"
    path.mkdir(parents=True)
    (path / "composer.json").write_text("{}")
    (path / "package.json").write_text("{}")
    return path


@pytest.fixture
def shop_record(project_dir):
    return make_record(project_dir)


@pytest.fixture
def logs_storage(tmp_path):
    return LogsStorage(str(tmp_path / "logs"))


@pytest.fixture
def event_logger(logs_storage):
    return EventLogger(logs_storage)


@pytest.fixture
def repository_store(tmp_path, shop_record, project_dir):
    store = FileRepositoryStore(str(tmp_path / "repositories.json"))
    store.add(shop_record)
    store.add(make_record(project_dir.parent / "blog", name="blog", profile_type="simple", token=OTHER_TOKEN))
    return store


@pytest.fixture
def global_config(tmp_path):
    return GlobalConfig.from_dict({
        'storage': {
            'registry_path': str(tmp_path / "repositories.json"),
            'logs_dir': str(tmp_path / "logs"),
            'lock_dir': str(tmp_path / "locks"),
            'repositories_dir': str(tmp_path / "projects"),
        },
        'deployment': {'lock_timeout': 1},
    })


@pytest.fixture
def deployment_service(repository_store, fake_runner, event_logger, global_config):
    lock_manager = RepositoryLockManager(global_config.storage.lock_dir, timeout=0.2, poll_interval=0.05)
    return DeploymentService(
        store=repository_store,
        runner=fake_runner,
        event_logger=event_logger,
        lock_manager=lock_manager,
        config=global_config.deployment,
    )
