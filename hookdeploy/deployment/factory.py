"""
Factory wiring the deployment service from the global configuration.
"""
import logging
from typing import Optional

from ..config.global_config_loader import GlobalConfig, get_global_config
from ..config.lock import RepositoryLockManager
from ..monitoring.event_logger import EventLogger
from ..monitoring.logs_storage import LogsStorage
from ..registry.file_repository_store import FileRepositoryStore
from ..runner.command_runner import SubprocessCommandRunner
from .service import DeploymentService


def create_deployment_service(global_config: Optional[GlobalConfig] = None) -> DeploymentService:
    """Create a DeploymentService backed by the file registry and subprocess runner"""
    config = global_config or get_global_config()

    store = FileRepositoryStore(config.storage.registry_path)
    event_logger = EventLogger(LogsStorage(config.storage.logs_dir))
    lock_manager = RepositoryLockManager(
        config.storage.lock_dir,
        timeout=config.deployment.lock_timeout
    )
    runner = SubprocessCommandRunner(timeout=config.deployment.command_timeout)

    logging.getLogger(__name__).info(
        f"Deployment service using registry {config.storage.registry_path}, logs in {config.storage.logs_dir}"
    )
    return DeploymentService(
        store=store,
        runner=runner,
        event_logger=event_logger,
        lock_manager=lock_manager,
        config=config.deployment,
    )
