"""
Deployment service for tracked repositories.
"""
import logging
import shlex
from pathlib import Path
from typing import Optional, Mapping, Any

from ..admission.gate import AdmissionGate, parse_webhook_event
from ..config.global_config_loader import DeploymentConfig
from ..config.lock import RepositoryLockManager
from ..core.enums import DecisionKind, RollbackStatus
from ..core.exceptions import CommandRunnerError, RegistryError, RepositoryLockTimeout
from ..core.models import RepositoryRecord
from ..monitoring.event_logger import EventLogger
from ..pipeline.executor import StepExecutor
from ..pipeline.models import DeploymentOutcome
from ..registry.repository_store import RepositoryStore
from ..runner.command_runner import CommandRunner
from .models import (
    WebhookResponse,
    HTTP_BAD_REQUEST,
    HTTP_UNAUTHORIZED,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
)


class DeploymentService:
    """
    Service for deploying tracked repositories.
    Handles webhook admission, repository locking and pipeline execution.
    """

    def __init__(
        self,
        store: RepositoryStore,
        runner: CommandRunner,
        event_logger: EventLogger,
        lock_manager: RepositoryLockManager,
        config: Optional[DeploymentConfig] = None
    ):
        """
        Initialize deployment service.

        Args:
            store: Repository registry (read-only for deployments)
            runner: Command runner used for every shell command
            event_logger: Repository-scoped log sink
            lock_manager: Per-repository lock held for each pipeline run
            config: Deployment settings (header names, timeouts)
        """
        self.store = store
        self.runner = runner
        self.event_logger = event_logger
        self.lock_manager = lock_manager
        self.config = config or DeploymentConfig()
        self.gate = AdmissionGate(event_logger)
        self.executor = StepExecutor(runner, event_logger)
        self.logger = logging.getLogger(__name__)

    def handle_webhook(self, headers: Mapping[str, str], payload: Any) -> WebhookResponse:
        """
        Admit an inbound webhook and deploy when it is accepted.

        Args:
            headers: Request headers (any case)
            payload: Decoded JSON body, None when the body was not valid JSON

        Returns:
            WebhookResponse carrying the HTTP status and JSON body
        """
        if not isinstance(payload, dict):
            self.event_logger.error("Webhook error: Invalid JSON payload")
            return WebhookResponse.failure(HTTP_BAD_REQUEST, "Invalid JSON payload")

        event = parse_webhook_event(
            headers,
            payload,
            token_header=self.config.token_header,
            event_header=self.config.event_header
        )

        try:
            repositories = self.store.all()
        except RegistryError as e:
            self.logger.error(f"Cannot read repository registry: {e}", exc_info=True)
            self.event_logger.error(f"Webhook error: {e}")
            return WebhookResponse.failure(HTTP_INTERNAL_SERVER_ERROR, "Repository registry unavailable")

        decision = self.gate.admit(event, repositories)

        if decision.kind == DecisionKind.REJECT:
            return WebhookResponse.failure(HTTP_UNAUTHORIZED, decision.reason)
        if decision.kind == DecisionKind.IGNORE:
            return WebhookResponse.ok(decision.reason)

        try:
            outcome = self.deploy(decision.repository)
        except RepositoryLockTimeout as e:
            self.event_logger.warning(str(e), decision.repository.name)
            return WebhookResponse.failure(HTTP_CONFLICT, "Deployment already in progress")

        if outcome.succeeded:
            return WebhookResponse.ok(outcome.message, details=outcome.to_dict())
        return WebhookResponse.failure(HTTP_INTERNAL_SERVER_ERROR, outcome.message, details=outcome.to_dict())

    def deploy(self, repository: RepositoryRecord) -> DeploymentOutcome:
        """
        Run the repository's deployment pipeline under its lock.

        Raises:
            RepositoryLockTimeout: another deployment of the repository is running
        """
        name = repository.name
        self.event_logger.info(f"Starting deployment for {name}", name)

        with self.lock_manager.hold(name):
            try:
                outcome = self.executor.deploy(repository)
            except CommandRunnerError as e:
                self.logger.error(f"Deployment aborted for {name}: {e}", exc_info=True)
                self.event_logger.error(f"Deployment failed: {e}", name)
                return DeploymentOutcome.aborted(name, str(e), repository.profile_type)

        self._log_outcome(outcome)
        return outcome

    def deploy_by_name(self, name: str) -> DeploymentOutcome:
        """Deploy a registered repository by name"""
        repository = self.store.get(name)
        if repository is None:
            raise RegistryError(f"Repository '{name}' not found")
        return self.deploy(repository)

    def clone(self, git_url: str, local_path: str, branch: str = "main") -> bool:
        """
        Clone a repository for a new registration.

        Returns:
            False when the target path already exists or the clone failed
        """
        target = Path(local_path)
        if target.exists():
            self.logger.warning(f"Clone target {target} already exists")
            return False

        target.parent.mkdir(parents=True, exist_ok=True)
        command = f"git clone -b {shlex.quote(branch)} {shlex.quote(git_url)} {shlex.quote(str(target))}"
        self.event_logger.info(f"Cloning repository: {command}")

        result = self.runner.run(command, str(target.parent))
        if result.ok:
            self.event_logger.info(f"Repository cloned successfully to {target}")
            return True

        self.event_logger.error(f"Failed to clone repository: {result.output}")
        return False

    def _log_outcome(self, outcome: DeploymentOutcome) -> None:
        name = outcome.repository
        if outcome.succeeded:
            self.event_logger.info("Deployment successful", name)
            return

        status = outcome.rollback_status
        if status == RollbackStatus.NOT_NEEDED:
            self.event_logger.error(outcome.message, name)
            return

        if status == RollbackStatus.COMPLETE:
            summary = "Rollback successful"
        elif status == RollbackStatus.PARTIAL:
            summary = "Rollback partially failed"
        else:
            summary = "Rollback failed, reset to pre-deploy commit did not complete"
        self.event_logger.error(f"{outcome.message}: {summary}", name)
