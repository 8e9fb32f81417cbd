"""
Webhook admission gate.

Decides whether an inbound event triggers a deployment. The checks run in a
fixed order and the first applicable outcome wins:

1. token lookup (constant-time comparison against every registered token)
2. event kind filter (push and merge request only)
3. merge state filter for merge requests
4. branch match against the repository's configured branch
"""
import hmac
import logging
from typing import Iterable, Mapping, Any, Optional

from ..core.enums import EventKind
from ..core.models import RepositoryRecord, WebhookEvent, Decision
from ..monitoring.event_logger import EventLogger

BRANCH_REF_PREFIX = "refs/heads/"

EVENT_NAMES = {
    "Push Hook": EventKind.PUSH,
    "Merge Request Hook": EventKind.MERGE_REQUEST,
}


def tokens_match(provided: str, expected: str) -> bool:
    """Timing-safe token comparison"""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def find_repository_by_token(token: str, repositories: Iterable[RepositoryRecord]) -> Optional[RepositoryRecord]:
    """
    Return the repository whose webhook token equals ``token``.

    Every record is compared, so the time spent does not depend on where
    (or whether) the matching record sits in the registry.
    """
    match = None
    for repository in repositories:
        if not repository.webhook_token:
            continue
        if tokens_match(token, repository.webhook_token) and match is None:
            match = repository
    return match


def branch_from_ref(ref: Optional[str]) -> str:
    ref = ref or ""
    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX):]
    return ref


def _text(value: Any) -> Optional[str]:
    """Payload field as a string; values of any other JSON type count as missing"""
    return value if isinstance(value, str) else None


def parse_webhook_event(
    headers: Mapping[str, str],
    payload: Mapping[str, Any],
    token_header: str = "X-Gitlab-Token",
    event_header: str = "X-Gitlab-Event"
) -> WebhookEvent:
    """Build a WebhookEvent from request headers and the decoded JSON body"""
    normalized = {str(key).lower(): value for key, value in headers.items()}
    token = normalized.get(token_header.lower())
    event_name = normalized.get(event_header.lower(), "") or ""
    kind = EVENT_NAMES.get(event_name, EventKind.OTHER)

    if kind == EventKind.MERGE_REQUEST:
        attributes = payload.get("object_attributes")
        if not isinstance(attributes, dict):
            attributes = {}
        return WebhookEvent(
            token=token,
            event_kind=kind,
            ref_or_target_branch=_text(attributes.get("target_branch")),
            merge_state=_text(attributes.get("state")),
            event_name=event_name,
        )

    return WebhookEvent(
        token=token,
        event_kind=kind,
        ref_or_target_branch=_text(payload.get("ref")),
        event_name=event_name,
    )


class AdmissionGate:
    """Pure, synchronous accept / ignore / reject decision for webhook events"""

    def __init__(self, event_logger: Optional[EventLogger] = None):
        self.event_logger = event_logger
        self.logger = logging.getLogger(__name__)

    def admit(self, event: WebhookEvent, repositories: Iterable[RepositoryRecord]) -> Decision:
        if not event.token:
            return self._reject("Missing token")

        repository = find_repository_by_token(event.token, repositories)
        if repository is None:
            return self._reject("Invalid token")

        if event.event_kind not in (EventKind.PUSH, EventKind.MERGE_REQUEST):
            return self._ignore(f"Event ignored ({event.event_name})", repository)

        if event.event_kind == EventKind.MERGE_REQUEST:
            if event.merge_state != "merged":
                return self._ignore("Merge request event ignored (not merged)", repository)
            branch = event.ref_or_target_branch or ""
        else:
            branch = branch_from_ref(event.ref_or_target_branch)

        if branch != repository.branch:
            return self._ignore(f"Branch {branch} ignored", repository)

        if self.event_logger:
            self.event_logger.info(
                f"Received webhook for {repository.name}, branch: {branch}",
                repository.name
            )
        return Decision.deploy(repository, branch)

    def _reject(self, reason: str) -> Decision:
        if self.event_logger:
            self.event_logger.error(f"Webhook error: {reason}")
        else:
            self.logger.error(f"Webhook error: {reason}")
        return Decision.reject(reason)

    def _ignore(self, reason: str, repository: RepositoryRecord) -> Decision:
        if self.event_logger:
            self.event_logger.info(reason, repository.name)
        return Decision.ignore(reason, repository)
