"""
Data models shared by the admission gate, the deployment pipeline and the registry.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from .enums import EventKind, DecisionKind


@dataclass(frozen=True)
class RepositoryRecord:
    """A tracked repository as stored in the registry"""
    name: str
    git_url: str
    local_path: str
    branch: str
    profile_type: str
    webhook_token: str
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk registry layout"""
        data = asdict(self)
        data['type'] = data.pop('profile_type')
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RepositoryRecord':
        """Create a record from a registry entry"""
        return cls(
            name=data['name'],
            git_url=data.get('git_url', ''),
            local_path=data['local_path'],
            branch=data.get('branch', 'main'),
            profile_type=data.get('type', data.get('profile_type', '')),
            webhook_token=data.get('webhook_token', ''),
            created_at=data.get('created_at'),
        )

    def to_summary(self) -> Dict[str, Any]:
        """Registry entry without the webhook secret"""
        data = self.to_dict()
        data.pop('webhook_token')
        return data


@dataclass(frozen=True)
class WebhookEvent:
    """An inbound notification, consumed once by the admission gate"""
    token: Optional[str]
    event_kind: EventKind
    ref_or_target_branch: Optional[str] = None
    merge_state: Optional[str] = None
    event_name: str = ""


@dataclass(frozen=True)
class Decision:
    """Outcome of admitting a webhook event"""
    kind: DecisionKind
    reason: Optional[str] = None
    repository: Optional[RepositoryRecord] = None
    branch: Optional[str] = None

    @classmethod
    def deploy(cls, repository: RepositoryRecord, branch: str) -> 'Decision':
        return cls(DecisionKind.DEPLOY, repository=repository, branch=branch)

    @classmethod
    def ignore(cls, reason: str, repository: Optional[RepositoryRecord] = None) -> 'Decision':
        return cls(DecisionKind.IGNORE, reason=reason, repository=repository)

    @classmethod
    def reject(cls, reason: str) -> 'Decision':
        return cls(DecisionKind.REJECT, reason=reason)

    @property
    def should_deploy(self) -> bool:
        return self.kind == DecisionKind.DEPLOY
