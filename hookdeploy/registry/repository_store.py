import re
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..core.models import RepositoryRecord


class RepositoryStore(ABC):
    """Abstract base class for repository registry backends"""

    @abstractmethod
    def get(self, name: str) -> Optional[RepositoryRecord]:
        """Load a repository record by name"""
        pass

    @abstractmethod
    def all(self) -> List[RepositoryRecord]:
        """List all repository records"""
        pass

    def has(self, name: str) -> bool:
        """Check if a repository is registered"""
        return self.get(name) is not None


def generate_token() -> str:
    """64 hex characters of webhook secret"""
    return secrets.token_hex(32)


def project_name_from_url(git_url: str, local_path: Optional[str] = None) -> str:
    """
    Derive the project name from ``.../<name>.git``, falling back to the
    basename of the local path.
    """
    match = re.search(r'/([^/]+)\.git$', git_url or "")
    if match:
        return match.group(1)
    if local_path:
        return Path(local_path).name
    return "project"
