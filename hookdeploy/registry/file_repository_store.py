import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..core.exceptions import RegistryError
from ..core.models import RepositoryRecord
from .repository_store import RepositoryStore


class FileRepositoryStore(RepositoryStore):
    """JSON file registry keyed by repository name.

    The file is read again on every access so a running server picks up
    repositories added or removed from the CLI.
    """

    def __init__(self, registry_path: str = "./repositories.json"):
        self.registry_path = Path(registry_path)
        self.logger = logging.getLogger(__name__)

    def get(self, name: str) -> Optional[RepositoryRecord]:
        data = self._load().get(name)
        if data is None:
            return None
        return RepositoryRecord.from_dict(data)

    def all(self) -> List[RepositoryRecord]:
        return [RepositoryRecord.from_dict(data) for data in self._load().values()]

    def add(self, record: RepositoryRecord) -> None:
        """Register a new repository"""
        repositories = self._load()
        if record.name in repositories:
            raise RegistryError(f"Repository '{record.name}' already exists")
        repositories[record.name] = record.to_dict()
        self._save(repositories)
        self.logger.info(f"Registered repository {record.name}")

    def remove(self, name: str) -> RepositoryRecord:
        """Unregister a repository and return its former record"""
        repositories = self._load()
        if name not in repositories:
            raise RegistryError(f"Repository '{name}' not found")
        removed = RepositoryRecord.from_dict(repositories.pop(name))
        self._save(repositories)
        self.logger.info(f"Removed repository {name}")
        return removed

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.registry_path.exists():
            return {}
        try:
            with open(self.registry_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise RegistryError(f"Failed to read registry {self.registry_path}: {e}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except ValueError as e:
            raise RegistryError(f"Registry {self.registry_path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RegistryError(f"Registry {self.registry_path} must contain a JSON object")
        return data

    def _save(self, repositories: Dict[str, Dict[str, Any]]) -> None:
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.registry_path.with_suffix(self.registry_path.suffix + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(repositories, f, indent=4)
            os.replace(tmp_path, self.registry_path)
        except OSError as e:
            raise RegistryError(f"Failed to write registry {self.registry_path}: {e}") from e
