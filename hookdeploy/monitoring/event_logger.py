"""
Repository-scoped event logger.

Every entry goes to the append-only LogsStorage sink of its scope and is
mirrored to the standard logging tree.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.enums import LogLevel
from .logs_storage import LogsStorage, GLOBAL_SCOPE


class EventLogger:
    """Append-only, per-repository log sink used by the gate and the pipeline"""

    def __init__(self, storage: Optional[LogsStorage] = None):
        self.storage = storage
        self.logger = logging.getLogger(__name__)

    def log(self, message: str, level: str = LogLevel.INFO.value, repository: str = GLOBAL_SCOPE) -> None:
        level = level.value if isinstance(level, LogLevel) else str(level).upper()
        scope = repository or GLOBAL_SCOPE

        self.logger.log(getattr(logging, level, logging.INFO), f"[{scope}] {message}")

        # LogsStorage reports its own write failures
        if self.storage is not None:
            self.storage.append_log(scope, datetime.now(), level, message)

    def info(self, message: str, repository: str = GLOBAL_SCOPE) -> None:
        self.log(message, LogLevel.INFO.value, repository)

    def warning(self, message: str, repository: str = GLOBAL_SCOPE) -> None:
        self.log(message, LogLevel.WARNING.value, repository)

    def error(self, message: str, repository: str = GLOBAL_SCOPE) -> None:
        self.log(message, LogLevel.ERROR.value, repository)

    def get_logs(self, repository: str = GLOBAL_SCOPE, lines: int = 100) -> List[Dict[str, Any]]:
        if self.storage is None:
            return []
        return self.storage.get_logs(repository, lines)
