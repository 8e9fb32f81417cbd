import json
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Dict, Any
import logging

GLOBAL_SCOPE = "global"
GLOBAL_LOG_FILE = "app.log"


def sanitize_scope(scope: str) -> str:
    """Make a repository name safe to use as a file name"""
    return re.sub(r'[^a-zA-Z0-9_-]', '_', scope)


class LogsStorage:
    """File-based, append-only storage of deployment logs (JSON lines per repository)."""

    def __init__(self, logs_dir: str = "./logs"):
        self.logs_dir = Path(logs_dir)
        self.logger = logging.getLogger(__name__)

        # Create logs directory if it doesn't exist
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def _scope_file(self, scope: str) -> Path:
        if not scope or scope == GLOBAL_SCOPE:
            return self.logs_dir / GLOBAL_LOG_FILE
        return self.logs_dir / f"{sanitize_scope(scope)}.log"

    def append_log(self, scope: str, timestamp: datetime, level: str, message: str) -> None:
        """Append a single log entry for a scope as a JSON line."""
        entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": level,
            "message": message,
            "scope": scope or GLOBAL_SCOPE,
        }

        scope_file = self._scope_file(scope)
        try:
            with open(scope_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            self.logger.warning(f"Failed to append log for {scope}: {e}")

    def get_logs(self, scope: str = GLOBAL_SCOPE, lines: Optional[int] = 100, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read the most recent entries for a scope.

        Returns list of dicts with keys: timestamp (datetime), level, message, scope.
        """
        scope_file = self._scope_file(scope)
        if not scope_file.exists():
            return []

        logs: List[Dict[str, Any]] = []
        try:
            with open(scope_file, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                        if level and data.get("level") != level.upper():
                            continue
                        if isinstance(data.get("timestamp"), str):
                            data["timestamp"] = datetime.fromisoformat(data["timestamp"])
                        logs.append(data)
                    except (ValueError, TypeError) as parse_err:
                        self.logger.debug(f"Skipping malformed log line in {scope_file}: {parse_err}")
        except OSError as e:
            self.logger.error(f"Failed to read logs for {scope}: {e}")
            return []

        # entries are in append order, keep the most recent
        if lines is not None and lines >= 0:
            logs = logs[-lines:] if lines else []

        return logs

    def list_scopes(self) -> List[str]:
        """Names of the scopes that have a log file"""
        scopes = []
        for log_file in sorted(self.logs_dir.glob("*.log")):
            scopes.append(GLOBAL_SCOPE if log_file.name == GLOBAL_LOG_FILE else log_file.stem)
        return scopes
