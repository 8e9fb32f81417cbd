from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class RepositorySummary(BaseModel):
    """Registered repository without its webhook token"""
    name: str
    git_url: str
    local_path: str
    branch: str
    type: str
    created_at: Optional[str] = None


class LogEntry(BaseModel):
    """Stored event log entry"""
    timestamp: datetime
    level: str
    message: str
    scope: str
