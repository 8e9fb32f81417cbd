from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from ..models.api_models import RepositorySummary, LogEntry
from ...registry.repository_store import RepositoryStore
from ...monitoring.logs_storage import LogsStorage
from ...core.exceptions import RegistryError

router = APIRouter(prefix="/api/repositories", tags=["repositories"])


def get_repository_store():
    """Dependency to get repository store instance"""
    from ..state import app_state
    store = app_state.get("repository_store")
    if not store:
        raise HTTPException(status_code=500, detail="Repository store not initialized")
    return store


def get_logs_storage():
    """Dependency to get logs storage instance"""
    from ..state import app_state
    logs_storage = app_state.get("logs_storage")
    if not logs_storage:
        raise HTTPException(status_code=500, detail="Logs storage not initialized")
    return logs_storage


@router.get("/", response_model=List[RepositorySummary])
async def list_repositories(store: RepositoryStore = Depends(get_repository_store)):
    """List registered repositories (tokens are never returned)"""
    try:
        return [RepositorySummary(**record.to_summary()) for record in store.all()]
    except RegistryError as e:
        raise HTTPException(status_code=500, detail=f"Failed to list repositories: {str(e)}")


@router.get("/{name}/logs", response_model=List[LogEntry])
async def get_repository_logs(
    name: str,
    lines: int = Query(50, ge=1, le=1000),
    level: Optional[str] = Query(None, description="Filter by log level"),
    store: RepositoryStore = Depends(get_repository_store),
    logs: LogsStorage = Depends(get_logs_storage)
):
    """Get the most recent deployment log entries of a repository"""
    if not store.has(name):
        raise HTTPException(status_code=404, detail=f"Repository '{name}' not found")
    return [LogEntry(**entry) for entry in logs.get_logs(name, lines=lines, level=level)]
