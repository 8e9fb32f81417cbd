from .repository_store import RepositoryStore, generate_token, project_name_from_url
from .file_repository_store import FileRepositoryStore

__all__ = ['RepositoryStore', 'FileRepositoryStore', 'generate_token', 'project_name_from_url']
