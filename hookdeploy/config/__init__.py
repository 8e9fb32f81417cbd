"""
Configuration loading and the per-repository deployment lock.
"""

from .global_config_loader import GlobalConfig, load_global_config, get_global_config
from .lock import RepositoryLockManager

__all__ = [
    'GlobalConfig',
    'load_global_config',
    'get_global_config',
    'RepositoryLockManager',
]
