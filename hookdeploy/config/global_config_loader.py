import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class ServerConfig:
    """Webhook HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


@dataclass
class StorageConfig:
    """On-disk locations"""
    registry_path: str = "./repositories.json"
    logs_dir: str = "./logs"
    lock_dir: str = "./data/locks"
    repositories_dir: str = "./repositories"


@dataclass
class DeploymentConfig:
    """Deployment execution settings"""
    command_timeout: Optional[int] = 900  # seconds per command, None waits forever
    lock_timeout: int = 30
    token_header: str = "X-Gitlab-Token"
    event_header: str = "X-Gitlab-Event"
    default_branch: str = "main"
    default_profile: str = "symfony-webpack"


@dataclass
class GlobalConfig:
    """Global configuration for the webhook server and CLI"""
    server: ServerConfig
    storage: StorageConfig
    deployment: DeploymentConfig

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlobalConfig':
        """Create GlobalConfig from dictionary"""
        return cls(
            server=ServerConfig(**(data.get('server') or {})),
            storage=StorageConfig(**(data.get('storage') or {})),
            deployment=DeploymentConfig(**(data.get('deployment') or {})),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'GlobalConfig':
        """Load GlobalConfig from YAML file"""
        path = Path(yaml_path)
        if not path.exists():
            # Return default config if file doesn't exist
            return cls.default()

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def default(cls) -> 'GlobalConfig':
        """Return default configuration"""
        return cls(
            server=ServerConfig(),
            storage=StorageConfig(),
            deployment=DeploymentConfig(),
        )


# Global instance - can be overridden
_global_config: Optional[GlobalConfig] = None


def load_global_config(config_path: Optional[str] = None) -> GlobalConfig:
    """
    Load global configuration from YAML file.
    If no path provided, looks for hookdeploy.yaml in standard locations.
    """
    global _global_config

    if config_path:
        _global_config = GlobalConfig.from_yaml(config_path)
        return _global_config

    # Try standard locations
    search_paths = [
        Path("./hookdeploy.yaml"),
        Path("./config/hookdeploy.yaml"),
        Path("/etc/hookdeploy/hookdeploy.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            _global_config = GlobalConfig.from_yaml(str(path))
            return _global_config

    # Return default if no config found
    _global_config = GlobalConfig.default()
    return _global_config


def get_global_config() -> GlobalConfig:
    """Get the loaded global configuration"""
    global _global_config
    if _global_config is None:
        _global_config = load_global_config()
    return _global_config
