"""
CLI for running the webhook server.
"""
import click
import logging

from ..api.main import run_server
from ..api.state import app_state
from ..config.global_config_loader import load_global_config


@click.command()
@click.option('--host', default=None, help='Host to bind to (default: server.host from config)')
@click.option('--port', default=None, type=int, help='Port to bind to (default: server.port from config)')
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default=None, help='Log level (default: server.log_level from config)')
def serve(host: str, port: int, global_config: str, log_level: str):
    """Start the webhook server"""
    config = load_global_config(global_config)
    log_level = log_level or config.server.log_level

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    app_state["global_config"] = config

    host = host or config.server.host
    port = port or config.server.port
    logging.getLogger(__name__).info(f"Starting webhook server on {host}:{port}")
    run_server(host, port, log_level)
