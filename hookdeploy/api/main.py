import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from .. import __version__
from ..config.global_config_loader import get_global_config, load_global_config
from ..core.exceptions import RegistryError
from ..deployment.factory import create_deployment_service
from .state import app_state


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logging.info("Starting hookdeploy webhook server")

    # A service injected before startup (main() or tests) takes precedence
    service = app_state.get("deployment_service")
    if service is None:
        config = app_state.get("global_config") or get_global_config()
        app_state["global_config"] = config
        service = create_deployment_service(config)
        app_state["deployment_service"] = service

    app_state["repository_store"] = service.store
    app_state["logs_storage"] = service.event_logger.storage

    logging.info(f"Webhook header names: {service.config.token_header}, {service.config.event_header}")

    yield

    # Shutdown
    logging.info("Shutting down hookdeploy webhook server")
    app_state.clear()


# Create FastAPI app
app = FastAPI(
    title="hookdeploy",
    description="Webhook-triggered deployments with compensating rollback",
    version=__version__,
    lifespan=lifespan
)

# Include routers (imported here to avoid circular import)
from .routers import webhook, repositories
app.include_router(repositories.router)
app.include_router(webhook.router)


@app.get("/", response_class=HTMLResponse)
async def root(request: Request):
    """Status page"""
    store = app_state.get("repository_store")
    try:
        repository_count = len(store.all()) if store else 0
    except RegistryError as e:
        logging.error(f"Cannot read repository registry: {e}")
        repository_count = 0

    webhook_url = str(request.base_url)
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>hookdeploy</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 40px; }}
            .header {{ color: #333; }}
            .status {{ margin: 10px 0; padding: 10px; background: #f5f5f5; }}
            .ok {{ font-weight: bold; color: #2e7d32; }}
        </style>
    </head>
    <body>
        <h1 class="header">hookdeploy</h1>
        <div class="status">Status: <span class="ok">running</span></div>
        <div class="status">Version: {__version__}</div>
        <div class="status">Repositories: {repository_count}</div>
        <div class="status">Webhook URL: <code>{webhook_url}</code> (POST)</div>
        <p><a href="/docs">Interactive API Documentation (Swagger UI)</a></p>
    </body>
    </html>
    """
    return html_content


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "hookdeploy",
        "version": __version__
    }


def run_server(host: str, port: int, log_level: str = "INFO"):
    """Run the webhook server with uvicorn"""
    uvicorn.run(
        "hookdeploy.api.main:app",
        host=host,
        port=port,
        reload=False,
        log_level=log_level.lower()
    )


def main():
    """Main function to run the API server"""
    import argparse
    parser = argparse.ArgumentParser(description="hookdeploy webhook server")
    parser.add_argument("--global-config", default=None, help="Path to global config file (hookdeploy.yaml)")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--log-level", default=None, help="Log level")

    args = parser.parse_args()

    config = load_global_config(args.global_config)
    log_level = args.log_level or config.server.log_level

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    app_state["global_config"] = config

    host = args.host or config.server.host
    port = args.port or config.server.port
    logging.info(f"Starting webhook server on {host}:{port}")
    run_server(host, port, log_level)


if __name__ == "__main__":
    main()
