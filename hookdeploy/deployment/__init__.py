"""
Deployment service: webhook handling and locked pipeline runs for tracked repositories.
"""

from .models import WebhookResponse
from .service import DeploymentService
from .factory import create_deployment_service

__all__ = [
    'WebhookResponse',
    'DeploymentService',
    'create_deployment_service',
]
