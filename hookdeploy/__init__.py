"""
hookdeploy - webhook-triggered deployments with compensating rollback.

A push or merged merge request on a tracked repository's branch runs the
repository's deployment profile step by step; when a step fails, the steps
already applied are compensated in reverse order and the working tree is reset
to the commit it was on before the deployment started.
"""

__version__ = "1.0.0"

__all__ = ['__version__']
