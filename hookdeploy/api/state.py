"""
Shared application state populated by the lifespan handler.
"""
from typing import Any, Dict

app_state: Dict[str, Any] = {}
