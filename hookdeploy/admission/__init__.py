"""
Webhook admission: turns inbound requests into events and decides whether they deploy.
"""

from .gate import AdmissionGate, parse_webhook_event, find_repository_by_token, branch_from_ref

__all__ = [
    'AdmissionGate',
    'parse_webhook_event',
    'find_repository_by_token',
    'branch_from_ref',
]
