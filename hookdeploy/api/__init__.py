"""
FastAPI application exposing the webhook endpoint.
"""
