"""API layer package for FastAPI application and route composition."""

from .application import create_api_application

__all__ = ["create_api_application"]
