"""
kgscope API Module - FastAPI Server

Provides REST API endpoints for:
- Render-ready graph models
- Filter options, legend and constraints
- Graph exports
"""

from .server import create_app, app_from_env, KGScopeServer

__all__ = ["create_app", "app_from_env", "KGScopeServer"]
