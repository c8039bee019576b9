"""
Uvicorn Startup Script
----------------------
Runs the JWT auth API with uvicorn.
"""

import sys
import os

# Add project root to Python path before importing the app package
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import uvicorn  # noqa: E402
from app.core.config_manager import settings  # noqa: E402


if __name__ == "__main__":
    uvicorn.run(
        app="app.app:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
