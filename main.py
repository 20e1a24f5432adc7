"""
Autism Center Locator Backend
=============================
Entry point. Run with: uvicorn main:app --reload

Without a ``GEOAPIFY_API_KEY`` the center listing still works; directions
and geocoding answer 503 and ``/api/v1/admin/health`` reports ``degraded``.
"""

import uvicorn

from src.api.app import create_app
from src.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=True,
    )
