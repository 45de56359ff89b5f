"""Run FastAPI backend server."""

import os

import uvicorn

from retouch.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=os.environ.get("RETOUCH_ENV", "development") == "development",
    )
