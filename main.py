"""
NOC Registry - entry point
Run with: uvicorn main:app --port 5000
"""

from app.config import settings
from app.main import app  # noqa: F401


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug
    )
