"""Run with: python -m quote_scanner.website_api"""

import uvicorn
from .config import settings

if __name__ == "__main__":
    uvicorn.run(
        "quote_scanner.website_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
