"""Run with: python -m baby_tracker"""

import uvicorn

from baby_tracker.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "baby_tracker.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
