"""Process entry point: `python -m wall`.

Shutdown waits at most SHUTDOWN_GRACE_SECONDS for in-flight requests, then
uvicorn force-closes them.
"""

import uvicorn

from wall.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "wall.main:app",
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_config=None,
    )


if __name__ == "__main__":
    main()
