"""CLI entry point for running the resource-cache service."""

import uvicorn

from .infra.config import get_settings


def main() -> None:
    """Run uvicorn with the default application."""

    settings = get_settings()
    uvicorn.run(
        "resource_cache.app.main:create_app",
        factory=True,
        host=settings.http_host,
        port=settings.http_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
