"""Run the API server: ``python -m ytgify_share.server``."""

import uvicorn

from ytgify_share.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "ytgify_share.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
