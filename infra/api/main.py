from __future__ import annotations

import argparse

import uvicorn

from core.config import settings
from core.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the LogoHub API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    configure_logging(settings.log_level)
    uvicorn.run(
        "infra.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
