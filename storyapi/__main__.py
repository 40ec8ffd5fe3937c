"""Run the API with uvicorn: ``python -m storyapi``."""
from __future__ import annotations

import argparse

import uvicorn

from storyapi.app import create_app
from storyapi.core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the story API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args()
    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        timeout_keep_alive=20,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
