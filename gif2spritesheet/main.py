"""Entry point for the gif2spritesheet web service."""

from __future__ import annotations

import logging
import os
import sys


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def run() -> int:
    """Serve the HTTP API with uvicorn."""

    import uvicorn

    configure_logging()
    uvicorn.run(
        "gif2spritesheet.web.server:app",
        host=os.environ.get("G2S_HOST", "127.0.0.1"),
        port=int(os.environ.get("G2S_PORT", "8000")),
    )
    return 0


if __name__ == "__main__":
    sys.exit(run())
