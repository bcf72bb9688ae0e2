from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import FastAPI

from roseboard import __version__
from roseboard.affirmation import generate
from roseboard.config import configure_logging, log_level
from roseboard.workspace import get_config, now_local, today_key

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Roseboard API",
    description="Backend for Roseboard - daily evening affirmations",
    version=__version__,
)


@app.get("/")
def read_root() -> dict[str, str]:
    return {
        "message": "Roseboard API",
        "docs": "/docs",
        "version": __version__,
    }


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/eod-message")
def api_eod_message() -> dict[str, Any]:
    """Today's affirmation, generated from the server's long-form date."""
    date = today_key(now_local(get_config()))
    message = generate(date)
    logger.debug("Evening message for %s", date)
    return {"message": message, "date": date}


def main() -> None:
    import uvicorn

    host = os.environ.get("ROSEBOARD_HOST", "127.0.0.1")
    port = int(os.environ.get("ROSEBOARD_PORT", "8000"))
    uvicorn.run(app, host=host, port=port, log_level=logging.getLevelName(log_level()).lower())


if __name__ == "__main__":
    main()
