"""Process entry point: ``python -m duel_relay.main`` or the ``duel-relay`` script."""
from __future__ import annotations

import uvicorn

from .app import create_app
from .config import get_settings


def run() -> None:
    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
