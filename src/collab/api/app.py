"""FastAPI application wiring for the session simulator."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from collab.api import routes as session_routes
from collab.core.host import PlaybackHost
from collab.core.time import PlaybackConfig
from collab.persistence.script_io import load_script


def build_host() -> PlaybackHost:
    script_path = os.getenv("COLLAB_SCRIPT")
    script = load_script(script_path) if script_path else None
    return PlaybackHost(script=script, config=PlaybackConfig.from_env())


def create_app(host: PlaybackHost | None = None, autostart: bool = True) -> FastAPI:
    host = host or build_host()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if autostart:
            host.start()
        yield
        await host.shutdown()

    logging.basicConfig(level=os.getenv("COLLAB_LOG_LEVEL", "INFO"))
    session_routes.configure_session(host)
    app = FastAPI(title="collab session simulator", lifespan=lifespan)
    app.include_router(session_routes.router)
    app.state.host = host
    return app
