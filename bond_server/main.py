"""
Bond server: JSON CRUD for bonds behind bearer-token credentials.
Port 7000 by default.
"""
import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bond_server.config import DATABASE_URL
from bond_server.controller import BondController
from bond_server.errors import install_error_handlers
from bond_server.routes import router as bonds_router
from bond_server.store import BondStore

logger = logging.getLogger(__name__)


def create_app(store: BondStore | None = None, clock: Callable[[], float] | None = None) -> FastAPI:
    """
    Build the app. The store (and its connection pool) is created once at startup
    from DATABASE_URL unless one is passed in.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = store is None
        active = BondStore.from_url(DATABASE_URL) if owned else store
        app.state.controller = BondController(active, clock) if clock else BondController(active)
        logger.info("Bond store ready (%s)", active.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            if owned:
                active.close()

    app = FastAPI(title="Bond Server", version="0.1.0", lifespan=lifespan)
    install_error_handlers(app)
    app.include_router(bonds_router)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "bond_server"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bond_server.main:app",
        host="127.0.0.1",
        port=7000,
        reload=True,
    )
