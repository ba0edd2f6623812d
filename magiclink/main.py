import os
import asyncio
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from . import utils
from .registry import LinkRegistry
from .routes.links import router as links_router
from .routes.viewer import ViewerRouter
from .sweeper import sweep_expired

# Configuration from environment variables
VERSION = "1.0.0"
ADMIN_SECRET = os.getenv("ADMIN_SECRET", "preview-admin-2024")
DEFAULT_TTL = utils.parse_time(os.getenv("DEFAULT_TTL", "2h"))
SWEEP_INTERVAL = utils.parse_time(os.getenv("SWEEP_INTERVAL", "10m"))
MAX_TTL = utils.parse_time(os.getenv("MAX_TTL", "365d"))
PREVIEW_FILE = Path(os.getenv("PREVIEW_FILE", Path(__file__).parent / "preview.html"))
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", "public"))
BRAND_NAME = os.getenv("BRAND_NAME", "Magic Link")
PORT = int(os.getenv("PORT", "3000"))


def create_app(
    admin_secret: str = ADMIN_SECRET,
    registry: LinkRegistry | None = None,
    preview_html: str | None = None,
    sweep_interval: float = SWEEP_INTERVAL,
    max_ttl: int = MAX_TTL,
    public_dir: Path | None = PUBLIC_DIR,
    brand: str = BRAND_NAME,
) -> FastAPI:
    if registry is None:
        registry = LinkRegistry(default_ttl_ms=DEFAULT_TTL * 1000)
    if preview_html is None:
        # Read the protected page once at startup
        preview_html = PREVIEW_FILE.read_text(encoding="utf-8")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started = time.monotonic()
        print(f"[Server] {brand} magic link server v{VERSION}")
        print(f"[Server] Admin secret: {admin_secret[:4]}****")

        # Start background sweep task
        sweep_task = asyncio.create_task(sweep_expired(registry, sweep_interval))

        yield

        # Cancel sweep task on shutdown
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass

    app = FastAPI(title="Magic Link API", version=VERSION, lifespan=lifespan)
    app.state.registry = registry
    app.state.admin_secret = admin_secret
    app.state.max_ttl_ms = max_ttl * 1000
    app.state.started = time.monotonic()

    viewer_router = ViewerRouter(preview_html=preview_html, brand=brand)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": VERSION,
            "uptime": round(time.monotonic() - app.state.started, 3),
        }

    # Include routers
    app.include_router(links_router)
    app.include_router(viewer_router.router)

    # Static assets go last so they never shadow the routes above
    if public_dir is not None and public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="public")

    return app


app = create_app()


def serve():
    """Console entry point: run the server on $PORT."""
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    serve()
