from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import time
import uvicorn
from config import Settings, settings as default_settings
from database import build_engine, build_session_factory
from models import inventory as inventory_models
from crud.api.v1.endpoints import references, inventory, reports
from crud.references import seed_defaults
from utils.access import AccessGate
from utils.exception_handler import setup_exception_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None, engine=None) -> FastAPI:
    settings = settings or default_settings
    if engine is None:
        engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        inventory_models.Base.metadata.create_all(bind=engine)
        if settings.SEED_DEFAULTS:
            db = session_factory()
            try:
                seed_defaults(db)
            finally:
                db.close()
        if not app.state.access_gate.configured:
            logger.warning("ADMIN_KEY is not set; all write requests will be rejected")
        yield

    app = FastAPI(title="Stock Manager API", version="0.1.0", lifespan=lifespan)
    app.state.session_factory = session_factory
    app.state.access_gate = AccessGate(settings.ADMIN_KEY)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error processing %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"error": "Internal server error"})
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    setup_exception_handlers(app)

    app.include_router(references.router, prefix="/api", tags=["references"])
    app.include_router(inventory.router, prefix="/api", tags=["items"])
    app.include_router(reports.router, prefix="/api", tags=["reports"])

    @app.get("/health", tags=["system"])
    def health_check():
        return {"ok": True}

    mount_frontend(app, Path(settings.WEB_DIST))
    return app


def mount_frontend(app: FastAPI, web_dist: Path):
    index = web_dist / "index.html"
    if not index.is_file():
        logger.info("No built frontend at %s, serving the API only", web_dist)
        return

    if (web_dist / "assets").is_dir():
        app.mount("/assets", StaticFiles(directory=web_dist / "assets"), name="assets")

    @app.get("/{path:path}", include_in_schema=False)
    def serve_frontend(path: str):
        candidate = (web_dist / path).resolve()
        if path and candidate.is_file() and web_dist.resolve() in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(default_settings.LOG_LEVEL)
app = create_app()

if __name__ == '__main__':
    uvicorn.run("main:app", host=default_settings.HOST, port=default_settings.PORT, reload=False)
