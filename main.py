from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

import os
import logging

from database import init_db
from routes import bookmarks, categories

# ----------------------------------------------------------------------
# LOGGING
# ----------------------------------------------------------------------
logger = logging.getLogger("uvicorn")
logger.setLevel(logging.INFO)

# ----------------------------------------------------------------------
# FASTAPI INITIALISATION
# ----------------------------------------------------------------------
app = FastAPI(
    title="Bookmark Manager API",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# ----------------------------------------------------------------------
# CORS CONFIGURATION
# ----------------------------------------------------------------------
extra_origins = os.getenv("CORS_ORIGINS", "")
extra = [o.strip() for o in extra_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        *extra,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    init_db()


# ----------------------------------------------------------------------
# ERROR FORMAT — {"error": "..."}
# ----------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query"))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{field}: {message}" if field else message},
    )


# ----------------------------------------------------------------------
# API ROUTES
# ----------------------------------------------------------------------
app.include_router(bookmarks.router, prefix="/api")
app.include_router(categories.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}


# ----------------------------------------------------------------------
# CLIENT BUILD (production only)
# ----------------------------------------------------------------------
CLIENT_BUILD_DIR = os.getenv(
    "CLIENT_BUILD_DIR",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "client", "dist"),
)


def resolve_client_file(build_dir: str, full_path: str) -> str:
    """File inside ``build_dir`` for ``full_path``, else the SPA ``index.html``."""
    root_dir = os.path.realpath(build_dir)
    candidate = os.path.realpath(os.path.join(root_dir, full_path))
    if full_path and candidate.startswith(root_dir + os.sep) and os.path.isfile(candidate):
        return candidate
    return os.path.join(root_dir, "index.html")


def setup_client_routes(target: FastAPI, build_dir: str, production: bool) -> None:
    if production and os.path.isdir(build_dir):
        assets_dir = os.path.join(build_dir, "assets")
        if os.path.isdir(assets_dir):
            target.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

        @target.get("/{full_path:path}", include_in_schema=False)
        def serve_client(full_path: str):
            return FileResponse(resolve_client_file(build_dir, full_path))

        logger.info(f"✅ Serving client build from {build_dir}")
        return

    @target.get("/")
    def root():
        return {"message": "Bookmark Manager API is running"}


setup_client_routes(app, CLIENT_BUILD_DIR, os.getenv("APP_ENV") == "production")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
