"""FastAPI backend: job gateway for the retouch editor.

Holds the provider credentials so the browser never sees them.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from retouch.config import get_settings
from backend.deps import close_gateway

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_gateway()


app = FastAPI(
    title="Retouch Gateway",
    description="Inpainting and cleanup jobs proxied to remote inference providers.",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
cors_origins = settings.cors_origin_list
logger.info("CORS configured for origins: %s", cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

if not settings.replicate_api_token or not settings.replicate_inpaint_model:
    logger.warning("Replicate not fully configured; /api/inpaint will fail until "
                   "REPLICATE_API_TOKEN and REPLICATE_INPAINT_MODEL are set.")
if not settings.clipdrop_api_token:
    logger.warning("CLIPDROP_API_TOKEN not set; /api/clean will fail.")


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
class HealthResponse(BaseModel):
    status: str


@app.get("/health", response_model=HealthResponse)
@app.get("/api/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
from backend.routes import clean, inpaint  # noqa: E402

app.include_router(inpaint.router, prefix="/api", tags=["inpaint"])
app.include_router(clean.router, prefix="/api", tags=["clean"])

# Editor assets mount last; a catch-all "/" mount would shadow /api.
static_path = settings.static_path
if static_path is not None:
    if static_path.is_dir():
        app.mount("/", StaticFiles(directory=str(static_path), html=True), name="static")
        logger.info("Serving static files from %s", static_path)
    else:
        logger.warning("STATIC_DIR %s does not exist; static serving disabled", static_path)
