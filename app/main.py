import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api.routes_api import router as api_router
from app.api.routes_ui import router as ui_router
from app.core.config import get_settings
from app.services.sessions import registry

load_dotenv()

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

# Paths
BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    try:
        yield
    finally:
        registry.clear()
        try:
            await registry.gateway.aclose()
        except Exception as e:
            logger.error(f"Error closing TVMaze gateway: {e}")


app = FastAPI(
    title="Showarr",
    description="Browse TV shows and episodes from TVMaze",
    version="0.1.0",
    debug=get_settings().debug,
    lifespan=app_lifespan,
)

# Mount static files
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(ui_router)
app.include_router(api_router, prefix="/api")
