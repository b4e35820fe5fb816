import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from backend.app.api.analyze import router as analyze_router
from backend.app.core.config import settings
from backend.app.core.errors import AnalysisError, InvalidRequestError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Lichess upstream: {settings.lichess_url} (timeout {settings.fetch_timeout_seconds}s)")
    yield

app = FastAPI(title="Lichess Tournament Analysis", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error handling ---
@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed ({exc.category}): {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected ({exc.category}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = InvalidRequestError("Request body must be JSON with string fields tournamentId and type.")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.url.path}")
    error = AnalysisError(str(exc) or "Server error")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())

# Register routers (before the static mount, which catches everything else)
app.include_router(analyze_router, prefix="/api", tags=["Analysis"])

static_path = Path(settings.static_dir)
if not static_path.is_absolute():
    static_path = PROJECT_ROOT / static_path

if static_path.is_dir():
    app.mount("/", StaticFiles(directory=static_path, html=True), name="static")
else:
    logger.warning(f"Static directory {static_path} not found, serving API only")

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
