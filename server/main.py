"""
FastAPI server for Slide Studio

Hosts the YouTube upload endpoint that the publish workflow posts to.
Every failure is answered with a JSON ``{"error": ...}`` body.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.defaults import UPLOAD_ROUTE
from server.config import settings
from server.routes import youtube

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown logic"""
    Path(settings.artifact_dir).mkdir(parents=True, exist_ok=True)

    mode = "LIVE - uploads go to YouTube" if settings.provider_mode == "live" else "MOCK - uploads are simulated"
    logger.info(f"Slide Studio upload server {VERSION} ({settings.env}, debug={settings.debug})")
    logger.info(f"Provider mode: {mode}")
    logger.info(f"Upload limit: {settings.max_upload_size_mb}MB at POST {UPLOAD_ROUTE}")

    yield

    logger.info("Shutting down Slide Studio upload server")


app = FastAPI(
    title="Slide Studio",
    description="Slide-narration video publishing API",
    version=VERSION,
    lifespan=lifespan,
)

# Browser clients post the publish form cross-origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(youtube.router, prefix="/api/youtube", tags=["YouTube"])


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "slide-studio",
        "version": VERSION,
        "mode": settings.provider_mode,
        "max_upload_size_mb": settings.max_upload_size_mb,
    }


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": "Slide Studio",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "youtube": {
                "upload": f"POST {UPLOAD_ROUTE}",
            },
        },
    }


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid payload."})


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server.main:app", host="127.0.0.1", port=8000, reload=True, log_level="info")
