"""
Receipt Price Advocate API - Main Application
FastAPI application that reads receipt transcripts and flags overpriced items

Run with: python main.py
Access API docs at: http://localhost:8000/docs
"""

from contextlib import asynccontextmanager
import sys
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.models import HealthResponse
from api.routes import processor, router
from utils import setup_logging

log_config = processor.config.get("logging", {})
setup_logging(
    log_file=log_config.get("file", "logs/receipt_advocate.log"),
    level=log_config.get("level", "INFO"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Close HTTP clients held by the price source
    await processor.aclose()


# Create FastAPI app
app = FastAPI(
    title="Receipt Price Advocate API",
    description="Parse receipt OCR text and compare every item against a reference market",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Receipt Price Advocate API",
        "version": "1.0.0",
        "price_source": processor.price_source.name,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
